"""
Academic term arithmetic.

WebSOC identifies a term by a 'YYYY-NN' code, where YYYY is the calendar
year the term takes place in and NN orders the terms within that year:

    2025-03  Winter 2025
    2025-14  Spring 2025
    2025-25  Summer Session 1 (also 39, 51, 76 for the other summer terms)
    2025-92  Fall 2025

Because the suffixes increase through the calendar year, plain string
comparison of two codes is chronological comparison.

Academic year y runs Fall y -> Winter y+1 -> Spring y+1 and starts on
September 1. Only Fall, Winter and Spring count as academic terms.
"""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional, Tuple

FALL = "92"
WINTER = "03"
SPRING = "14"
SUMMER = ("25", "39", "51", "76")

_TERM_RE = re.compile(r"^(\d{4})-(\d{2})$")


def _split(term: str) -> Tuple[int, str]:
    """
    '2024-92' -> (2024, '92'). Raises ValueError for anything else.
    """
    m = _TERM_RE.match(term.strip())
    if not m:
        raise ValueError(f"Invalid term code: {term!r}")
    return int(m.group(1)), m.group(2)


def current_academic_year(today: Optional[date] = None) -> int:
    """
    Academic year containing `today` (default: the current date).
    """
    today = today or date.today()
    return today.year if today.month >= 9 else today.year - 1


def fall_term(year: int) -> str:
    return f"{year:04d}-{FALL}"


def winter_term(year: int) -> str:
    return f"{year + 1:04d}-{WINTER}"


def spring_term(year: int) -> str:
    return f"{year + 1:04d}-{SPRING}"


def _suffix(term: str) -> Optional[str]:
    try:
        return _split(term)[1]
    except ValueError:
        return None


def is_fall(term: str) -> bool:
    return _suffix(term) == FALL


def is_winter(term: str) -> bool:
    return _suffix(term) == WINTER


def is_spring(term: str) -> bool:
    return _suffix(term) == SPRING


def is_academic_term(term: str) -> bool:
    """
    True for Fall, Winter and Spring quarters (summer sessions are not).
    """
    return _suffix(term) in (FALL, WINTER, SPRING)


def academic_year(term: str) -> int:
    """
    Academic year a quarter belongs to; inverse of fall_term/winter_term/spring_term.
    """
    year, suffix = _split(term)
    if suffix == FALL:
        return year
    if suffix in (WINTER, SPRING):
        return year - 1
    raise ValueError(f"Not an academic quarter: {term!r}")


def previous_term(term: str) -> str:
    """
    The academic quarter right before `term`.
    """
    year = academic_year(term)
    if is_spring(term):
        return winter_term(year)
    if is_winter(term):
        return fall_term(year)
    return spring_term(year - 1)


def term_window(term: str) -> Tuple[date, date]:
    """
    First and last day (inclusive) of a quarter.

    Windows are contiguous across the academic year so that every day from
    September to June belongs to exactly one quarter.
    """
    year, suffix = _split(term)
    if suffix == FALL:
        return date(year, 9, 1), date(year, 12, 31)
    if suffix == WINTER:
        return date(year, 1, 1), date(year, 3, 31)
    if suffix == SPRING:
        return date(year, 4, 1), date(year, 6, 30)
    raise ValueError(f"Not an academic quarter: {term!r}")


def is_academic_term_now(term: str, today: Optional[date] = None) -> bool:
    """
    True iff `term` is a Fall/Winter/Spring quarter and `today` lies in it.

    WebSOC switches its default YearTerm to the next quarter a few weeks
    early for enrollment; during those weeks the selected term is not "now"
    and schedules are reported as unavailable.
    """
    if not is_academic_term(term):
        return False
    today = today or date.today()
    start, end = term_window(term)
    return start <= today <= end


def term_label(term: str) -> str:
    """
    Short label for progress output: '2024-92' -> 'F24'.
    """
    try:
        year, suffix = _split(term)
    except ValueError:
        return term
    letter = {FALL: "F", WINTER: "W", SPRING: "S"}.get(suffix)
    if letter is None:
        return term
    return f"{letter}{year % 100:02d}"


def archive_terms(
    current: str,
    year: Optional[int] = None,
    years: int = 3,
) -> List[str]:
    """
    Historical quarters to fetch in archive mode, newest first.

    Walks backward one quarter at a time from Spring of academic year `year`
    (default: the academic year `current` belongs to) over `years` academic
    years and keeps only quarters at or before `current`.
    """
    if year is None:
        year = academic_year(current)

    out: List[str] = []
    term = spring_term(year)
    for _ in range(3 * years):
        if term <= current:
            out.append(term)
        term = previous_term(term)
    return out
