"""
Work enumeration: turn a department-option lookup into DepartmentTasks.

Task order follows the requested department subset, or the lookup's own
order when no subset is given; only the progress display depends on it.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from regfetch.model import DepartmentOptions, DepartmentTask
from regfetch.terms import archive_terms, is_academic_term_now

logger = logging.getLogger(__name__)


class ScheduleUnavailable(Exception):
    """
    WebSOC is not in an academic term right now; there is nothing to fetch.

    Not an error: the caller reports it and exits normally.
    """

    def __init__(self, term: Optional[str]) -> None:
        super().__init__(f"WebSOC is not currently in an academic term ({term}).")
        self.term = term


def select_departments(options: Dict[str, str], depts: Optional[Sequence[str]] = None) -> List[Tuple[str, str]]:
    """
    (dept, option) pairs for the requested subset; unknown codes are dropped.
    """
    if not depts:
        return list(options.items())

    out: List[Tuple[str, str]] = []
    for dept in depts:
        option = options.get(dept)
        if option is None:
            logger.debug("Skipping unknown department %r", dept)
            continue
        out.append((dept, option))
    return out


def catalogue_tasks(found: DepartmentOptions, depts: Optional[Sequence[str]] = None) -> List[DepartmentTask]:
    return [DepartmentTask(dept=d, option=o) for d, o in select_departments(found.options, depts)]


def prereq_tasks(found: DepartmentOptions, depts: Optional[Sequence[str]] = None) -> List[DepartmentTask]:
    # found.term is the prerequisite page's own term code, not a WebSOC term;
    # it stays out of the tasks and is passed to the fetch directly.
    return [DepartmentTask(dept=d, option=o) for d, o in select_departments(found.options, depts)]


def _cross(terms: Iterable[str], pairs: List[Tuple[str, str]]) -> List[DepartmentTask]:
    return [DepartmentTask(dept=d, option=o, term=t) for t in terms for d, o in pairs]


def schedule_tasks(
    found: DepartmentOptions,
    depts: Optional[Sequence[str]] = None,
    archive: bool = False,
    year: Optional[int] = None,
    today: Optional[date] = None,
) -> List[DepartmentTask]:
    """
    Schedule tasks for the current WebSOC term, or for every archive term.

    Raises ScheduleUnavailable outside the academic calendar.
    """
    current = found.term
    if current is None or not is_academic_term_now(current, today):
        raise ScheduleUnavailable(current)

    pairs = select_departments(found.options, depts)
    if not archive:
        return _cross([current], pairs)

    terms = archive_terms(current, year)
    logger.info("Archive terms: %s", ", ".join(terms))
    return _cross(terms, pairs)
