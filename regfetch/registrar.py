"""
Registrar pages: department-option lookups and the per-department fetches.

Three sources, each with an index page listing departments:

- Course Catalogue   department -> catalogue page URL
- Prerequisites      department -> 'dept' form value (+ current term)
- WebSOC             department -> 'Dept' form value (+ current term)

The fetch functions return the response body verbatim; parsing the cached
files is not this project's job.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import urlencode, urljoin

from bs4 import BeautifulSoup

from regfetch.client import request_text
from regfetch.config import CATALOGUE_URL, PREREQS_URL, WEBSOC_URL
from regfetch.errors import MALFORMED, ExtractionError
from regfetch.model import DepartmentOptions

logger = logging.getLogger(__name__)

# "Computer Science (COMPSCI)" -> COMPSCI
_CODE_IN_PARENS = re.compile(r"\(([^()]+)\)\s*$")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _select_options(soup: BeautifulSoup, name: str, page: str) -> Dict[str, str]:
    """
    Map each option of <select name=...> to its form value.

    Keys are the stripped values (department codes), values are the raw
    values as the form expects them back.
    """
    select = soup.find("select", attrs={"name": name})
    if select is None:
        raise ExtractionError(f"{page} <select name={name}>", MALFORMED)

    out: Dict[str, str] = {}
    for opt in select.find_all("option"):
        value = opt.get("value")
        if value is None:
            continue
        code = value.strip()
        if code:
            out[code] = value
    return out


def _selected_value(soup: BeautifulSoup, name: str, page: str) -> str:
    """
    Value of the pre-selected option (or the first one) of <select name=...>.
    """
    select = soup.find("select", attrs={"name": name})
    if select is None:
        raise ExtractionError(f"{page} <select name={name}>", MALFORMED)

    opt = select.find("option", selected=True) or select.find("option")
    value = opt.get("value", "").strip() if opt is not None else ""
    if not value:
        raise ExtractionError(f"{page} selected {name}", MALFORMED)
    return value


def _require(options: Dict[str, str], page: str) -> Dict[str, str]:
    if not options:
        raise ExtractionError(f"{page} departments", MALFORMED, "No departments listed.")
    return options


# ---------------------------------------------------------------------------
# Department-option lookups
# ---------------------------------------------------------------------------


def parse_catalogue_index(html: str, base_url: str = CATALOGUE_URL) -> DepartmentOptions:
    soup = BeautifulSoup(html, "html.parser")

    options: Dict[str, str] = {}
    for a in soup.select("a[href*='/allcourses/']"):
        href = a.get("href")
        m = _CODE_IN_PARENS.search(a.get_text(" ", strip=True))
        if not href or not m:
            continue
        code = m.group(1).strip()
        # index pages list some departments twice (A-Z and by school)
        options.setdefault(code, urljoin(base_url, href))

    return DepartmentOptions(options=_require(options, "catalogue"))


def parse_prereq_index(html: str) -> DepartmentOptions:
    soup = BeautifulSoup(html, "html.parser")
    term = _selected_value(soup, "term", "prerequisites")
    options = _select_options(soup, "dept", "prerequisites")
    return DepartmentOptions(options=_require(options, "prerequisites"), term=term)


def parse_websoc_index(html: str) -> DepartmentOptions:
    soup = BeautifulSoup(html, "html.parser")
    term = _selected_value(soup, "YearTerm", "WebSOC")
    options = _select_options(soup, "Dept", "WebSOC")
    options.pop("ALL", None)
    return DepartmentOptions(options=_require(options, "WebSOC"), term=term)


def all_departments(client: Any) -> DepartmentOptions:
    html = request_text(client, "Course Catalogue index", CATALOGUE_URL)
    found = parse_catalogue_index(html)
    logger.info("Course Catalogue lists %d departments", len(found.options))
    return found


def prereq_department_options(client: Any) -> DepartmentOptions:
    html = request_text(client, "Prerequisites index", PREREQS_URL)
    found = parse_prereq_index(html)
    logger.info("Prerequisites: term %s, %d departments", found.term, len(found.options))
    return found


def schedule_department_options(client: Any) -> DepartmentOptions:
    html = request_text(client, "WebSOC index", WEBSOC_URL)
    found = parse_websoc_index(html)
    logger.info("WebSOC: term %s, %d departments", found.term, len(found.options))
    return found


# ---------------------------------------------------------------------------
# Per-department fetches
# ---------------------------------------------------------------------------


def fetch_catalogue(client: Any, url: str) -> str:
    return request_text(client, "Course Catalogue page", url)


def fetch_prerequisites(client: Any, term: str, option: str) -> str:
    params = {"term": term, "dept": option, "action": "view_all"}
    return request_text(client, "Prerequisites page", PREREQS_URL, params=params)


def websoc_form(term: str, option: str, course_num: Optional[str] = None) -> str:
    """
    Form body for a WebSOC text-results query of one department.
    """
    form = [
        ("Submit", "Display Text Results"),
        ("YearTerm", term),
        ("ShowComments", "on"),
        ("ShowFinals", "on"),
        ("Breadth", "ANY"),
        ("Dept", option),
        ("CourseNum", course_num or ""),
        ("Division", "ANY"),
        ("CourseCodes", ""),
        ("InstrName", ""),
        ("CourseTitle", ""),
        ("ClassType", "ALL"),
        ("Units", ""),
        ("Days", ""),
        ("StartTime", ""),
        ("EndTime", ""),
        ("MaxCap", ""),
        ("FullCourses", "ANY"),
        ("FontSize", "100"),
        ("CancelledCourses", "Exclude"),
        ("Bldg", ""),
        ("Room", ""),
    ]
    return urlencode(form)


def fetch_schedule(client: Any, term: str, option: str) -> str:
    return request_text(client, "WebSOC schedule", WEBSOC_URL, body=websoc_form(term, option))
