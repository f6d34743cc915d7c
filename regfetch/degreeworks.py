"""
DegreeWorks audit retrieval.

Three dependent requests against IRISLink.cgi, all carrying the caller's
session cookie:

1. identity    SD2STUCON -> student id (hidden STUID input)
2. details     SD2STUGID -> school, degree, level and major codes, plus the
               picklists that turn those codes into labels
3. audit       WEB31 report built from everything above

Each stage either returns complete data or raises; nothing is retried.
"""

from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple
from urllib.parse import quote_plus

from regfetch.client import request_text
from regfetch.config import DEGREEWORKS_URL
from regfetch.extract import Picklist, extract, extract_block, extract_groups
from regfetch.model import StudentRecord
from regfetch.storage import CacheLayout, write_artifact

logger = logging.getLogger(__name__)

HTML_PAGE = "DegreeWorks HTML file"
XML_PAGE = "DegreeWorks XML file"

STUDENT_ID_RE = r'<input type="hidden" name="STUID" value="(\d*)">'

GOAL_RE = (
    r'<GoalDtl\b.*?\bSchool="(?P<school>[^"]*)"'
    r'.*?\bDegree="(?P<degree_code>[^"]*)"'
    r'.*?\bStuLevel="(?P<level_code>[^"]*)"'
    r".*?</GoalDtl>"
)
MAJOR_RE = r'<GoalDataDtl\b[^>]*?\bGoalCode="MAJOR"[^>]*?\bGoalValue="([^"]*)"'

LEVEL_PICKLIST = "sLevelPicklist"
DEGREE_PICKLIST = "sDegreePicklist"
MAJOR_PICKLIST = "sMajorPicklist"


# ---------------------------------------------------------------------------
# Stage 1 + 2
# ---------------------------------------------------------------------------


def fetch_student_id(client: Any, cookie: str) -> str:
    body = "SERVICE=SCRIPTER&SCRIPT=SD2STUCON"
    page = request_text(client, HTML_PAGE, DEGREEWORKS_URL, body=body, cookie=cookie)
    # A missing STUID almost always means the cookie is invalid or expired.
    return extract(STUDENT_ID_RE, page, "student ID", hint="Invalid cookies.")


def parse_student_details(student_id: str, page: str) -> StudentRecord:
    """
    Build a StudentRecord from an SD2STUGID response.
    """
    data = extract_block(page, "<StudentData>", "</StudentData>", "student data")
    goal = extract_groups(GOAL_RE, data, "student goal")
    major_code = extract(MAJOR_RE, data, "student major code")

    levels = Picklist.parse(page, LEVEL_PICKLIST)
    degrees = Picklist.parse(page, DEGREE_PICKLIST)
    majors = Picklist.parse(page, MAJOR_PICKLIST)

    return StudentRecord(
        student_id=student_id,
        school=goal["school"],
        degree_code=goal["degree_code"],
        degree_name=degrees.lookup(goal["degree_code"]),
        level_code=goal["level_code"],
        level_name=levels.lookup(goal["level_code"]),
        major_code=major_code,
        major_name=majors.lookup(major_code),
    )


def fetch_student_details(client: Any, cookie: str, student_id: str) -> StudentRecord:
    body = f"SERVICE=SCRIPTER&SCRIPT=SD2STUGID&STUID={student_id}&DEBUG=OFF"
    page = request_text(client, HTML_PAGE, DEGREEWORKS_URL, body=body, cookie=cookie)
    return parse_student_details(student_id, page)


# ---------------------------------------------------------------------------
# Stage 3
# ---------------------------------------------------------------------------


def form_label(label: str) -> str:
    """
    Picklist labels arrive HTML-escaped ('Engineering &amp; Science') and may
    contain characters that are unsafe in a form body: unescape, then
    percent-encode.
    """
    return quote_plus(html.unescape(label))


class AuditRequest:
    """
    WEB31 audit request for one student.

    IRISLink expects this exact field order; fields with a value of None are
    sent as a bare name. Values are forwarded as-is except the level and
    major labels, which go through form_label().
    """

    def __init__(self, record: StudentRecord) -> None:
        self.record = record

    def fields(self) -> List[Tuple[str, Optional[str]]]:
        r = self.record
        return [
            ("SERVICE", "SCRIPTER"),
            ("REPORT", "WEB31"),
            ("SCRIPT", "SD2GETAUD%26ContentType%3Dxml"),
            ("USERID", r.student_id),
            ("USERCLASS", "STU"),
            ("BROWSER", "NOT-NAV4"),
            ("ACTION", "REVAUDIT"),
            ("AUDITTYPE", None),
            ("DEGREETERM", "ACTV"),
            ("INTNOTES", None),
            ("INPROGRESS", "N"),
            ("CUTOFFTERM", "ACTV"),
            ("REFRESHBRDG", "N"),
            ("AUDITID", None),
            ("JSERRORCALL", "SetError"),
            ("NOTENUM", None),
            ("NOTETEXT", None),
            ("NOTEMODE", None),
            ("PENDING", None),
            ("INTERNAL", None),
            ("RELOADSEP", "TRUE"),
            ("PRELOADEDPLAN", None),
            ("ContentType", "xml"),
            ("STUID", r.student_id),
            ("SCHOOL", r.school),
            ("STUSCH", r.school),
            ("DEGREE", r.degree_code),
            ("STUDEG", r.degree_code),
            ("STUDEGLIT", r.degree_name),
            ("STUDI", None),
            ("STULVL", form_label(r.level_name)),
            ("STUMAJLIT", form_label(r.major_name)),
            ("STUCATYEAR", None),
            ("CLASSES", None),
            ("DEBUG", "OFF"),
        ]

    def encode(self) -> str:
        return "&".join(name if value is None else f"{name}={value}" for name, value in self.fields())


def fetch_audit(client: Any, cookie: str, record: StudentRecord) -> str:
    body = AuditRequest(record).encode()
    return request_text(client, XML_PAGE, DEGREEWORKS_URL, body=body, cookie=cookie)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def retrieve_audit(client: Any, cookie: str, student_id: Optional[str] = None) -> Tuple[StudentRecord, str]:
    """
    Run all stages and return (record, audit document).

    The identity stage is skipped when `student_id` is given.
    """
    if not student_id:
        logger.info("Resolving student ID from session")
        student_id = fetch_student_id(client, cookie)

    logger.info("Fetching student details for %s", student_id)
    record = fetch_student_details(client, cookie, student_id)
    logger.debug("Student record: %s", record)

    logger.info("Fetching audit (%s, %s)", record.degree_name, record.major_name)
    return record, fetch_audit(client, cookie, record)


def save_audit(layout: CacheLayout, student_id: str, document: str) -> Path:
    return write_artifact(layout.audit_path(student_id), document)
