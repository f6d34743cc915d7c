"""
Central data model definitions used across the project.

- StudentRecord      everything the audit request needs about one student
- DepartmentOptions  what a department-option lookup returns
- DepartmentTask     one unit of batch work (department, optional term)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, Optional

from regfetch.errors import MISSING_GROUP, ExtractionError
from regfetch.terms import term_label


@dataclass(frozen=True)
class StudentRecord:
    """
    Student identity and program attributes scraped from DegreeWorks.

    Codes are what DegreeWorks stores, names are the human-readable labels
    resolved from its picklists.
    """

    student_id: str
    school: str
    degree_code: str
    degree_name: str
    level_code: str
    level_name: str
    major_code: str
    major_name: str

    def __post_init__(self) -> None:
        # A stage must never be fed an incomplete record.
        for f in fields(self):
            if not str(getattr(self, f.name)).strip():
                raise ExtractionError(f.name, MISSING_GROUP)


@dataclass(frozen=True)
class DepartmentOptions:
    """
    Department code -> option value (URL or form value), plus the term the
    remote page is currently showing, if it has one.
    """

    options: Dict[str, str] = field(default_factory=dict)
    term: Optional[str] = None


@dataclass(frozen=True)
class DepartmentTask:
    dept: str
    option: str
    term: Optional[str] = None

    @property
    def label(self) -> str:
        """
        Progress label, e.g. 'COMPSCI' or 'F24: COMPSCI'.
        """
        if self.term is None:
            return self.dept
        return f"{term_label(self.term)}: {self.dept}"
