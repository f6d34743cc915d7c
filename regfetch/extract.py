"""
Pattern-based field extraction from raw HTML / text responses.

None of the registrar pages has a stable machine-readable contract, so
fields are pulled out with regular expressions. Every helper either returns
a non-empty value or raises ExtractionError naming the field; there are no
partial or default results.
"""

from __future__ import annotations

import re
from typing import Dict, Pattern, Union

from regfetch.errors import MALFORMED, MISSING_GROUP, NO_MATCH, ExtractionError

PatternLike = Union[str, Pattern[str]]


def _compile(pattern: PatternLike) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern, re.DOTALL)
    return pattern


def extract(pattern: PatternLike, text: str, field: str, hint: str = "") -> str:
    """
    Return the first capture group of `pattern` in `text`.
    """
    m = _compile(pattern).search(text)
    if m is None:
        raise ExtractionError(field, NO_MATCH, hint)
    if m.re.groups < 1 or not m.group(1):
        raise ExtractionError(field, MISSING_GROUP, hint)
    return m.group(1)


def extract_groups(pattern: PatternLike, text: str, field: str) -> Dict[str, str]:
    """
    Return all named groups of `pattern` in `text`.

    Every named group must have captured something; the error names the
    first one that did not (e.g. 'student details: major_code').
    """
    rx = _compile(pattern)
    m = rx.search(text)
    if m is None:
        raise ExtractionError(field, NO_MATCH)

    groups: Dict[str, str] = {}
    for name in rx.groupindex:
        value = m.group(name)
        if not value:
            raise ExtractionError(f"{field}: {name}", MISSING_GROUP)
        groups[name] = value
    return groups


def extract_block(text: str, start: str, end: str, field: str) -> str:
    """
    Return the sub-document between the `start` and `end` markers.
    """
    i = text.find(start)
    if i < 0:
        raise ExtractionError(field, MALFORMED, f"Missing {start!r}.")
    j = text.rfind(end)
    if j < i + len(start):
        raise ExtractionError(field, MALFORMED, f"Missing {end!r}.")
    return text[i + len(start) : j]


# ---------------------------------------------------------------------------
# DegreeWorks picklists
# ---------------------------------------------------------------------------

# sMajorPicklist[sMajorPicklist.length] = new DataItem("201  ", "Computer Science  ");
_PICKLIST_ITEM = (
    r"{name}\[{name}\.length\]\s*=\s*new DataItem\(\s*"
    r'"(?P<code>[^"]*)"\s*,\s*"(?P<label>[^"]*)"\s*\);'
)


class Picklist:
    """
    Code -> label mapping parsed once from one of the JavaScript lookup
    tables DegreeWorks embeds in its pages.
    """

    def __init__(self, name: str, items: Dict[str, str]) -> None:
        self.name = name
        self.items = dict(items)

    @classmethod
    def parse(cls, text: str, name: str) -> "Picklist":
        rx = re.compile(_PICKLIST_ITEM.format(name=re.escape(name)))
        items: Dict[str, str] = {}
        for m in rx.finditer(text):
            code = m.group("code").rstrip()
            # first entry wins, as it would for a top-down scan
            if code and code not in items:
                items[code] = m.group("label").rstrip()
        if not items:
            raise ExtractionError(name, MALFORMED, "Lookup table not found.")
        return cls(name, items)

    def lookup(self, code: str) -> str:
        label = self.items.get(code.rstrip())
        if not label:
            raise ExtractionError(f"{self.name}[{code}]", NO_MATCH)
        return label

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.rstrip() in self.items
