"""
Error types.

Every failure the fetchers can hit falls into one of four categories:

- TransportError   network / connection failure
- ProtocolError    the service answered with a non-200 status
- ExtractionError  an expected pattern was not found in a response
- StorageError     the cache tree could not be written

Components only raise these; cli.main() is the one place that turns them
into an exit status.
"""

from __future__ import annotations

from pathlib import Path


class RegfetchError(Exception):
    """Base class for all errors surfaced to the command line."""


class TransportError(RegfetchError):
    def __init__(self, what: str, cause: Exception) -> None:
        super().__init__(f"ERROR: Unable to fetch {what}. `{cause}`.")
        self.what = what
        self.cause = cause


class ProtocolError(RegfetchError):
    def __init__(self, what: str, status_code: int) -> None:
        super().__init__(f"ERROR: Unable to fetch {what}. HTTP status code: {status_code}.")
        self.what = what
        self.status_code = status_code


# Reasons carried by ExtractionError
NO_MATCH = "no match"
MALFORMED = "malformed document"
MISSING_GROUP = "missing group"


class ExtractionError(RegfetchError):
    """
    An expected field could not be extracted.

    `field` names the extraction that failed, `reason` is one of
    NO_MATCH, MALFORMED or MISSING_GROUP.
    """

    def __init__(self, field: str, reason: str, hint: str = "") -> None:
        msg = f"ERROR: Unable to extract {field} ({reason})."
        if hint:
            msg = f"{msg} {hint}"
        super().__init__(msg)
        self.field = field
        self.reason = reason


class StorageError(RegfetchError):
    def __init__(self, path: str | Path, cause: OSError) -> None:
        super().__init__(f"ERROR: Unable to write {path}. `{cause}`.")
        self.path = Path(path)
        self.cause = cause
