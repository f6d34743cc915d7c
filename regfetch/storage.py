"""
On-disk cache tree.

Layout under the configured root:

    <root>/registrar/<DEPT>/catalogue.html
    <root>/registrar/<DEPT>/prereqs.html
    <root>/registrar/<DEPT>/soc_<term>.txt
    <root>/DGW_Report-<studentID>.xsl

'/' in department codes becomes '_' in directory names.
An artifact either exists (complete) or does not; nothing is updated in place.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from regfetch.errors import StorageError


class CacheLayout:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @property
    def registrar_dir(self) -> Path:
        return self.root / "registrar"

    def department_dir(self, dept: str) -> Path:
        return self.registrar_dir / dept.replace("/", "_")

    def catalogue_path(self, dept: str) -> Path:
        return self.department_dir(dept) / "catalogue.html"

    def prereqs_path(self, dept: str) -> Path:
        return self.department_dir(dept) / "prereqs.html"

    def schedule_path(self, dept: str, term: str) -> Path:
        return self.department_dir(dept) / f"soc_{term}.txt"

    def audit_path(self, student_id: str) -> Path:
        return self.root / f"DGW_Report-{student_id}.xsl"


def write_artifact(path: str | Path, text: str) -> Path:
    """
    Write `text` to `path`, creating parent directories if needed.

    The content goes to a temporary sibling first and is then renamed into
    place: `path` only ever exists complete.
    """
    out = Path(path)
    tmp_name = None
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{out.name}.", dir=out.parent)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, out)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(out, e) from e
    return out
