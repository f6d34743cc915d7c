"""
Unit tests for the on-disk cache tree.

Storage contract:
- <root>/registrar/<DEPT>/{catalogue.html,prereqs.html,soc_<term>.txt}
- '/' in department codes becomes '_'
- artifacts are written whole; no temporary files are left behind
"""

import tempfile
import unittest
from pathlib import Path

from regfetch.errors import StorageError
from regfetch.storage import CacheLayout, write_artifact


class TestLayout(unittest.TestCase):
    def test_paths(self) -> None:
        layout = CacheLayout("/srv/cache")
        self.assertEqual(layout.catalogue_path("COMPSCI"), Path("/srv/cache/registrar/COMPSCI/catalogue.html"))
        self.assertEqual(layout.prereqs_path("COMPSCI"), Path("/srv/cache/registrar/COMPSCI/prereqs.html"))
        self.assertEqual(
            layout.schedule_path("COMPSCI", "2024-92"), Path("/srv/cache/registrar/COMPSCI/soc_2024-92.txt")
        )
        self.assertEqual(layout.audit_path("12345678"), Path("/srv/cache/DGW_Report-12345678.xsl"))

    def test_slashes_in_department(self) -> None:
        layout = CacheLayout("/srv/cache")
        self.assertEqual(layout.department_dir("CRM/LAW"), Path("/srv/cache/registrar/CRM_LAW"))


class TestWriteArtifact(unittest.TestCase):
    def test_creates_directories_and_leaves_no_temp_files(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "registrar" / "COMPSCI" / "catalogue.html"
            write_artifact(out, "<html>ü</html>")
            self.assertEqual(out.read_text(encoding="utf-8"), "<html>ü</html>")
            self.assertEqual([p.name for p in out.parent.iterdir()], ["catalogue.html"])

    def test_overwrites(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "soc_2024-92.txt"
            write_artifact(out, "old")
            write_artifact(out, "new")
            self.assertEqual(out.read_text(encoding="utf-8"), "new")

    def test_unwritable_destination(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            blocker = Path(d) / "registrar"
            blocker.write_text("not a directory", encoding="utf-8")
            with self.assertRaises(StorageError) as ctx:
                write_artifact(blocker / "COMPSCI" / "catalogue.html", "x")
            self.assertEqual(ctx.exception.path, blocker / "COMPSCI" / "catalogue.html")


if __name__ == "__main__":
    unittest.main()
