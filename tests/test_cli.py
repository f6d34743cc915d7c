"""
Tests for CLI entry points and the top-level error boundary.

These tests focus on:
- usage hint / argument validation
- exit code 1 when a RegfetchError reaches main()
- --cache writing the audit into the configured root
- --schedules outside an academic quarter reports it and exits 0
"""

import io
import logging
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from rich.logging import RichHandler

from regfetch import logs
from regfetch.cli import USAGE_HINT, build_parser, main
from regfetch.config import DEFAULT_DELAY, DEFAULT_ROOT, DEFAULT_USER_AGENT, Settings, load_settings
from regfetch.errors import ExtractionError
from regfetch.model import DepartmentOptions, StudentRecord
from regfetch.progress import RichProgress

RECORD = StudentRecord("12345678", "U", "BS", "Bachelor of Science", "3", "Junior", "201", "Computer Science")


class TestCLI(unittest.TestCase):
    def test_no_flags_prints_hint(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            main([])
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn(USAGE_HINT, out.getvalue())

    def test_student_id_requires_cookie(self) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            main(["--studentID", "12345678"])
        self.assertEqual(ctx.exception.code, 2)

    def test_modes_are_exclusive(self) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            main(["--cookie", "c", "--catalogue"])
        self.assertEqual(ctx.exception.code, 2)

    def test_extraction_error_exits_1(self) -> None:
        err = ExtractionError("student ID", "no match", "Invalid cookies.")
        with mock.patch("regfetch.cli.degreeworks.retrieve_audit", side_effect=err):
            with self.assertRaises(SystemExit) as ctx:
                main(["--cookie", "stale"])
        self.assertEqual(ctx.exception.code, 1)

    def test_audit_printed_to_stdout(self) -> None:
        out = io.StringIO()
        with mock.patch("regfetch.cli.degreeworks.retrieve_audit", return_value=(RECORD, "<Audit/>")) as m:
            with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
                main(["--cookie", "c", "--studentID", "12345678"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertEqual(out.getvalue().strip(), "<Audit/>")
        self.assertEqual(m.call_args.args[1:], ("c", "12345678"))

    def test_cache_writes_under_root(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with mock.patch("regfetch.cli.degreeworks.retrieve_audit", return_value=(RECORD, "<Audit/>")):
                with self.assertRaises(SystemExit) as ctx:
                    main(["--cookie", "c", "--cache", "--root", d])
            self.assertEqual(ctx.exception.code, 0)
            self.assertEqual((Path(d) / "DGW_Report-12345678.xsl").read_text(encoding="utf-8"), "<Audit/>")

    def test_schedules_outside_a_quarter_exit_0(self) -> None:
        summer = DepartmentOptions({"COMPSCI": "COMPSCI"}, term="2025-25")
        out = io.StringIO()
        with tempfile.TemporaryDirectory() as d:
            with mock.patch("regfetch.scrape.registrar.schedule_department_options", return_value=summer):
                with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
                    main(["--schedules", "--quiet", "--root", d])
            self.assertEqual(list(Path(d).iterdir()), [])
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn("not currently in an academic term", out.getvalue())

    def test_archive_help_says_three_years(self) -> None:
        help_text = " ".join(build_parser().format_help().split())
        self.assertIn("last three academic years", help_text)


class TestConsole(unittest.TestCase):
    def test_log_handler_and_progress_share_one_console(self) -> None:
        logs.setup_logging()
        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
        self.assertEqual(len(handlers), 1)
        self.assertIs(handlers[0].console, logs.console)
        self.assertIs(RichProgress().progress.console, logs.console)


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        s = load_settings(env={})
        self.assertEqual(s.root, DEFAULT_ROOT)
        self.assertEqual(s.delay, DEFAULT_DELAY)

    def test_environment_and_override(self) -> None:
        s = load_settings(env={"REGFETCH_ROOT": "/tmp/reg", "REGFETCH_DELAY": "2.5"})
        self.assertEqual(s, Settings(root=Path("/tmp/reg"), delay=2.5))
        self.assertEqual(s.override(delay=0).delay, 0.0)
        self.assertEqual(s.override(root=Path("/x")).root, Path("/x"))
        self.assertEqual(s.override().root, Path("/tmp/reg"))

    def test_bad_number(self) -> None:
        with self.assertRaises(ValueError):
            load_settings(env={"REGFETCH_DELAY": "soon"})

    def test_user_agent_names_only_the_tool(self) -> None:
        self.assertEqual(load_settings(env={}).user_agent, DEFAULT_USER_AGENT)
        self.assertNotIn("http", DEFAULT_USER_AGENT)


if __name__ == "__main__":
    unittest.main()
