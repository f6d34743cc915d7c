"""
CLI (Command Line Interface).

    regfetch --cookie <session> [--studentID <id>] [--cache]
    regfetch --catalogue [-d COMPSCI,MATH]
    regfetch --prereqs   [-d COMPSCI,MATH]
    regfetch --schedules [--archive] [-d COMPSCI,MATH]

The DegreeWorks audit and the three batch modes are mutually exclusive.
This is the only place that decides exit codes: 0 on success, 1 when any
RegfetchError reaches it (message on stderr), 2 for usage errors.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from regfetch import degreeworks, scrape
from regfetch.client import RegistrarClient
from regfetch.config import Settings, load_settings
from regfetch.errors import RegfetchError
from regfetch.logs import setup_logging
from regfetch.progress import NullProgress, ProgressSink, RichProgress
from regfetch.storage import CacheLayout
from regfetch.tasks import ScheduleUnavailable

logger = logging.getLogger(__name__)

USAGE_HINT = "No flags were specified. Use `-h` or `--help` flags to get help."


def _split_departments(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [d.strip() for d in raw.split(",") if d.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="regfetch", description="Fetch and cache UCI registrar data")

    audit = parser.add_argument_group("DegreeWorks")
    audit.add_argument("--studentID", type=str, default="", help="Fetch the DegreeWorks audit for this student ID.")
    audit.add_argument("--cookie", type=str, default="", help="Fetch the DegreeWorks audit using this session cookie.")
    audit.add_argument("--cache", action="store_true", help="Write the audit to <root>/DGW_Report-<id>.xsl.")

    batch = parser.add_argument_group("Registrar batches")
    modes = batch.add_mutually_exclusive_group()
    modes.add_argument("--catalogue", action="store_true", help="Fetch courses from the Course Catalogue.")
    modes.add_argument("--prereqs", action="store_true", help="Fetch prerequisites.")
    modes.add_argument("--schedules", action="store_true", help="Fetch schedules from WebSOC.")
    batch.add_argument(
        "--archive",
        action="store_true",
        help="With --schedules: fetch every quarter of the last three academic years.",
    )
    batch.add_argument("-d", type=str, default="", metavar="DEPTS", help="Comma-separated list of departments.")

    parser.add_argument("--root", type=Path, default=None, help="Cache root directory (default: $REGFETCH_ROOT or /var/www).")
    parser.add_argument("--delay", type=float, default=None, help="Seconds to wait before each request (default: 10).")
    parser.add_argument("--quiet", action="store_true", help="Do not draw a progress bar.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def _run_audit(args: argparse.Namespace, settings: Settings) -> int:
    with RegistrarClient(settings.timeout, settings.user_agent) as client:
        record, document = degreeworks.retrieve_audit(client, args.cookie, args.studentID or None)

    if args.cache:
        out = degreeworks.save_audit(CacheLayout(settings.root), record.student_id, document)
        logger.info("Audit written to %s", out)
    else:
        print(document)
    return 0


def _run_batch(args: argparse.Namespace, settings: Settings) -> int:
    layout = CacheLayout(settings.root)
    depts = _split_departments(args.d)
    progress: ProgressSink = NullProgress() if args.quiet else RichProgress()

    with RegistrarClient(settings.timeout, settings.user_agent) as client:
        if args.catalogue:
            scrape.fetch_catalogues(client, layout, depts, progress=progress, delay=settings.delay)
        elif args.prereqs:
            scrape.fetch_prereqs(client, layout, depts, progress=progress, delay=settings.delay)
        else:
            try:
                scrape.fetch_schedules(
                    client, layout, depts, archive=args.archive, progress=progress, delay=settings.delay
                )
            except ScheduleUnavailable as e:
                print(e)
    return 0


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches, and exits via SystemExit.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    batch_mode = args.catalogue or args.prereqs or args.schedules
    if args.cookie and batch_mode:
        parser.error("--cookie cannot be combined with --catalogue, --prereqs or --schedules")
    if (args.studentID or args.cache) and not args.cookie:
        parser.error("--studentID and --cache require --cookie")
    if args.archive and not args.schedules:
        parser.error("--archive requires --schedules")

    if not (args.cookie or batch_mode):
        print(USAGE_HINT)
        raise SystemExit(0)

    setup_logging(args.verbose)
    try:
        settings = load_settings().override(root=args.root, delay=args.delay)
    except ValueError as e:
        parser.error(str(e))

    try:
        if args.cookie:
            raise SystemExit(_run_audit(args, settings))
        raise SystemExit(_run_batch(args, settings))
    except RegfetchError as e:
        logger.error("%s", e)
        raise SystemExit(1)
