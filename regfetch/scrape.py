"""
Batch fetching: run DepartmentTasks through the registrar one at a time.

Requests are strictly sequential with a fixed delay before each live
fetch to go easy on the registrar's servers. In archive mode existing
schedule files are skipped, so an interrupted run can simply be restarted.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from regfetch import registrar
from regfetch.model import DepartmentTask
from regfetch.progress import NullProgress, ProgressSink
from regfetch.storage import CacheLayout, write_artifact
from regfetch.tasks import catalogue_tasks, prereq_tasks, schedule_tasks

logger = logging.getLogger(__name__)

FetchFn = Callable[[DepartmentTask], str]
DestinationFn = Callable[[DepartmentTask], Path]


@dataclass
class BatchResult:
    fetched: int = 0
    skipped: int = 0


# ---------------------------------------------------------------------------
# Core loop
# ---------------------------------------------------------------------------


def run_batch(
    tasks: Sequence[DepartmentTask],
    fetch: FetchFn,
    destination: DestinationFn,
    progress: Optional[ProgressSink] = None,
    delay: float = 10.0,
    skip_existing: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    """
    Fetch every task in order and write each body to its destination.

    The first failure propagates and ends the batch; files written so far
    stay on disk.
    """
    progress = progress or NullProgress()
    result = BatchResult()

    # one extra step for the final DONE
    progress.start(len(tasks) + 1)
    try:
        for task in tasks:
            progress.advance(task.label)
            out_file = destination(task)

            if skip_existing and out_file.exists():
                logger.debug("SKIP  %s (%s)", task.label, out_file)
                result.skipped += 1
                continue

            sleep(delay)
            body = fetch(task)
            write_artifact(out_file, body)
            logger.debug("FETCH %s -> %s", task.label, out_file)
            result.fetched += 1

        progress.advance("DONE")
    finally:
        progress.finish()

    logger.info("Batch finished: %d fetched, %d skipped", result.fetched, result.skipped)
    return result


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def fetch_catalogues(
    client: Any,
    layout: CacheLayout,
    depts: Optional[Sequence[str]] = None,
    progress: Optional[ProgressSink] = None,
    delay: float = 10.0,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    tasks = catalogue_tasks(registrar.all_departments(client), depts)
    return run_batch(
        tasks,
        fetch=lambda t: registrar.fetch_catalogue(client, t.option),
        destination=lambda t: layout.catalogue_path(t.dept),
        progress=progress,
        delay=delay,
        sleep=sleep,
    )


def fetch_prereqs(
    client: Any,
    layout: CacheLayout,
    depts: Optional[Sequence[str]] = None,
    progress: Optional[ProgressSink] = None,
    delay: float = 10.0,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    found = registrar.prereq_department_options(client)
    term = found.term or ""
    return run_batch(
        prereq_tasks(found, depts),
        fetch=lambda t: registrar.fetch_prerequisites(client, term, t.option),
        destination=lambda t: layout.prereqs_path(t.dept),
        progress=progress,
        delay=delay,
        sleep=sleep,
    )


def fetch_schedules(
    client: Any,
    layout: CacheLayout,
    depts: Optional[Sequence[str]] = None,
    archive: bool = False,
    progress: Optional[ProgressSink] = None,
    delay: float = 10.0,
    sleep: Callable[[float], None] = time.sleep,
    today: Optional[date] = None,
) -> BatchResult:
    """
    Raises tasks.ScheduleUnavailable outside the academic calendar.
    """
    tasks = schedule_tasks(registrar.schedule_department_options(client), depts, archive=archive, today=today)
    return run_batch(
        tasks,
        fetch=lambda t: registrar.fetch_schedule(client, t.term or "", t.option),
        destination=lambda t: layout.schedule_path(t.dept, t.term or ""),
        progress=progress,
        delay=delay,
        skip_existing=archive,
        sleep=sleep,
    )
