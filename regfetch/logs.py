"""
Logging setup.

All log output goes to stderr through rich; stdout stays free for the
audit document printed by `regfetch --cookie ...`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# Shared by the log handler and the progress bar so log lines print above
# a live bar instead of through it.
console = Console(stderr=True)

_configured = False


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger once per process. Later calls only adjust the level.
    """
    global _configured

    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)

    if _configured:
        return

    handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)

    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _configured = True
