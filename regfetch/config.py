"""
Configuration: remote endpoints and runtime settings.

Settings come from (lowest to highest priority):
- the defaults below
- environment variables REGFETCH_ROOT / REGFETCH_DELAY / REGFETCH_TIMEOUT
- command line flags (see cli.py)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional


# ---------------------------------------------------------------------------
# Remote endpoints
# ---------------------------------------------------------------------------

DEGREEWORKS_URL = "https://www.reg.uci.edu/dgw/IRISLink.cgi"
CATALOGUE_URL = "https://catalogue.uci.edu/allcourses/"
PREREQS_URL = "https://www.reg.uci.edu/cob/prrqcgi"
WEBSOC_URL = "https://www.reg.uci.edu/perl/WebSoc"


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_ROOT = Path("/var/www")
DEFAULT_DELAY = 10.0
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "regfetch/0.1"


@dataclass(frozen=True)
class Settings:
    root: Path = DEFAULT_ROOT
    delay: float = DEFAULT_DELAY
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def override(self, root: Optional[Path] = None, delay: Optional[float] = None) -> "Settings":
        """
        Return a copy with the given command line values applied (None = keep).
        """
        out = self
        if root is not None:
            out = replace(out, root=Path(root))
        if delay is not None:
            out = replace(out, delay=float(delay))
        return out


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Passing `env` explicitly keeps tests away from the real environment.
    """
    env = os.environ if env is None else env
    root = env.get("REGFETCH_ROOT", "").strip()
    return Settings(
        root=Path(root) if root else DEFAULT_ROOT,
        delay=_env_float(env, "REGFETCH_DELAY", DEFAULT_DELAY),
        timeout=_env_float(env, "REGFETCH_TIMEOUT", DEFAULT_TIMEOUT),
    )
