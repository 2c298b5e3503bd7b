"""
Logging configuration — one-time setup for the git2go CLI.

``main.py`` calls ``setup_logging`` before any command runs. Modules log
through ``logging.getLogger(__name__)`` and inherit whatever is set here.

Console level precedence:
    --debug  >  --verbose  >  --quiet  >  GIT2GO_LOG_LEVEL  >  WARNING

A log file is added when GIT2GO_LOG_FILE is set; its level comes from
GIT2GO_LOG_FILE_LEVEL and defaults to the console level.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LEVEL_ENV_VAR = "GIT2GO_LOG_LEVEL"
FILE_ENV_VAR = "GIT2GO_LOG_FILE"
FILE_LEVEL_ENV_VAR = "GIT2GO_LOG_FILE_LEVEL"

# ── Format strings ──────────────────────────────────────────────

# WARNING and above: just the message, the CLI already decorates output
_FMT_PLAIN = "%(message)s"

# INFO: timestamp + logger, enough to follow the install sequence
_FMT_INFO = "%(asctime)s [%(name)s] %(message)s"

# DEBUG and files: level, logger and line number
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_CONSOLE = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LEVEL_ENV_VAR, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path; parent directories are created.
        log_file_level: Level for the file handler (default: ``level``).
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        console_fmt = logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_CONSOLE)
    elif console_level <= logging.INFO:
        console_fmt = logging.Formatter(_FMT_INFO, datefmt=_DATEFMT_CONSOLE)
    else:
        console_fmt = logging.Formatter(_FMT_PLAIN)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(console_fmt)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant; unknown names fall back to WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
