"""
Logging configuration — one setup shared by every entry point.

``vaultdev``, ``vault-setup`` and ``vault-cleanup`` all call
``setup_logging()`` once before any workflow runs. Modules log through
``logging.getLogger(__name__)``; operator-facing progress goes through
click, so the console handler stays quiet unless asked otherwise.

Level precedence:
    --debug / --verbose / --quiet  >  VAULTDEV_LOG_LEVEL  >  WARNING

A log file is written when VAULTDEV_LOG_FILE is set; its level comes
from VAULTDEV_LOG_FILE_LEVEL and defaults to the console level.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "VAULTDEV_LOG_LEVEL"
ENV_FILE = "VAULTDEV_LOG_FILE"
ENV_FILE_LEVEL = "VAULTDEV_LOG_FILE_LEVEL"

_FMT_CONSOLE = "%(message)s"
_FMT_CONSOLE_INFO = "%(asctime)s [%(name)s] %(message)s"
_FMT_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional log file path. Defaults to ``$VAULTDEV_LOG_FILE``.
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DETAILED, _DATEFMT_SHORT
    elif console_level <= logging.INFO:
        fmt, datefmt = _FMT_CONSOLE_INFO, _DATEFMT_SHORT
    else:
        fmt, datefmt = _FMT_CONSOLE, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective = console_level

    log_file = log_file or os.environ.get(ENV_FILE)
    if log_file:
        file_level_name = os.environ.get(ENV_FILE_LEVEL)
        file_level = _parse_level(file_level_name) if file_level_name else console_level
        effective = min(effective, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective)
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant (WARNING if unknown)."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
