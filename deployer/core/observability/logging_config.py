"""
Logging configuration — one-time setup for the deployer CLI.

Modules log through ``logger = logging.getLogger(__name__)``; this
module decides where that output goes and how it looks.

Level precedence:
    --debug / --verbose / --quiet  >  DEPLOYER_LOG_LEVEL  >  WARNING

A log file is added when DEPLOYER_LOG_FILE is set, at
DEPLOYER_LOG_FILE_LEVEL (or the console level).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "DEPLOYER_LOG_LEVEL"
ENV_FILE = "DEPLOYER_LOG_FILE"
ENV_FILE_LEVEL = "DEPLOYER_LOG_FILE_LEVEL"

# ── Format strings ──────────────────────────────────────────────

# WARNING and up: just the message, the CLI prints its own summary
_FMT_PLAIN = "%(message)s"

# INFO: task progress with timestamps
_FMT_INFO = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_INFO = "%H:%M:%S"

# DEBUG: file:line for kubectl / replacer tracing
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Noisy below WARNING unless debugging
_THIRD_PARTY = ("urllib3", "yaml")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Console level from CLI flags, falling back to the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install handlers on the root logger, replacing any existing ones.

    Args:
        level: Console level name.
        log_file: Optional log file path (default: $DEPLOYER_LOG_FILE).
        log_file_level: Level for the file (default: $DEPLOYER_LOG_FILE_LEVEL,
            then ``level``).
        quiet_third_party: Hold library loggers at WARNING unless at DEBUG.
    """
    console_level = _parse_level(level)
    log_file = log_file or os.environ.get(ENV_FILE)
    log_file_level = log_file_level or os.environ.get(ENV_FILE_LEVEL)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif console_level <= logging.INFO:
        fmt, datefmt = _FMT_INFO, _DATEFMT_INFO
    else:
        fmt, datefmt = _FMT_PLAIN, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(file_handler)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _THIRD_PARTY:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
