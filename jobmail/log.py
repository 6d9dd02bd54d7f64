"""Centralized logging configuration — stdlib only.

Console output goes to stdout; a daily DEBUG-level file is written under
``JOBMAIL_LOG_DIR`` (default ``logs/``) unless ``JOBMAIL_LOG_FILE=0``.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False
_console: logging.Handler | None = None


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def set_level(level_name: str) -> None:
    """Change console verbosity at runtime (CLI ``--verbose``)."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(min(level, root.level))
    if _console is not None:
        _console.setLevel(level)


def _file_logging_enabled() -> bool:
    return os.environ.get("JOBMAIL_LOG_FILE", "1").lower() not in ("0", "false", "no")


def _configure() -> None:
    global _console
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if root.handlers:
        return

    _console = logging.StreamHandler(sys.stdout)
    _console.setLevel(level)
    _console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(_console)

    if not _file_logging_enabled():
        return
    log_dir = Path(os.environ.get("JOBMAIL_LOG_DIR") or _DEFAULT_LOG_DIR)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"jobmail_{datetime.now().strftime('%Y-%m-%d')}.log"
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
        root.addHandler(fh)
        root.setLevel(logging.DEBUG)
    except OSError:
        pass
