"""Logging setup shared by the UI and the service modules (stdlib only).

Every module does ``log = get_logger(__name__)``. The first call installs a
stdout handler and, unless ``JOBSPHERE_LOG_FILE=0``, a daily file handler
under ``logs/`` (or ``JOBSPHERE_LOG_DIR``).
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

# Chatty at INFO; one line per HTTP request or file change
_QUIET_LOGGERS: tuple[str, ...] = ("urllib3", "watchdog", "streamlit.watcher")

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def _log_dir() -> Path:
    override = os.environ.get("JOBSPHERE_LOG_DIR", "").strip()
    return Path(override) if override else _DEFAULT_LOG_DIR


def _file_logging_enabled() -> bool:
    return os.environ.get("JOBSPHERE_LOG_FILE", "1").strip().lower() not in ("0", "false", "no")


def _configure() -> None:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    for noisy in _QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if not _file_logging_enabled():
        return

    try:
        log_dir = _log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"jobsphere_{datetime.now().strftime('%Y-%m-%d')}.log"
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        root.addHandler(fh)
    except OSError as exc:
        root.warning("File logging disabled: %s", exc)
