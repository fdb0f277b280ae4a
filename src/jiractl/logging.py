"""Structured JSON logging for jiractl.

Writes JSONL to ``jiractl.log`` next to the config file, with rotation
(5MB, 3 backups). ``--debug`` additionally streams human-readable records
to stderr.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_LOG_FILENAME = "jiractl.log"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3
_EXTRA_FIELDS = ("command", "key", "error", "status_code", "duration_ms", "count")


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def setup_logging(log_dir: Path | None, *, debug: bool = False) -> logging.Logger:
    """Attach the rotating JSONL handler (and optionally a stderr handler).

    With ``log_dir=None`` no file handler is attached and any existing one
    is removed. Safe to call repeatedly; handlers are never duplicated.
    """
    logger = logging.getLogger("jiractl")
    log_path = log_dir / _LOG_FILENAME if log_dir is not None else None
    target_filename = os.path.abspath(str(log_path)) if log_path is not None else ""

    with _setup_lock:
        have_file = False
        for h in logger.handlers[:]:
            if not isinstance(h, RotatingFileHandler):
                continue
            if h.baseFilename == target_filename:
                have_file = True
                continue
            # Different path: drop the stale handler.
            logger.removeHandler(h)
            h.close()

        if log_dir is not None and not have_file:
            log_dir.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                str(log_path),
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
            )
            handler.setFormatter(_JsonFormatter())
            logger.addHandler(handler)

        if debug and not any(getattr(h, "_jiractl_debug", False) for h in logger.handlers):
            stream = logging.StreamHandler(sys.stderr)
            stream.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
            stream.setLevel(logging.DEBUG)
            stream._jiractl_debug = True  # type: ignore[attr-defined]
            logger.addHandler(stream)

        logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return logger
