"""
Logging configuration for lib4bin.

Console output goes to stderr (colored on a terminal); an optional
rotating log file can be written as plain text or JSON lines.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import json
from pathlib import Path
from typing import Optional


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys set by an active LogContext (e.g. ``binary``) are added at the top
    level so a run's log can be filtered per input binary.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(getattr(record, "bundle_context", {}))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for better readability."""

    COLORS = {
        logging.DEBUG: "\033[36m",    # Cyan
        logging.INFO: "\033[32m",     # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",    # Red
        logging.CRITICAL: "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        levelname = record.levelname

        record.levelname = f"{color}{levelname}{self.RESET}"
        result = super().format(record)
        # Other handlers share the record
        record.levelname = levelname

        return result


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    json_logs: bool = False,
):
    """
    Configure logging for lib4bin.

    Args:
        level: Console logging level (default: INFO)
        log_file: Path to log file (optional)
        json_logs: Use JSON format for file logs
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    if sys.stderr.isatty():
        console_format = ColoredFormatter("%(levelname)s %(name)s: %(message)s")
    else:
        console_format = logging.Formatter("%(levelname)s %(name)s: %(message)s")

    console_handler.setFormatter(console_format)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)

        if json_logs:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s [%(filename)s:%(lineno)d] %(message)s"
            ))

        root_logger.addHandler(file_handler)


class LogContext:
    """
    Tag every record created inside the block with bundling context.

    Example:
        with LogContext(binary="/usr/bin/curl"):
            logger.error("Cannot resolve dependencies")  # JSON line has "binary"
    """

    def __init__(self, **context):
        self.context = context
        self._previous = None

    def __enter__(self):
        previous = self._previous = logging.getLogRecordFactory()
        context = dict(self.context)

        def record_factory(*args, **kwargs):
            record = previous(*args, **kwargs)
            record.bundle_context = context
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, *exc):
        logging.setLogRecordFactory(self._previous)
