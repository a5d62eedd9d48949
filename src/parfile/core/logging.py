"""Structured logging for parameter file handling.

Console output goes to stderr so that it never mixes with dumped parameter
files or echo traces on stdout. An optional JSON lines file keeps a record of
which parameter files a run consumed.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines.

    Every line names the parameter file the record is about (``null`` when
    the record is not tied to one), so a run log can be filtered per file.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": record.created,
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "parameter_file": None,
        }

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(
    log_path: Path | None = None,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Setup structured logging for the ``parfile`` logger tree.

    Args:
        log_path: Optional path for JSON lines log file
        level: Logging level
        stream: Console stream, stderr by default
    """
    root_logger = logging.getLogger("parfile")
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> "StructuredLogger":
    """Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)
    """
    return StructuredLogger(logging.getLogger(name))


class StructuredLogger:
    """Wrapper for adding structured data to log messages.

    A logger can carry context that is merged into every record it emits::

        log = get_logger(__name__).bind(parameter_file="run.par")
        log.debug("Parsed fields", {"fields": 12})
    """

    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None):
        self.logger = logger
        self.context = dict(context or {})

    def bind(self, **context: Any) -> StructuredLogger:
        """Logger sharing this one's target with ``context`` added."""
        return StructuredLogger(self.logger, {**self.context, **context})

    def _log(self, level: int, msg: str, data: dict[str, Any] | None = None) -> None:
        merged = {**self.context, **(data or {})}
        extra = {"extra_data": merged} if merged else {}
        self.logger.log(level, msg, extra=extra)

    def debug(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.DEBUG, msg, data)

    def info(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.INFO, msg, data)

    def warning(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.WARNING, msg, data)

    def error(self, msg: str, data: dict[str, Any] | None = None) -> None:
        self._log(logging.ERROR, msg, data)


__all__ = [
    "setup_logging",
    "get_logger",
    "StructuredLogger",
    "JSONFormatter",
]
