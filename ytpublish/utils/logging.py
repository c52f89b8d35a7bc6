"""Logging helpers.

Diagnostics always go to stderr so that stdout stays reserved for command
results (listings, dry-run previews).
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Render log records as compact JSON, one object per line."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS}
        if extras:
            data.update(extras)
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 1:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    *,
    level: int = logging.INFO,
    structured: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure root logging; JSON output unless ``structured`` is False."""

    root = logging.getLogger()
    root.setLevel(level)
    formatter: logging.Formatter = (
        logging.Formatter(PLAIN_FORMAT) if structured is False else JsonFormatter()
    )

    if root.handlers:
        if structured is None:
            return
        for handler in root.handlers:
            handler.setFormatter(formatter)
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger", "level_for_verbosity"]
