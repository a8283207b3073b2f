"""
Log formatters for ormysql.

JSON for log aggregation, colourised text for local development.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any

# Structured fields promoted to the top level of a record.
CONTEXT_FIELDS = ("model", "operation", "table")

# LogRecord attributes that are never reported as extra fields.
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    Single-line JSON formatter.

    Fields: timestamp, level, logger, message, any of model / operation /
    table, sql, duration_ms, exception, and an `extra` object holding the
    remaining custom attributes.
    """

    def __init__(self, include_extra: bool = True) -> None:
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        promoted = (*CONTEXT_FIELDS, "sql", "duration_ms")
        for name in promoted:
            value = getattr(record, name, None)
            if value is not None:
                log_dict[name] = value

        if record.exc_info:
            exc_type, exc, _ = record.exc_info
            log_dict["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc) if exc else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        if self.include_extra:
            extra = {
                key: value
                for key, value in record.__dict__.items()
                if key not in _RECORD_ATTRS
                and key not in promoted
                and not key.startswith("_")
            }
            if extra:
                log_dict["extra"] = extra

        return json.dumps(log_dict, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Readable one-line formatter, optionally with ANSI colours."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level:8}{self.RESET}"
        else:
            level = f"{level:8}"

        context_parts = [
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        ]
        context = f" [{', '.join(context_parts)}]" if context_parts else ""

        duration = getattr(record, "duration_ms", None)
        duration_str = f" ({duration:.1f}ms)" if duration is not None else ""

        line = f"{timestamp} {level} {record.name}{context}: {record.getMessage()}{duration_str}"

        sql = getattr(record, "sql", None)
        if sql:
            line += f"\n    {sql}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line
