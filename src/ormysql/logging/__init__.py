"""
ormysql structured logging.

JSON or text output with per-operation context injection.
"""

from ormysql.logging.config import (
    LogFormat,
    LogLevel,
    OrmysqlLogger,
    configure_logging,
    get_logger,
)
from ormysql.logging.context import (
    ContextFilter,
    LogContext,
    get_log_context,
    with_log_context,
)
from ormysql.logging.formatters import JSONFormatter, TextFormatter

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "OrmysqlLogger",
    "LogLevel",
    "LogFormat",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    # Context
    "ContextFilter",
    "LogContext",
    "get_log_context",
    "with_log_context",
]
