"""
Observability - structured logging with correlation IDs.
"""

from .logging import (
    PropertiesReaderLogger, LogLevel, LogFormatter, LogHandler,
    JSONLogFormatter, HumanReadableFormatter, ConsoleLogHandler, FileLogHandler,
    get_logger, configure_default_logging, get_correlation_id
)

__all__ = [
    "PropertiesReaderLogger",
    "LogLevel",
    "LogFormatter",
    "LogHandler",
    "JSONLogFormatter",
    "HumanReadableFormatter",
    "ConsoleLogHandler",
    "FileLogHandler",
    "get_logger",
    "configure_default_logging",
    "get_correlation_id",
]
