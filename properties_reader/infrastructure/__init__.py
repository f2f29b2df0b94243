"""
Infrastructure Layer - cross-cutting technical services

Structured exceptions and structured logging shared by every other layer.
"""

from .exceptions import (
    PropertiesReaderException, ConfigurationError, ResourceUnavailableError,
    ParseError, MultiDocumentError, UnsupportedStructureError, HierarchyTooDeepError,
    ResolutionError, CircularReferenceError, UnresolvableReferenceError
)
from .observability import (
    PropertiesReaderLogger, LogLevel, LogFormatter, LogHandler,
    get_logger, configure_default_logging
)

__all__ = [
    "PropertiesReaderException",
    "ConfigurationError",
    "ResourceUnavailableError",
    "ParseError",
    "MultiDocumentError",
    "UnsupportedStructureError",
    "HierarchyTooDeepError",
    "ResolutionError",
    "CircularReferenceError",
    "UnresolvableReferenceError",
    "PropertiesReaderLogger",
    "LogLevel",
    "LogFormatter",
    "LogHandler",
    "get_logger",
    "configure_default_logging",
]
