"""
Structured Exception Hierarchy

Every failure raised while reading, flattening or resolving properties carries
an error code, contextual data and a correlation ID so the command line and
host tools can log it in a structured form.
"""

from typing import Dict, List, Any, Optional
import uuid
from datetime import datetime, timezone


class PropertiesReaderException(Exception):
    """
    Base exception class for all properties-reader exceptions.

    Provides structured error information including error codes,
    context data, and correlation IDs for tracing.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        correlation_id: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }


class ConfigurationError(PropertiesReaderException):
    """Raised when the goal parameters are invalid. Always reported before any I/O."""

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        validation_errors: Optional[List[Any]] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or {}
        error_code = kwargs.pop('error_code', "CONFIG_ERROR")
        if parameter:
            context['parameter'] = parameter
        if validation_errors:
            context['validation_errors'] = validation_errors

        super().__init__(
            message=message,
            error_code=error_code,
            context=context,
            **kwargs
        )


class ResourceUnavailableError(PropertiesReaderException):
    """Raised when a file, URL or classpath entry cannot be opened."""

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or {}
        if resource:
            context['resource'] = resource

        super().__init__(
            message=message,
            error_code="RESOURCE_UNAVAILABLE",
            context=context,
            **kwargs
        )


class ParseError(PropertiesReaderException):
    """Raised when resource content cannot be parsed."""

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        line: Optional[int] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or {}
        error_code = kwargs.pop('error_code', "PARSE_ERROR")
        if resource:
            context['resource'] = resource
        if line is not None:
            context['line'] = line

        super().__init__(
            message=message,
            error_code=error_code,
            context=context,
            **kwargs
        )


class MultiDocumentError(ParseError):
    """Raised when a YAML stream holds more than one document."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="MULTI_DOCUMENT_YAML", **kwargs)


class UnsupportedStructureError(ParseError):
    """Raised when a parsed document holds a node the flattener cannot represent."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        context = kwargs.pop('context', None) or {}
        if path:
            context['path'] = path
        super().__init__(message, error_code="UNSUPPORTED_STRUCTURE", context=context, **kwargs)


class HierarchyTooDeepError(PropertiesReaderException):
    """Raised when a document nests deeper than the flattener allows."""

    def __init__(
        self,
        message: str,
        max_depth: Optional[int] = None,
        path: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or {}
        if max_depth is not None:
            context['max_depth'] = max_depth
        if path:
            context['path'] = path

        super().__init__(
            message=message,
            error_code="HIERARCHY_TOO_DEEP",
            context=context,
            **kwargs
        )


class ResolutionError(PropertiesReaderException):
    """Base class for placeholder resolution failures."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', None) or {}
        error_code = kwargs.pop('error_code', "RESOLUTION_ERROR")
        if key:
            context['key'] = key

        super().__init__(
            message=message,
            error_code=error_code,
            context=context,
            **kwargs
        )
        self.key = key


class CircularReferenceError(ResolutionError):
    """Raised when a placeholder refers back to a key still being resolved."""

    def __init__(self, message: str, key: str, chain: List[str], **kwargs):
        context = kwargs.pop('context', None) or {}
        context['chain'] = list(chain)
        super().__init__(message, key=key, error_code="CIRCULAR_REFERENCE", context=context, **kwargs)
        self.chain = list(chain)


class UnresolvableReferenceError(ResolutionError):
    """Raised when a placeholder names neither a property nor an environment variable."""

    def __init__(self, message: str, key: str, placeholder: str, **kwargs):
        context = kwargs.pop('context', None) or {}
        context['placeholder'] = placeholder
        super().__init__(message, key=key, error_code="UNRESOLVABLE_REFERENCE", context=context, **kwargs)
        self.placeholder = placeholder
