"""
Structured logging for properties-reader.

Records are plain dictionaries. Each one carries the correlation ID of the
current run and, while a file or URL is being read, the resource it came
from. Formatters turn a record into one line; handlers decide where the line
goes. Loggers live in a registry keyed by dotted name, and a logger without
handlers of its own hands its records to its parent, so configuring the
``properties_reader`` root logger covers the whole package.
"""

import json
import sys
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple, Union

correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
resource_var: ContextVar[Optional[str]] = ContextVar('resource', default=None)

# Record fields filled from the active context.
_CONTEXT_FIELDS: Tuple[Tuple[str, ContextVar], ...] = (
    ('correlation_id', correlation_id_var),
    ('resource', resource_var),
)

LogRecord = Dict[str, Any]


class LogLevel(Enum):
    """Severity of a record, lowest first."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def severity(self) -> int:
        return list(LogLevel).index(self)


class LogFormatter(ABC):
    """Turns a record into a single line of text."""

    @abstractmethod
    def format(self, record: LogRecord) -> str:
        pass


class JSONLogFormatter(LogFormatter):
    """One JSON object per line; values json cannot encode are written with str()."""

    def format(self, record: LogRecord) -> str:
        return json.dumps(record, default=str, ensure_ascii=False)


class HumanReadableFormatter(LogFormatter):
    """
    Terminal friendly layout::

        [2024-01-31T10:00:00Z] INFO: Read project properties [resource=File: a.yml] [count=3]
    """

    def format(self, record: LogRecord) -> str:
        parts = [f"[{record.get('timestamp', '')}] {record.get('level', '')}: {record.get('message', '')}"]
        if record.get('resource'):
            parts.append(f"[resource={record['resource']}]")
        extra = record.get('extra')
        if extra:
            parts.append("[" + ", ".join(f"{key}={value}" for key, value in extra.items()) + "]")
        return " ".join(parts)


class LogHandler(ABC):
    """Destination for formatted records."""

    def __init__(self, formatter: LogFormatter):
        self.formatter = formatter

    @abstractmethod
    def emit(self, record: LogRecord) -> None:
        pass


class ConsoleLogHandler(LogHandler):
    """
    Writes to a text stream, stderr by default.

    stderr is looked up on every record so that a replaced ``sys.stderr`` is
    honoured; stdout is left to the command's own output.
    """

    def __init__(self, formatter: LogFormatter, stream: Optional[TextIO] = None):
        super().__init__(formatter)
        self.stream = stream

    def emit(self, record: LogRecord) -> None:
        target = self.stream if self.stream is not None else sys.stderr
        print(self.formatter.format(record), file=target, flush=True)


class FileLogHandler(LogHandler):
    """Appends one line per record; the parent directory is created up front."""

    def __init__(self, formatter: LogFormatter, file_path: Union[str, Path]):
        super().__init__(formatter)
        self.file_path = Path(file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: LogRecord) -> None:
        line = self.formatter.format(record)
        with self.file_path.open('a', encoding='utf-8') as log_file:
            log_file.write(f"{line}\n")


def _describe_exception(error: BaseException) -> Dict[str, Any]:
    to_dict = getattr(error, 'to_dict', None)
    if callable(to_dict):
        return to_dict()
    return {
        'type': type(error).__name__,
        'message': str(error),
        'module': type(error).__module__,
    }


class PropertiesReaderLogger:
    """
    Named logger producing structured records.

    ``level`` and ``handlers`` are optional per logger; when unset they are
    taken from the nearest ancestor that has them, INFO being the final
    default level.
    """

    def __init__(self, name: str, level: Optional[LogLevel] = None):
        self.name = name
        self.level = level
        self.handlers: List[LogHandler] = []

    def add_handler(self, handler: LogHandler) -> None:
        self.handlers.append(handler)

    def remove_handler(self, handler: LogHandler) -> None:
        if handler in self.handlers:
            self.handlers.remove(handler)

    def set_level(self, level: Optional[LogLevel]) -> None:
        self.level = level

    def lineage(self) -> Iterator["PropertiesReaderLogger"]:
        """This logger followed by its ancestors, nearest first."""
        name = self.name
        yield self
        while '.' in name:
            name = name.rsplit('.', 1)[0]
            yield get_logger(name)

    def effective_level(self) -> LogLevel:
        for logger in self.lineage():
            if logger.level is not None:
                return logger.level
        return LogLevel.INFO

    def effective_handlers(self) -> List[LogHandler]:
        for logger in self.lineage():
            if logger.handlers:
                return logger.handlers
        return []

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level.severity >= self.effective_level().severity

    def log(
        self,
        level: LogLevel,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        if not self.is_enabled_for(level):
            return

        if exc_info is not None:
            extra = {**(extra or {}), 'exception': _describe_exception(exc_info)}

        record = self._build_record(level, message, extra)
        for handler in self.effective_handlers():
            try:
                handler.emit(record)
            except Exception as e:
                # A broken handler must not break the read.
                sys.stderr.write(f"Log handler {type(handler).__name__} failed: {e}\n")

    def _build_record(self, level: LogLevel, message: str, extra: Optional[Dict[str, Any]]) -> LogRecord:
        timestamp = datetime.now(timezone.utc).isoformat(timespec='milliseconds')
        record: LogRecord = {
            'timestamp': timestamp.replace('+00:00', 'Z'),
            'level': level.value,
            'logger': self.name,
            'message': message,
        }
        for field, variable in _CONTEXT_FIELDS:
            value = variable.get()
            if value is not None:
                record[field] = value
        if extra:
            record['extra'] = extra
        return record

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None,
              exc_info: Optional[BaseException] = None) -> None:
        """Log at ERROR; ``exc_info`` is attached under ``extra['exception']``."""
        self.log(LogLevel.ERROR, message, extra, exc_info)

    def critical(self, message: str, extra: Optional[Dict[str, Any]] = None,
                 exc_info: Optional[BaseException] = None) -> None:
        self.log(LogLevel.CRITICAL, message, extra, exc_info)

    @contextmanager
    def correlation_context(self, correlation_id: Optional[str] = None):
        """Tag every record logged inside the block with one correlation ID (a new UUID by default)."""
        token = correlation_id_var.set(correlation_id or str(uuid.uuid4()))
        try:
            yield correlation_id_var.get()
        finally:
            correlation_id_var.reset(token)

    @contextmanager
    def resource_context(self, resource: str):
        """Tag every record logged inside the block with the resource being read."""
        token = resource_var.set(resource)
        try:
            yield resource
        finally:
            resource_var.reset(token)


ROOT_LOGGER_NAME = "properties_reader"

_loggers: Dict[str, PropertiesReaderLogger] = {}


def get_logger(name: str, level: Optional[LogLevel] = None) -> PropertiesReaderLogger:
    """Return the registered logger called ``name``, creating it on first use."""
    logger = _loggers.get(name)
    if logger is None:
        logger = _loggers[name] = PropertiesReaderLogger(name, level)
    return logger


def configure_default_logging(
    level: LogLevel = LogLevel.INFO,
    use_json: bool = True,
    log_file: Optional[Union[str, Path]] = None,
    stream: Optional[TextIO] = None
) -> PropertiesReaderLogger:
    """
    Point the root logger at the console, and optionally a file.

    Handlers installed by an earlier call are replaced.
    """
    formatter: LogFormatter = JSONLogFormatter() if use_json else HumanReadableFormatter()

    root = get_logger(ROOT_LOGGER_NAME)
    root.set_level(level)
    root.handlers = [ConsoleLogHandler(formatter, stream)]
    if log_file:
        root.add_handler(FileLogHandler(formatter, log_file))
    return root


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()
