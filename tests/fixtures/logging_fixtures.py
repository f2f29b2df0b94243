"""
Logging fixtures: capture the structured records emitted during a test.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from properties_reader.infrastructure.observability.logging import (
    JSONLogFormatter, LogHandler, LogLevel, PropertiesReaderLogger, ROOT_LOGGER_NAME, get_logger
)


class CapturingLogHandler(LogHandler):
    """Keeps every record it receives, unformatted, for assertions."""

    def __init__(self):
        super().__init__(JSONLogFormatter())
        self.records: List[Dict[str, Any]] = []

    def emit(self, record: Dict[str, Any]) -> None:
        self.records.append(dict(record))

    def get_records(self, level: Optional[LogLevel] = None) -> List[Dict[str, Any]]:
        if level is None:
            return list(self.records)
        return [record for record in self.records if record['level'] == level.value]

    def has_record_with_message(self, text: str) -> bool:
        return any(text in record['message'] for record in self.records)

    def has_record_with_extra(self, key: str, value: Any) -> bool:
        return any(record.get('extra', {}).get(key) == value for record in self.records)


class LogCapture:
    """
    Route a logger's records into a :class:`CapturingLogHandler`.

    The logger's own handlers and level are swapped out for the duration of
    the block and put back afterwards.
    """

    def __init__(self, logger: PropertiesReaderLogger, level: LogLevel = LogLevel.DEBUG):
        self.logger = logger
        self.level = level
        self.handler = CapturingLogHandler()
        self._saved = None

    def __enter__(self) -> CapturingLogHandler:
        self._saved = (self.logger.level, list(self.logger.handlers))
        self.logger.set_level(self.level)
        self.logger.handlers = [self.handler]
        return self.handler

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.level, self.logger.handlers = self._saved


@pytest.fixture
def capture_logs():
    """Records from every logger under ``properties_reader``."""
    with LogCapture(get_logger(ROOT_LOGGER_NAME)) as handler:
        yield handler


@pytest.fixture
def log_file_reader():
    """Parse a JSON-lines log file into records."""
    def read(file_path: Path) -> List[Dict[str, Any]]:
        lines = Path(file_path).read_text(encoding='utf-8').splitlines()
        return [json.loads(line) for line in lines if line.strip()]
    return read
