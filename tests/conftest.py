"""
Shared pytest configuration and fixtures.
"""

import pytest

from properties_reader.infrastructure.observability.logging import ROOT_LOGGER_NAME, get_logger
from tests.fixtures.logging_fixtures import capture_logs, log_file_reader  # noqa: F401


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Keep handlers configured by one test (e.g. the CLI) from leaking into others."""
    root = get_logger(ROOT_LOGGER_NAME)
    handlers, level = root.handlers.copy(), root.level
    yield
    root.handlers[:] = handlers
    root.level = level


@pytest.fixture
def write_file(tmp_path):
    """Write text lines to a file under tmp_path and return its path."""
    def _write(name: str, *lines: str, encoding: str = "utf-8"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding=encoding)
        return path
    return _write
