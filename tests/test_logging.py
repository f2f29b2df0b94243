"""
Tests for structured logging and the exception hierarchy.
"""

import io
import json

import pytest

from properties_reader.infrastructure.exceptions import (
    CircularReferenceError, ConfigurationError, PropertiesReaderException, ResourceUnavailableError
)
from properties_reader.infrastructure.observability import (
    HumanReadableFormatter,
    JSONLogFormatter,
    LogLevel,
    configure_default_logging,
    get_correlation_id,
    get_logger
)


class TestPropertiesReaderLogger:
    """Test the structured logger."""

    def test_child_logger_forwards_to_root(self, capture_logs):
        get_logger("properties_reader.tests.child").info("hello", extra={'count': 2})

        records = capture_logs.get_records(LogLevel.INFO)
        assert len(records) == 1
        assert records[0]['logger'] == "properties_reader.tests.child"
        assert records[0]['extra'] == {'count': 2}

    def test_level_filtering(self, capture_logs):
        logger = get_logger("properties_reader.tests.levels")
        logger.set_level(LogLevel.WARNING)
        try:
            logger.info("hidden")
            logger.warning("shown")
        finally:
            logger.set_level(None)

        assert not capture_logs.has_record_with_message("hidden")
        assert capture_logs.has_record_with_message("shown")

    def test_correlation_context(self, capture_logs):
        logger = get_logger("properties_reader.tests.correlation")

        with logger.correlation_context("run-1") as correlation_id:
            assert get_correlation_id() == "run-1"
            logger.info("inside")
        logger.info("outside")

        inside, outside = capture_logs.get_records()
        assert correlation_id == "run-1"
        assert inside['correlation_id'] == "run-1"
        assert 'correlation_id' not in outside
        assert get_correlation_id() is None

    def test_resource_context(self, capture_logs):
        logger = get_logger("properties_reader.tests.resource")

        with logger.resource_context("File: app.yml"):
            logger.debug("reading")

        assert capture_logs.get_records()[0]['resource'] == "File: app.yml"

    def test_error_with_structured_exception(self, capture_logs):
        error = ResourceUnavailableError("File not found: a.yml", resource="File: a.yml")

        get_logger("properties_reader.tests.errors").error("failed", exc_info=error)

        exception = capture_logs.get_records(LogLevel.ERROR)[0]['extra']['exception']
        assert exception['error_type'] == "ResourceUnavailableError"
        assert exception['error_code'] == "RESOURCE_UNAVAILABLE"
        assert exception['context'] == {'resource': "File: a.yml"}

    def test_error_with_plain_exception(self, capture_logs):
        get_logger("properties_reader.tests.errors").critical("boom", exc_info=ValueError("bad"))

        exception = capture_logs.get_records(LogLevel.CRITICAL)[0]['extra']['exception']
        assert exception == {'type': "ValueError", 'message': "bad", 'module': "builtins"}


class TestFormattersAndHandlers:
    """Test formatters and handler configuration."""

    def test_json_formatter(self):
        line = JSONLogFormatter().format({'message': "m", 'level': "INFO"})
        assert json.loads(line) == {'message': "m", 'level': "INFO"}

    def test_human_readable_formatter(self):
        line = HumanReadableFormatter().format({
            'timestamp': "t",
            'level': "INFO",
            'message': "loaded",
            'resource': "File: a.yml",
            'extra': {'count': 3}
        })
        assert line == "[t] INFO: loaded [resource=File: a.yml] [count=3]"

    def test_configure_default_logging(self, tmp_path, log_file_reader):
        stream = io.StringIO()
        log_file = tmp_path / "logs" / "reader.log"

        configure_default_logging(level=LogLevel.INFO, use_json=True, log_file=log_file, stream=stream)
        logger = get_logger("properties_reader.tests.configured")
        logger.debug("not written")
        logger.info("written", extra={'k': "v"})

        console = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert [record['message'] for record in console] == ["written"]
        file_records = log_file_reader(log_file)
        assert file_records[0]['extra'] == {'k': "v"}


class TestExceptions:
    """Test the structured exception hierarchy."""

    def test_to_dict(self):
        cause = OSError("disk")
        error = PropertiesReaderException("failed", "SOME_CODE", context={'a': 1}, cause=cause,
                                          correlation_id="cid")

        data = error.to_dict()

        assert data['error_type'] == "PropertiesReaderException"
        assert data['message'] == "failed"
        assert data['error_code'] == "SOME_CODE"
        assert data['context'] == {'a': 1}
        assert data['correlation_id'] == "cid"
        assert data['cause'] == "disk"
        assert str(error) == "failed"

    def test_configuration_error_context(self):
        error = ConfigurationError("bad", parameter="files", validation_errors=[{'msg': "x"}])
        assert error.error_code == "CONFIG_ERROR"
        assert error.context == {'parameter': "files", 'validation_errors': [{'msg': "x"}]}

    def test_circular_reference_error(self):
        error = CircularReferenceError("cycle", key="a", chain=["a", "b", "a"])
        assert error.context == {'chain': ["a", "b", "a"], 'key': "a"}
        assert error.correlation_id

    def test_exceptions_share_base(self):
        with pytest.raises(PropertiesReaderException):
            raise ResourceUnavailableError("gone")
