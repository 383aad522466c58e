"""
Unit tests for logging module.
"""

import logging
import sys

import pytest

from ditto_client.logging import (
    DittoFormatter,
    StructuredLogger,
    get_logger,
    setup_logging,
)


def make_record(msg="Test message", level=logging.INFO, name="ditto_client.test"):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestDittoFormatter:
    """Test custom formatter."""

    def test_format_basic_log(self):
        """Test basic log formatting."""
        result = DittoFormatter(use_color=False).format(make_record())
        assert "ℹ️" in result
        assert "ditto_client.test: Test message" in result

    def test_format_with_extra_data(self):
        """Test formatting with extra data."""
        record = make_record()
        record.extra_data = {"key": "value", "count": 42}
        result = DittoFormatter(use_color=False).format(record)
        assert result.endswith("(key=value, count=42)")

    def test_color_wraps_message(self):
        result = DittoFormatter(use_color=True).format(make_record(level=logging.ERROR))
        assert result.startswith("\033[31m")
        assert result.endswith("\033[0m")

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        result = DittoFormatter(use_color=False).format(record)
        assert "RuntimeError: boom" in result


class TestStructuredLogger:
    """Test structured logger."""

    def test_logger_creation(self):
        logger = StructuredLogger("ditto_client.sample")
        assert logger.logger.name == "ditto_client.sample"

    def test_extra_data_attached(self, caplog):
        logger = StructuredLogger("ditto_client.sample")
        with caplog.at_level(logging.INFO, logger="ditto_client.sample"):
            logger.info("Container created", name="ditto-edge")

        record = caplog.records[-1]
        assert record.getMessage() == "Container created"
        assert record.extra_data == {"name": "ditto-edge"}

    def test_disabled_level_skipped(self, caplog):
        logger = StructuredLogger("ditto_client.quiet")
        with caplog.at_level(logging.WARNING, logger="ditto_client.quiet"):
            logger.debug("hidden", detail="x")
            logger.warning("shown")

        assert [r.getMessage() for r in caplog.records] == ["shown"]

    def test_all_levels(self):
        logger = StructuredLogger("ditto_client.sample")
        # Just ensure none of them throw
        logger.debug("Test debug", debug_info="details")
        logger.warning("Test warning", warning_type="validation")
        logger.error("Test error", error_code=500)
        logger.critical("Test critical", severity="high")


class TestLoggingSetup:
    """Test logging setup functions."""

    def test_get_logger(self):
        assert isinstance(get_logger("test_module"), StructuredLogger)

    def test_setup_logging_basic(self, restore_root_logger):
        setup_logging("debug")

        assert restore_root_logger.level == logging.DEBUG
        assert isinstance(restore_root_logger.handlers[0].formatter, DittoFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_setup_logging_with_file(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "ditto.log"
        setup_logging("INFO", log_file)

        logging.getLogger("ditto_client.test").info("Test log message")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert "Test log message" in log_file.read_text()
