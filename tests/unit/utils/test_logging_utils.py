"""Tests for structured logging utilities."""

import json
import logging

from timebill.config.logging_config import LoggingConfig, configure_logging, reset_logging
from timebill.utils.logging_utils import ContextFilter, LogContext, get_log_context


def read_json_lines(path):
    for handler in logging.getLogger().handlers:
        handler.flush()
    return [json.loads(line) for line in path.read_text().splitlines() if line]


class TestLogContext:
    """Test LogContext context manager."""

    def teardown_method(self):
        """Reset logging after each test."""
        reset_logging()

    def test_context_adds_fields_to_logs(self, tmp_path):
        """Test context manager adds fields to log records."""
        log_file = tmp_path / "test.log"
        configure_logging(LoggingConfig(log_format="json", log_file=str(log_file)))
        logger = logging.getLogger("test_module")

        with LogContext(client_name="Acme", invoice_number="inv.acme.2025-01-31"):
            logger.info("Writing line items")

        entry = read_json_lines(log_file)[0]
        assert entry["client_name"] == "Acme"
        assert entry["invoice_number"] == "inv.acme.2025-01-31"

    def test_context_nesting(self):
        """Test nested contexts merge fields and restore on exit."""
        with LogContext(client_name="Acme"):
            with LogContext(invoice_number="inv.acme.2025-01-31"):
                assert get_log_context() == {
                    "client_name": "Acme",
                    "invoice_number": "inv.acme.2025-01-31",
                }
            assert get_log_context() == {"client_name": "Acme"}
        assert get_log_context() == {}

    def test_context_restored_after_exception(self):
        """Test fields are cleared when the block raises."""
        try:
            with LogContext(client_name="Acme"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_log_context() == {}

    def test_fields_absent_outside_context(self, tmp_path):
        """Test records outside a context carry no context fields."""
        log_file = tmp_path / "test.log"
        configure_logging(LoggingConfig(log_format="json", log_file=str(log_file)))
        logger = logging.getLogger("test_module")

        with LogContext(client_name="Acme"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = read_json_lines(log_file)
        assert inside["client_name"] == "Acme"
        assert "client_name" not in outside


class TestContextFilter:
    """Test ContextFilter."""

    def test_filter_copies_fields(self):
        """Test the filter sets context fields on the record."""
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

        with LogContext(client_name="Beta"):
            assert ContextFilter().filter(record) is True

        assert record.client_name == "Beta"
