"""
Test suite for structured logging configuration
"""

import json
import logging

import pytest

from bank_ledger.logging_config import JSONFormatter, setup_logging, log_action


class TestJSONFormatter:
    """Test JSON log formatting"""

    def test_structured_fields(self):
        """Test that action metadata lands in the JSON document"""
        record = logging.LogRecord(
            "bank_ledger.transactions", logging.INFO, __file__, 10,
            "Transfer completed", (), None
        )
        record.action = "transfer"
        record.resource = "transaction:TXN001"
        record.extra = {"amount": "USD 10.00"}

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "bank_ledger.transactions"
        assert entry["message"] == "Transfer completed"
        assert entry["action"] == "transfer"
        assert entry["resource"] == "transaction:TXN001"
        assert entry["extra"] == {"amount": "USD 10.00"}
        assert "correlation_id" not in entry


class TestSetupLogging:
    """Test logger setup and log_action"""

    logger_name = "bank_ledger_logging_test"

    def teardown_method(self):
        """Detach handlers added by setup_logging"""
        logger = logging.getLogger(self.logger_name)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()

    def test_json_output_to_file(self, tmp_path):
        """Test JSON lines written through log_action"""
        log_file = tmp_path / "ledger.log"
        logger = setup_logging("INFO", logger_name=self.logger_name, log_file=str(log_file))

        log_action(
            logger, "warning", "Withdrawal rejected",
            action="withdraw", resource="account:CHK001",
            correlation_id="corr-1", extra={"error": "InsufficientFundsError"}
        )
        log_action(logger, "debug", "Not emitted", action="noop")

        lines = log_file.read_text().strip().splitlines()
        assert len(lines) == 1

        entry = json.loads(lines[0])
        assert entry["level"] == "WARNING"
        assert entry["action"] == "withdraw"
        assert entry["correlation_id"] == "corr-1"
        assert entry["extra"]["error"] == "InsufficientFundsError"

    def test_text_output(self, tmp_path):
        """Test the plain text format"""
        log_file = tmp_path / "ledger.log"
        logger = setup_logging(
            "DEBUG", logger_name=self.logger_name, log_format="text", log_file=str(log_file)
        )

        logger.debug("Simulated date advanced")

        content = log_file.read_text()
        assert "DEBUG" in content
        assert f"[{self.logger_name}]" in content
        assert "Simulated date advanced" in content

    def test_repeated_setup_replaces_handlers(self):
        """Test that calling setup twice does not duplicate handlers"""
        setup_logging("INFO", logger_name=self.logger_name)
        logger = setup_logging("ERROR", logger_name=self.logger_name)

        assert len(logger.handlers) == 1
        assert logger.level == logging.ERROR
        assert logger.propagate is False
