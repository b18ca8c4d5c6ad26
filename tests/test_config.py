"""
Test suite for configuration module
"""

import pytest

from bank_ledger import config as config_module
from bank_ledger.config import LedgerConfig, get_config, reload_config


class TestLedgerConfig:
    """Test environment-driven settings"""

    def teardown_method(self):
        """Restore the global configuration"""
        reload_config()

    def test_defaults(self, monkeypatch):
        """Test default values"""
        for name in ("LOG_LEVEL", "LOG_FORMAT", "LOG_FILE", "BASE_CURRENCY",
                     "ENFORCE_CARD_LIMITS", "DEMO_MONTHS"):
            monkeypatch.delenv(f"BANK_LEDGER_{name}", raising=False)

        settings = LedgerConfig(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.log_file is None
        assert settings.base_currency == "USD"
        assert settings.enforce_card_limits is True
        assert settings.demo_months == 12

    def test_environment_overrides(self, monkeypatch):
        """Test BANK_LEDGER_ prefixed variables"""
        monkeypatch.setenv("BANK_LEDGER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("BANK_LEDGER_ENFORCE_CARD_LIMITS", "false")
        monkeypatch.setenv("BANK_LEDGER_DEMO_MONTHS", "3")

        settings = LedgerConfig(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.enforce_card_limits is False
        assert settings.demo_months == 3

    def test_reload_config_replaces_global(self, monkeypatch):
        """Test that reload_config picks up new environment values"""
        monkeypatch.setenv("BANK_LEDGER_BASE_CURRENCY", "EUR")

        reloaded = reload_config()

        assert reloaded.base_currency == "EUR"
        assert get_config() is reloaded
        assert config_module.config is reloaded
