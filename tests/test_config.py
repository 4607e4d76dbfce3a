"""Tests for environment-driven settings."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from nexusledger.config import GeminiSettings, LedgerSettings, StorageSettings


class TestSettings:
    """Tests for settings defaults and environment overrides."""

    def test_ledger_defaults(self, monkeypatch):
        """Oversells are blocked and new products get a 1.5 markup."""
        for name in ("LEDGER_STOCK_POLICY", "LEDGER_DEFAULT_MARKUP", "LEDGER_LOW_STOCK_THRESHOLD"):
            monkeypatch.delenv(name, raising=False)

        settings = LedgerSettings()

        assert settings.stock_policy == "block"
        assert settings.default_markup == Decimal("1.5")
        assert settings.low_stock_threshold == 5

    def test_ledger_from_environment(self, monkeypatch):
        """Policy knobs are read from LEDGER_* variables."""
        monkeypatch.setenv("LEDGER_STOCK_POLICY", "allow_backorder")
        monkeypatch.setenv("LEDGER_DEFAULT_MARKUP", "2")

        settings = LedgerSettings()

        assert settings.stock_policy == "allow_backorder"
        assert settings.default_markup == Decimal("2")

    def test_unknown_stock_policy(self, monkeypatch):
        """Only the two supported policies are accepted."""
        monkeypatch.setenv("LEDGER_STOCK_POLICY", "sometimes")
        with pytest.raises(ValidationError):
            LedgerSettings()

    def test_storage_paths(self, tmp_path, monkeypatch):
        """The audit log sits next to the snapshot."""
        monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.delenv("STORAGE_AUDIT_LOG_NAME", raising=False)

        settings = StorageSettings()

        assert settings.data_dir == tmp_path
        assert settings.audit_log_path == tmp_path / "audit_log.jsonl"

    def test_gemini_key_is_optional(self):
        """The books work without an analyst key."""
        assert not GeminiSettings(api_key=None).is_configured
        assert not GeminiSettings(api_key="  ").is_configured
        assert GeminiSettings(api_key="abc").is_configured


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
