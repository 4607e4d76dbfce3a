"""
Configuration Management for Nexus Ledger

Every knob lives in an environment variable, grouped by concern with its
own prefix (GEMINI_, STORAGE_, LEDGER_) and validated by pydantic-settings.

DESIGN DECISION: Bookkeeping policy (stock policy, markup, low-stock
threshold) is configuration, not code. The engine receives it as
arguments and never reads the environment itself.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration for the AI analyst."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        extra="ignore"
    )

    # The analyst is optional - the books work without it
    api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=2048,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed analysis request is tried"
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class StorageSettings(BaseSettings):
    """Local snapshot storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".nexus_ledger",
        description="Directory holding the snapshot and audit log"
    )
    snapshot_key: str = Field(
        default="nexus_erp_data",
        min_length=1,
        description="Key under which the books snapshot is stored"
    )
    audit_log_name: str = Field(
        default="audit_log.jsonl",
        description="File name of the append-only audit log"
    )

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Allow ~ in configured paths."""
        return v.expanduser()

    @property
    def audit_log_path(self) -> Path:
        return self.data_dir / self.audit_log_name


class LedgerSettings(BaseSettings):
    """Bookkeeping policy knobs."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore"
    )

    low_stock_threshold: int = Field(
        default=5,
        ge=1,
        description="Quantities below this are reported as Low Stock"
    )
    default_markup: Decimal = Field(
        default=Decimal("1.5"),
        ge=0,
        description="Selling price of a new product = unit cost * markup"
    )
    stock_policy: str = Field(
        default="block",
        pattern="^(block|allow_backorder)$",
        description="Whether sales beyond available stock are rejected"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    default_language: str = Field(
        default="en",
        pattern="^(en|es|fr)$",
        description="Initial display language"
    )
    default_currency: str = Field(
        default="USD",
        pattern="^(USD|EUR|GBP|MAD)$",
        description="Initial display currency"
    )
    max_import_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum snapshot file size accepted for import"
    )

    @property
    def max_import_size_bytes(self) -> int:
        """Get max import size in bytes."""
        return self.max_import_size_mb * 1024 * 1024


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Loaded lazily to allow partial configuration

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    sections = {
        "storage": lambda: settings.storage,
        "ledger": lambda: settings.ledger,
        "app": lambda: settings.app,
    }
    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    try:
        gemini = settings.gemini
        results["gemini"] = gemini.is_configured
        if not gemini.is_configured:
            results["gemini_error"] = "GEMINI_API_KEY is not set"
    except Exception as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    return results
