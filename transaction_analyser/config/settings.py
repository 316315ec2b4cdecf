"""
Configuration Management for Transaction Analyser

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Command line options override these values, never the other way round.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyserSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from TRANSACTIONS_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSACTIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Ledger source
    csv_path: Path = Field(
        default=Path("transactions.csv"),
        description="Path to the transactions CSV, relative to the working directory"
    )
    csv_encoding: str = Field(
        default="utf-8",
        description="Text encoding of the transactions CSV"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Minimum level for log output"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (console renderer otherwise)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def log_level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]


@lru_cache()
def get_settings() -> AnalyserSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return AnalyserSettings()
