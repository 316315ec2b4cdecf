"""Configuration package."""

from transaction_analyser.config.settings import (
    AnalyserSettings,
    get_settings,
)

__all__ = [
    "AnalyserSettings",
    "get_settings",
]
