"""Greffier configuration."""

from greffier.config.settings import (
    GreffierConfig,
    ProgramConfig,
    RetryConfig,
    TransactionConfig,
    get_settings,
    load_config,
    reset_settings,
)

__all__ = [
    "GreffierConfig",
    "ProgramConfig",
    "TransactionConfig",
    "RetryConfig",
    "get_settings",
    "load_config",
    "reset_settings",
]
