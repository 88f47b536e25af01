"""Configuration module."""

from pharmastock.config.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from pharmastock.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "bind_request_context",
    "clear_request_context",
]
