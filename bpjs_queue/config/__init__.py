"""Configuration package for runtime settings, credentials and logging."""

from .logging_setup import config_configure_logging
from .settings import (
    DEFAULT_BPJS_QUEUE_BASE_URL,
    AppSettings,
    SettingsLoadError,
    config_load_settings,
    config_resolve_credentials,
)

__all__ = [
    "AppSettings",
    "DEFAULT_BPJS_QUEUE_BASE_URL",
    "SettingsLoadError",
    "config_configure_logging",
    "config_load_settings",
    "config_resolve_credentials",
]
