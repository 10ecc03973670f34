"""Configuration for deepself."""

from deepself.config.loader import get_config_path, load_cli_settings, load_config
from deepself.config.settings import (
    DEFAULT_API_KEY_ENV,
    DEFAULT_BASE_URL,
    PLUGIN_ID,
    DeepselfSettings,
    resolve_plugin_settings,
    settings_from_mapping,
)

__all__ = [
    "DEFAULT_API_KEY_ENV",
    "DEFAULT_BASE_URL",
    "PLUGIN_ID",
    "DeepselfSettings",
    "get_config_path",
    "load_cli_settings",
    "load_config",
    "resolve_plugin_settings",
    "settings_from_mapping",
]
