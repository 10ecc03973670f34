"""TOML configuration loading for standalone (CLI) use."""

import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from deepself.config.settings import (
    DEFAULT_API_KEY_ENV,
    PLUGIN_ID,
    DeepselfSettings,
    settings_from_mapping,
)

CONFIG_FILENAME = "config.toml"
CLI_CONFIG_HINT = f"[{PLUGIN_ID}] api_key (or the {DEFAULT_API_KEY_ENV} environment variable)"


def _get_config_dir() -> Path:
    """Return the configuration directory path."""
    return Path.home() / ".config" / "deepself"


def get_config_path() -> Path:
    return _get_config_dir() / CONFIG_FILENAME


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load the TOML config file, returning empty defaults when it is absent.

    Exits with a message when the file exists but is not valid TOML.
    """
    config_path = Path(path).expanduser() if path else get_config_path()
    final_config: Dict[str, Any] = {PLUGIN_ID: {}}

    if not config_path.exists():
        return final_config

    try:
        with open(config_path, "rb") as f:
            file_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"Error: Invalid TOML in {config_path}: {e}", file=sys.stderr)
        sys.exit(1)

    section = file_config.get(PLUGIN_ID, {})
    if isinstance(section, dict):
        final_config[PLUGIN_ID].update(section)
    return final_config


def load_cli_settings(
    path: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> DeepselfSettings:
    """Build settings for the CLI from the config file plus explicit overrides."""
    section = dict(load_config(path)[PLUGIN_ID])
    section.setdefault("api_key_env", DEFAULT_API_KEY_ENV)
    for key, value in overrides.items():
        if value is not None:
            section[key] = value
    return settings_from_mapping(section, config_hint=CLI_CONFIG_HINT)
