"""Immutable settings consumed by the deepself tools."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from deepself.core.schema import OutputShape

logger = logging.getLogger(__name__)

PLUGIN_ID = "deepself"
DEFAULT_BASE_URL = "https://api.hw1.deepself.me/v1"
DEFAULT_API_KEY_ENV = "DEEPSELF_API_KEY"
PLUGIN_CONFIG_PATH = ("plugins", "entries", PLUGIN_ID, "config")
API_KEY_CONFIG_HINT = "plugins.entries.deepself.config.apiKey"

# camelCase host keys -> snake_case settings keys
_KEY_ALIASES = {
    "apiKey": "api_key",
    "apiKeyEnv": "api_key_env",
    "baseUrl": "base_url",
    "outputShape": "output_shape",
    "toolOutputShapes": "tool_output_shapes",
    "requestTimeout": "request_timeout",
}


@dataclass(frozen=True)
class DeepselfSettings:
    """Connection and presentation settings, fixed at construction."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    output_shape: OutputShape = OutputShape.TEXT
    tool_output_shapes: Mapping[str, OutputShape] = field(default_factory=dict)
    request_timeout: Optional[float] = None
    extra_headers: Mapping[str, str] = field(default_factory=dict)
    config_hint: str = API_KEY_CONFIG_HINT

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "tool_output_shapes", MappingProxyType(dict(self.tool_output_shapes))
        )
        object.__setattr__(self, "extra_headers", MappingProxyType(dict(self.extra_headers)))

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def shape_for(self, tool_name: str) -> OutputShape:
        """Return the output shape configured for one tool."""
        return self.tool_output_shapes.get(tool_name, self.output_shape)

    def __repr__(self) -> str:
        masked = "***" if self.api_key else None
        return (
            f"DeepselfSettings(api_key={masked!r}, base_url={self.base_url!r}, "
            f"output_shape={self.output_shape.value!r})"
        )


def _normalize_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in raw.items():
        normalized[_KEY_ALIASES.get(key, key)] = value
    return normalized


def _resolve_api_key(section: Mapping[str, Any]) -> Optional[str]:
    api_key = str(section.get("api_key") or "").strip()
    if api_key:
        return api_key
    env_name = str(section.get("api_key_env") or "").strip()
    if env_name:
        env_value = os.environ.get(env_name, "").strip()
        if env_value:
            return env_value
        logger.debug("Environment variable '%s' for the Deepself API key is not set", env_name)
    return None


def settings_from_mapping(
    raw: Optional[Mapping[str, Any]],
    *,
    config_hint: str = API_KEY_CONFIG_HINT,
) -> DeepselfSettings:
    """Build settings from one flat plugin config section."""
    section = _normalize_keys(raw or {})

    base_url = str(section.get("base_url") or "").strip() or DEFAULT_BASE_URL
    output_shape = OutputShape.parse(section.get("output_shape") or OutputShape.TEXT)

    raw_shapes = section.get("tool_output_shapes") or {}
    if not isinstance(raw_shapes, Mapping):
        raise ValueError("tool_output_shapes must be a table of tool name -> shape")
    tool_output_shapes = {
        str(name): OutputShape.parse(shape) for name, shape in raw_shapes.items()
    }

    raw_timeout = section.get("request_timeout")
    request_timeout = float(raw_timeout) if raw_timeout not in (None, "") else None

    raw_headers = section.get("headers") or {}
    if not isinstance(raw_headers, Mapping):
        raise ValueError("headers must be a table of header name -> value")
    extra_headers = {str(key): str(value) for key, value in raw_headers.items()}

    return DeepselfSettings(
        api_key=_resolve_api_key(section),
        base_url=base_url,
        output_shape=output_shape,
        tool_output_shapes=tool_output_shapes,
        request_timeout=request_timeout,
        extra_headers=extra_headers,
        config_hint=config_hint,
    )


def resolve_plugin_settings(config_tree: Optional[Mapping[str, Any]]) -> DeepselfSettings:
    """Resolve settings from a host config tree at ``plugins.entries.deepself.config``."""
    node: Any = config_tree or {}
    for part in PLUGIN_CONFIG_PATH:
        if not isinstance(node, Mapping):
            node = {}
            break
        node = node.get(part) or {}
    if not isinstance(node, Mapping):
        node = {}
    return settings_from_mapping(node)
