"""Host plugin entry: registers the deepself tools with an agent runtime."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol

from deepself.config.settings import PLUGIN_ID, resolve_plugin_settings
from deepself.core.normalizer import ToolResult
from deepself.core.schema import ToolDefinition
from deepself.core.toolbox import DeepselfToolbox
from deepself.tools import build_tool_definitions


class HostApi(Protocol):
    """Capabilities the hosting runtime hands to the plugin."""

    config: Mapping[str, Any]
    logger: logging.Logger

    def register_tool(self, tool: Dict[str, Any]) -> None:
        ...


@dataclass
class PluginStatus:
    """Runtime status for the plugin."""

    name: str = PLUGIN_ID
    active: bool = False
    tools: List[str] = field(default_factory=list)
    message: str = ""


class DeepselfPlugin:
    """Builds the toolbox from host config and exposes each tool to the host."""

    def __init__(self) -> None:
        self.toolbox: Optional[DeepselfToolbox] = None
        self.status = PluginStatus()

    @property
    def name(self) -> str:
        return PLUGIN_ID

    def activate(self, api: HostApi) -> DeepselfToolbox:
        """Resolve settings, register every tool, and return the toolbox."""
        logger = getattr(api, "logger", None) or logging.getLogger(__name__)
        logger.info("Deepself plugin loaded")

        settings = resolve_plugin_settings(getattr(api, "config", None))
        if not settings.has_api_key:
            logger.warning(
                "Deepself API key not configured; tools will report an error until "
                "%s is set",
                settings.config_hint,
            )

        toolbox = DeepselfToolbox(settings, logger=logger)
        for definition in build_tool_definitions():
            shaped = toolbox.register(definition)
            api.register_tool(self._host_tool(toolbox, shaped))

        self.toolbox = toolbox
        self.status = PluginStatus(active=True, tools=toolbox.registry.get_tool_names())
        logger.info("Deepself plugin registered %d tools successfully", len(toolbox.registry))
        return toolbox

    def deactivate(self) -> None:
        """Tear down the registry and release the HTTP session."""
        if self.toolbox is not None:
            self.toolbox.close()
        self.toolbox = None
        self.status = PluginStatus(message="deactivated")

    @staticmethod
    def _host_tool(toolbox: DeepselfToolbox, definition: ToolDefinition) -> Dict[str, Any]:
        name = definition.name

        def execute(
            tool_call_id: Any = None,
            params: Optional[Mapping[str, Any]] = None,
            signal: Optional[threading.Event] = None,
        ) -> ToolResult:
            return toolbox.invoke(name, params, cancel_event=signal)

        return {
            "name": name,
            "description": definition.description,
            "parameters": definition.parameters_schema(),
            "output_shape": definition.output_shape.value,
            "execute": execute,
        }


def register(api: HostApi) -> DeepselfPlugin:
    """Plugin entry point called by the host with its capability object."""
    plugin = DeepselfPlugin()
    plugin.activate(api)
    return plugin
