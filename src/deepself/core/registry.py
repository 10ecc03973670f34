"""Tool registry for deepself tool definitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional

from deepself.core.exceptions import DuplicateToolError, UnknownToolError
from deepself.core.schema import RemoteCallSpec, ToolDefinition, validate_arguments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedCall:
    """A validated invocation ready for the HTTP adapter."""

    definition: ToolDefinition
    arguments: Dict[str, Any]
    call_spec: RemoteCallSpec


class ToolRegistry:
    """Ordered name -> definition mapping that validates before dispatching."""

    def __init__(self) -> None:
        self._definitions: Dict[str, ToolDefinition] = {}

    def register(self, definition: ToolDefinition) -> None:
        """Register a definition; the first registration of a name wins."""
        if definition.name in self._definitions:
            raise DuplicateToolError(definition.name)
        self._definitions[definition.name] = definition
        logger.debug("Registered tool '%s'", definition.name)

    def get(self, name: str) -> ToolDefinition:
        definition = self._definitions.get(name)
        if definition is None:
            raise UnknownToolError(name, self.get_tool_names())
        return definition

    def get_tool_names(self) -> List[str]:
        """Return registered tool names in registration order."""
        return list(self._definitions.keys())

    def get_schemas(self) -> List[Dict[str, Any]]:
        """Return function descriptors for every registered tool."""
        return [
            {
                "name": definition.name,
                "description": definition.description,
                "parameters": definition.parameters_schema(),
            }
            for definition in self._definitions.values()
        ]

    def dispatch(self, name: str, raw_args: Optional[Mapping[str, Any]] = None) -> PreparedCall:
        """Look up a tool, validate its arguments, and build its remote call."""
        definition = self.get(name)
        arguments = validate_arguments(definition.parameters, raw_args)
        call_spec = definition.operation(arguments)
        return PreparedCall(definition=definition, arguments=arguments, call_spec=call_spec)

    def clear(self) -> None:
        """Drop every registration."""
        self._definitions.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(list(self._definitions.values()))
