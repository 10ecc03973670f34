"""Tool invocation boundary: dispatch, call, normalize, never raise."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional

from deepself.config.settings import DeepselfSettings
from deepself.core.api_client import CallFailure, DeepselfClient
from deepself.core.exceptions import DeepselfError
from deepself.core.normalizer import ResultNormalizer, ToolResult
from deepself.core.registry import ToolRegistry
from deepself.core.schema import OutputShape, ToolDefinition


class DeepselfToolbox:
    """Registry, client and normalizer wired together for one plugin instance."""

    def __init__(
        self,
        settings: DeepselfSettings,
        *,
        client: Optional[DeepselfClient] = None,
        registry: Optional[ToolRegistry] = None,
        normalizer: Optional[ResultNormalizer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)
        self.client = client or DeepselfClient(settings, logger=self.logger)
        self.registry = registry or ToolRegistry()
        self.normalizer = normalizer or ResultNormalizer()

    def register(self, definition: ToolDefinition) -> ToolDefinition:
        """Register a definition with the output shape the settings select for it."""
        shaped = definition.with_output_shape(self.settings.shape_for(definition.name))
        self.registry.register(shaped)
        return shaped

    def register_all(self, definitions: Iterable[ToolDefinition]) -> List[ToolDefinition]:
        return [self.register(definition) for definition in definitions]

    def _shape_for(self, name: str) -> OutputShape:
        if name in self.registry:
            return self.registry.get(name).output_shape
        return self.settings.shape_for(name)

    def invoke(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ToolResult:
        """Run one tool call end to end; every failure comes back as a result."""
        try:
            prepared = self.registry.dispatch(name, arguments)
            self.logger.info(prepared.definition.describe_call(prepared.arguments))
            outcome = self.client.call(
                prepared.call_spec, headers=headers, cancel_event=cancel_event
            )
            result = self.normalizer.normalize(prepared.definition, prepared.arguments, outcome)
        except DeepselfError as exc:
            self.logger.error("Deepself %s error: %s", name, exc)
            return self.normalizer.failure(self._shape_for(name), str(exc))
        except Exception as exc:
            self.logger.exception("Unexpected failure in deepself tool %s", name)
            return self.normalizer.failure(self._shape_for(name), str(exc))

        if isinstance(outcome, CallFailure):
            self.logger.error("Deepself %s error: status %s", name, outcome.status_code)
        return result

    def schemas(self) -> List[Dict[str, Any]]:
        return self.registry.get_schemas()

    def close(self) -> None:
        """Tear down registrations and release the HTTP session."""
        self.registry.clear()
        self.client.close()
