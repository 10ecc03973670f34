"""Render call outcomes and failures into each tool's declared output shape."""

from __future__ import annotations

from typing import Any, Dict, Optional

from deepself.core.api_client import SERVICE_NAME, CallFailure, CallOutcome
from deepself.core.schema import OutputShape, RenderedResult, ToolDefinition

ToolResult = Dict[str, Any]
ERROR_PREFIX = "Error: "


def format_api_error(status_code: int, raw_text: str, service_name: str = SERVICE_NAME) -> str:
    """Build the single human-readable message for an HTTP-level failure."""
    return f"{service_name} API error ({status_code}): {raw_text}"


def text_result(text: str) -> ToolResult:
    return {"content": [{"type": "text", "text": text}]}


def result_text(result: ToolResult) -> str:
    """Return the visible text of a result, whichever shape it has."""
    if "content" in result:
        return "\n".join(
            str(block.get("text", ""))
            for block in result.get("content") or []
            if isinstance(block, dict)
        )
    if result.get("success") is False:
        return f"{ERROR_PREFIX}{result.get('error', '')}"
    return str(result.get("message", ""))


def is_error_result(result: ToolResult) -> bool:
    if "success" in result:
        return result["success"] is False
    return result_text(result).startswith(ERROR_PREFIX)


class ResultNormalizer:
    """Single point where every outcome becomes tool output."""

    def __init__(self, service_name: str = SERVICE_NAME) -> None:
        self.service_name = service_name

    def normalize(
        self,
        definition: ToolDefinition,
        arguments: Dict[str, Any],
        outcome: CallOutcome,
    ) -> ToolResult:
        if isinstance(outcome, CallFailure):
            message = format_api_error(outcome.status_code, outcome.raw_text, self.service_name)
            return self.failure(definition.output_shape, message)
        rendered = definition.render(arguments, outcome.body)
        return self.success(definition.output_shape, rendered)

    def success(self, shape: OutputShape, rendered: RenderedResult) -> ToolResult:
        if shape is OutputShape.STRUCTURED:
            envelope: ToolResult = {"success": True}
            envelope.update(rendered.fields)
            envelope.setdefault("message", rendered.text)
            return envelope
        return text_result(rendered.text)

    def failure(self, shape: OutputShape, message: Optional[str]) -> ToolResult:
        message = message or "Unknown error"
        if shape is OutputShape.STRUCTURED:
            return {"success": False, "error": message}
        return text_result(f"{ERROR_PREFIX}{message}")
