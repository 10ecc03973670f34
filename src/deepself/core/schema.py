"""Tool definitions, parameter schemas, and argument validation."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional, Tuple

from deepself.core.exceptions import (
    InvalidEnumValueError,
    InvalidKeyError,
    InvalidParameterTypeError,
    MissingParameterError,
)

logger = logging.getLogger(__name__)

STRING_TYPE = "string"
OBJECT_TYPE = "object"
ARRAY_TYPE = "array"
SUPPORTED_PARAMETER_TYPES = (STRING_TYPE, OBJECT_TYPE, ARRAY_TYPE)
HTTP_METHODS = ("GET", "POST")


class OutputShape(str, Enum):
    """How a tool presents its result to the host."""

    TEXT = "text"
    STRUCTURED = "structured"

    @classmethod
    def parse(cls, value: Any) -> "OutputShape":
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(
            f"Unknown output shape: {value!r}. Expected one of: "
            + ", ".join(member.value for member in cls)
        )


@dataclass(frozen=True)
class ParameterSpec:
    """One entry of a flat tool parameter list."""

    type: str
    description: str = ""
    required: bool = False
    enum: Optional[Tuple[str, ...]] = None
    allowed_keys: Optional[Tuple[str, ...]] = None
    item_enum: Optional[Tuple[str, ...]] = None
    value_type: Optional[str] = None
    default: Any = None

    def __post_init__(self) -> None:
        if self.type not in SUPPORTED_PARAMETER_TYPES:
            raise ValueError(f"Unsupported parameter type: {self.type}")

    def to_json_schema(self) -> Dict[str, Any]:
        """Render this parameter as a JSON-schema property."""
        schema: Dict[str, Any] = {"type": self.type}
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.type == ARRAY_TYPE:
            items: Dict[str, Any] = {"type": STRING_TYPE}
            if self.item_enum:
                items["enum"] = list(self.item_enum)
            schema["items"] = items
        if self.type == OBJECT_TYPE and self.value_type:
            schema["additionalProperties"] = {"type": self.value_type}
        description = self.description
        if self.allowed_keys:
            description = (
                f"{description} ONLY these keys are allowed: "
                f"{', '.join(self.allowed_keys)}."
            ).strip()
        if description:
            schema["description"] = description
        return schema


@dataclass(frozen=True)
class RemoteCallSpec:
    """Intention to call the remote service once."""

    method: str
    path: str
    body: Optional[Mapping[str, Any]] = None
    headers: Optional[Mapping[str, str]] = None

    def __post_init__(self) -> None:
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not self.path.startswith("/"):
            raise ValueError(f"Remote path must start with '/': {self.path}")


@dataclass(frozen=True)
class RenderedResult:
    """Operation-specific view of a successful response."""

    text: str
    fields: Dict[str, Any] = field(default_factory=dict)


Operation = Callable[[Dict[str, Any]], RemoteCallSpec]
Renderer = Callable[[Dict[str, Any], Any], RenderedResult]


@dataclass(frozen=True)
class ToolDefinition:
    """Name, schema, and behavior of one callable tool."""

    name: str
    description: str
    parameters: Mapping[str, ParameterSpec]
    operation: Operation
    render: Renderer
    output_shape: OutputShape = OutputShape.TEXT
    progress: Optional[Callable[[Dict[str, Any]], str]] = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Tool name must be non-empty")
        frozen = MappingProxyType(dict(self.parameters))
        object.__setattr__(self, "parameters", frozen)

    @property
    def required_parameters(self) -> List[str]:
        return [name for name, spec in self.parameters.items() if spec.required]

    def parameters_schema(self) -> Dict[str, Any]:
        """Return the JSON-schema object describing accepted arguments."""
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {
                name: spec.to_json_schema() for name, spec in self.parameters.items()
            },
        }
        required = self.required_parameters
        if required:
            schema["required"] = required
        return schema

    def describe_call(self, arguments: Dict[str, Any]) -> str:
        """Return the progress line logged before the remote call."""
        if self.progress is None:
            return f"Running deepself tool: {self.name}"
        return self.progress(arguments)

    def with_output_shape(self, output_shape: OutputShape) -> "ToolDefinition":
        return dataclasses.replace(self, output_shape=output_shape)


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return STRING_TYPE
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, Mapping):
        return OBJECT_TYPE
    if isinstance(value, (list, tuple)):
        return ARRAY_TYPE
    return type(value).__name__


def _check_value(name: str, spec: ParameterSpec, value: Any) -> Any:
    kind = _json_kind(value)
    if kind != spec.type:
        raise InvalidParameterTypeError(name, spec.type, kind)

    if spec.type == STRING_TYPE:
        if spec.enum and value not in spec.enum:
            raise InvalidEnumValueError(name, value, spec.enum)
        return value

    if spec.type == ARRAY_TYPE:
        items = list(value)
        if spec.item_enum:
            for item in items:
                if item not in spec.item_enum:
                    raise InvalidEnumValueError(name, item, spec.item_enum)
        return items

    mapping = dict(value)
    if spec.allowed_keys:
        for key in mapping:
            if key not in spec.allowed_keys:
                raise InvalidKeyError(name, key, spec.allowed_keys)
    if spec.value_type:
        for key, item in mapping.items():
            item_kind = _json_kind(item)
            if item_kind != spec.value_type:
                raise InvalidParameterTypeError(f"{name}.{key}", spec.value_type, item_kind)
    return mapping


def validate_arguments(
    parameters: Mapping[str, ParameterSpec],
    raw_args: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Validate raw tool arguments and return the normalized argument set.

    Required fields are checked first, in declaration order, so the caller
    always hears about the first missing field before any other defect.
    Undeclared arguments are dropped; unset optional fields receive their
    declared default (or ``None``).
    """
    raw = dict(raw_args or {})

    for name, spec in parameters.items():
        if spec.required and raw.get(name) is None:
            raise MissingParameterError(name)

    normalized: Dict[str, Any] = {}
    for name, spec in parameters.items():
        value = raw.get(name)
        if value is None:
            normalized[name] = spec.default
            continue
        normalized[name] = _check_value(name, spec, value)

    extras = sorted(set(raw) - set(parameters))
    if extras:
        logger.debug("Dropping undeclared tool arguments: %s", ", ".join(extras))
    return normalized
