"""Exception hierarchy for deepself tool dispatch."""

from __future__ import annotations

from typing import Iterable, List, Optional


class DeepselfError(Exception):
    """Base error for deepself tool failures."""


class ToolRegistryError(DeepselfError):
    """Base error for tool registration and lookup."""


class DuplicateToolError(ToolRegistryError):
    """Raised when a tool name is registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool '{name}' is already registered")


class UnknownToolError(ToolRegistryError):
    """Raised when dispatching a tool name that was never registered."""

    def __init__(self, name: str, available_tools: Optional[Iterable[str]] = None) -> None:
        self.name = name
        self.available_tools: List[str] = list(available_tools or [])
        message = f"Unknown tool: {name}"
        if self.available_tools:
            message += f". Available tools: {', '.join(self.available_tools)}"
        super().__init__(message)


class ToolInputError(DeepselfError):
    """Base error for caller input defects."""


class MissingParameterError(ToolInputError):
    """Raised when a required parameter is absent."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Missing required parameter: {field_name}")


class InvalidParameterTypeError(ToolInputError):
    """Raised when a parameter value has the wrong JSON kind."""

    def __init__(self, field_name: str, expected_type: str, actual_type: str) -> None:
        self.field_name = field_name
        self.expected_type = expected_type
        self.actual_type = actual_type
        super().__init__(
            f"Invalid type for parameter '{field_name}': expected {expected_type}, got {actual_type}"
        )


class InvalidEnumValueError(ToolInputError):
    """Raised when a value falls outside a closed set."""

    def __init__(self, field_name: str, value: object, allowed_values: Iterable[str]) -> None:
        self.field_name = field_name
        self.value = value
        self.allowed_values: List[str] = list(allowed_values)
        super().__init__(
            f"Invalid value for {field_name}: {value!r}. "
            f"Allowed values: {', '.join(self.allowed_values)}"
        )


class InvalidKeyError(ToolInputError):
    """Raised when a mapping parameter carries a key outside its allow-list."""

    def __init__(self, field_name: str, key: str, allowed_keys: Iterable[str]) -> None:
        self.field_name = field_name
        self.key = key
        self.allowed_keys: List[str] = list(allowed_keys)
        super().__init__(
            f"Invalid {field_name} key: {key}. Allowed keys: {', '.join(self.allowed_keys)}"
        )


class MissingCredentialsError(DeepselfError):
    """Raised before any network attempt when no API key is configured."""

    def __init__(self, config_hint: str = "plugins.entries.deepself.config.apiKey") -> None:
        self.config_hint = config_hint
        super().__init__(
            f"Deepself API key not configured. Please set {config_hint} in your config."
        )


class TransportError(DeepselfError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, message: str, *, cancelled: bool = False) -> None:
        super().__init__(message)
        self.cancelled = cancelled


class InvalidResponseError(DeepselfError):
    """Raised when a successful response body is not valid JSON."""

    def __init__(self, status_code: int, raw_text: str) -> None:
        self.status_code = status_code
        self.raw_text = raw_text
        super().__init__(
            f"Deepself API returned invalid JSON (status {status_code}): {raw_text[:200]}"
        )
