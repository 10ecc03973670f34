"""The six deepself tool definitions."""

from typing import List

from deepself.core.schema import ToolDefinition
from deepself.tools.chat import CHAT, CHAT_TOOL
from deepself.tools.models import (
    BASIC_FACT_KEYS,
    CREATE_MODEL,
    CREATE_MODEL_TOOL,
    LIST_MODELS,
    LIST_MODELS_TOOL,
)
from deepself.tools.training import (
    FINALIZE_ROOM,
    FINALIZE_ROOM_TOOL,
    START_ROOM,
    START_ROOM_TOOL,
    TRAIN_DOCUMENT,
    TRAIN_DOCUMENT_TOOL,
)


def build_tool_definitions() -> List[ToolDefinition]:
    """Return the tool catalog in registration order."""
    return [
        CREATE_MODEL,
        TRAIN_DOCUMENT,
        START_ROOM,
        FINALIZE_ROOM,
        CHAT,
        LIST_MODELS,
    ]


__all__ = [
    "BASIC_FACT_KEYS",
    "CHAT_TOOL",
    "CREATE_MODEL_TOOL",
    "FINALIZE_ROOM_TOOL",
    "LIST_MODELS_TOOL",
    "START_ROOM_TOOL",
    "TRAIN_DOCUMENT_TOOL",
    "build_tool_definitions",
]
