"""Chat tool: consultation, delegation, and training-room turns."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from deepself.core.schema import (
    STRING_TYPE,
    ParameterSpec,
    RemoteCallSpec,
    RenderedResult,
    ToolDefinition,
)
from deepself.tools.common import as_mapping

CHAT_TOOL = "deepself_chat"


def build_messages(message: str, context: Optional[str] = None) -> List[Dict[str, str]]:
    """Return the chat sequence, with context as a leading system message."""
    messages = [{"role": "user", "content": message}]
    if context:
        messages.insert(0, {"role": "system", "content": context})
    return messages


def extract_reply(body: Any) -> str:
    """Return ``choices[0].message.content`` or an empty string."""
    choices = as_mapping(body).get("choices") or []
    if not choices:
        return ""
    message = as_mapping(as_mapping(choices[0]).get("message"))
    return str(message.get("content") or "")


def _chat_call(args: Dict[str, Any]) -> RemoteCallSpec:
    body: Dict[str, Any] = {
        "model": args["model"],
        "messages": build_messages(args["message"], args.get("context")),
        "stream": False,
    }
    if args.get("room_id"):
        body["room_id"] = args["room_id"]
    return RemoteCallSpec(method="POST", path="/chat/completions", body=body)


def _render_reply(args: Dict[str, Any], body: Any) -> RenderedResult:
    reply = extract_reply(body)
    return RenderedResult(
        text=reply,
        fields={
            "response": reply,
            "model": args["model"],
            "room_id": args.get("room_id") or None,
        },
    )


CHAT = ToolDefinition(
    name=CHAT_TOOL,
    description=(
        "Chat with any deepself for consultation or delegation. For consultation: ask "
        "your higher self or a platform deepself for advice. For delegation: have a "
        "specialist deepself (like 'legal-beagle') respond to a message. The 'model' "
        "parameter is the username of the deepself. If 'room_id' is provided, this "
        "continues a training conversation."
    ),
    parameters={
        "model": ParameterSpec(
            STRING_TYPE,
            "Username of the deepself to chat with (e.g., 'clawdbot-higher-001', 'socrates')",
            required=True,
        ),
        "message": ParameterSpec(STRING_TYPE, "Your message or question", required=True),
        "room_id": ParameterSpec(
            STRING_TYPE, "Optional: room_id if continuing a training conversation"
        ),
        "context": ParameterSpec(
            STRING_TYPE, "Optional context to include in the conversation"
        ),
    },
    operation=_chat_call,
    render=_render_reply,
    progress=lambda args: f"Chatting with deepself: {args['model']}",
)
