"""Training tools: documents and conversational training rooms."""

from __future__ import annotations

from typing import Any, Dict

from deepself.core.schema import (
    STRING_TYPE,
    ParameterSpec,
    RemoteCallSpec,
    RenderedResult,
    ToolDefinition,
)
from deepself.tools.common import (
    as_mapping,
    format_processed,
    path_segment,
    stat_count,
)

TRAIN_DOCUMENT_TOOL = "deepself_train_document"
START_ROOM_TOOL = "deepself_start_room"
FINALIZE_ROOM_TOOL = "deepself_finalize_room"

PERSPECTIVES = ("first-person", "third-person")
DEFAULT_PERSPECTIVE = "first-person"


def _train_document_call(args: Dict[str, Any]) -> RemoteCallSpec:
    body = {
        "label": args["label"],
        "content": args["content"],
        "perspective": args.get("perspective") or DEFAULT_PERSPECTIVE,
    }
    if args.get("context"):
        body["context"] = args["context"]
    return RemoteCallSpec(
        method="POST",
        path=f"/models/{path_segment(args['model'])}/training/documents",
        body=body,
    )


def _render_trained_document(args: Dict[str, Any], body: Any) -> RenderedResult:
    result = as_mapping(body)
    stats = result.get("stats")
    model = args["model"]
    text = (
        f"Training data added to {model}\n"
        f"Document ID: {result.get('document_id')}\n"
        f"Status: {result.get('status')}\n"
        f"{format_processed(stats)}"
    )
    return RenderedResult(
        text=text,
        fields={
            "document_id": result.get("document_id"),
            "status": result.get("status"),
            "stats": stats,
            "message": (
                f"Training data added to {model}. "
                f"Processed {stat_count(stats, 'epsilons')} insights."
            ),
        },
    )


def _start_room_call(args: Dict[str, Any]) -> RemoteCallSpec:
    # interviewer_model is echoed in the output only; the service keys rooms by user_model
    return RemoteCallSpec(
        method="POST",
        path=f"/models/{path_segment(args['user_model'])}/training/rooms",
        body={"label": args["label"], "user_model": args["user_model"]},
    )


def _render_started_room(args: Dict[str, Any], body: Any) -> RenderedResult:
    result = as_mapping(body)
    room_id = result.get("room_id")
    text = (
        "Training room created!\n"
        f"Room ID: {room_id}\n"
        f"Training: {args['user_model']}\n"
        f"Interviewer: {args['interviewer_model']}\n\n"
        f'Use deepself_chat with room_id="{room_id}" to continue the conversation.'
    )
    return RenderedResult(
        text=text,
        fields={
            "room_id": room_id,
            "status": result.get("status"),
            "user_model": args["user_model"],
            "interviewer_model": args["interviewer_model"],
            "message": (
                f"Training room created. Room ID: {room_id}. "
                "Use deepself_chat with this room_id to continue the conversation."
            ),
        },
    )


def _finalize_room_call(args: Dict[str, Any]) -> RemoteCallSpec:
    return RemoteCallSpec(
        method="POST",
        path=f"/training/rooms/{path_segment(args['room_id'])}/finalize",
    )


def _render_finalized_room(args: Dict[str, Any], body: Any) -> RenderedResult:
    result = as_mapping(body)
    stats = result.get("stats")
    text = (
        "Training room finalized!\n"
        f"Status: {result.get('status')}\n"
        f"{format_processed(stats)}\n\n"
        "Insights have been committed to your deepself's knowledge graph."
    )
    return RenderedResult(
        text=text,
        fields={
            "status": result.get("status"),
            "stats": stats,
            "message": (
                "Training room finalized. "
                f"Processed {stat_count(stats, 'epsilons')} insights."
            ),
        },
    )


TRAIN_DOCUMENT = ToolDefinition(
    name=TRAIN_DOCUMENT_TOOL,
    description=(
        "Add training data to a deepself model. Use this to train your deepself with "
        "documents, quotes, or content you identify with. The content demonstrates who "
        "you are through your words or those you identify with. The 'model' parameter "
        "is the username of the deepself to train (e.g., 'clawdbot-higher-001')."
    ),
    parameters={
        "model": ParameterSpec(
            STRING_TYPE,
            "Username of the deepself model to train (e.g., 'clawdbot-higher-001')",
            required=True,
        ),
        "content": ParameterSpec(
            STRING_TYPE,
            "The training content (your words or content you identify with)",
            required=True,
        ),
        "label": ParameterSpec(
            STRING_TYPE,
            "Title for this training data (e.g., 'My Core Values', 'Career Journey')",
            required=True,
        ),
        "perspective": ParameterSpec(
            STRING_TYPE,
            "Perspective of the content (default: first-person)",
            enum=PERSPECTIVES,
            default=DEFAULT_PERSPECTIVE,
        ),
        "context": ParameterSpec(STRING_TYPE, "Optional context about this content"),
    },
    operation=_train_document_call,
    render=_render_trained_document,
    progress=lambda args: (
        f"Training deepself model: {args['model']} with document: {args['label']}"
    ),
)

START_ROOM = ToolDefinition(
    name=START_ROOM_TOOL,
    description=(
        "Create a training room for conversational training. Use this to have a "
        "conversation with a platform deepself (like Socrates or Tony Robbins) where "
        "YOUR responses train YOUR deepself. Example: converse with Socrates to explore "
        "values through Socratic questioning. The 'user_model' is the username of YOUR "
        "deepself being trained, and 'interviewer_model' is the username of the "
        "platform deepself to converse with."
    ),
    parameters={
        "user_model": ParameterSpec(
            STRING_TYPE,
            "Username of YOUR deepself being trained (e.g., 'clawdbot-higher-001')",
            required=True,
        ),
        "interviewer_model": ParameterSpec(
            STRING_TYPE,
            "Username of platform deepself to converse with (e.g., 'socrates', 'tony-robbins')",
            required=True,
        ),
        "label": ParameterSpec(
            STRING_TYPE,
            "Session name (e.g., 'Values Exploration Session', 'Career Reflection')",
            required=True,
        ),
    },
    operation=_start_room_call,
    render=_render_started_room,
    progress=lambda args: (
        f"Creating training room: {args['label']} "
        f"(training {args['user_model']} with {args['interviewer_model']})"
    ),
)

FINALIZE_ROOM = ToolDefinition(
    name=FINALIZE_ROOM_TOOL,
    description=(
        "Finalize a training room to commit extracted insights to your deepself's "
        "knowledge graph. Call this when the conversation is complete and you want to "
        "save the training."
    ),
    parameters={
        "room_id": ParameterSpec(
            STRING_TYPE,
            "The room_id returned from deepself_start_room",
            required=True,
        ),
    },
    operation=_finalize_room_call,
    render=_render_finalized_room,
    progress=lambda args: f"Finalizing training room: {args['room_id']}",
)
