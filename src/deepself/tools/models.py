"""Model management tools: create and list deepself models."""

from __future__ import annotations

from typing import Any, Dict, List

from deepself.core.schema import (
    ARRAY_TYPE,
    OBJECT_TYPE,
    STRING_TYPE,
    ParameterSpec,
    RemoteCallSpec,
    RenderedResult,
    ToolDefinition,
)
from deepself.tools.common import as_mapping, iso_date, iso_timestamp

CREATE_MODEL_TOOL = "deepself_create_model"
LIST_MODELS_TOOL = "deepself_list"

BASIC_FACT_KEYS = (
    "age",
    "gender",
    "location",
    "birth_location",
    "occupation",
    "marital_status",
    "ethnicity",
    "religion",
    "sexual_orientation",
    "education_level",
    "field_of_study",
)
DEFAULT_TOOL_CHOICES = ("web_search", "memory")
STATED_FACT_STATUS = "stated"

PLATFORM_MODELS = (
    "socrates - Socratic questioning for values exploration",
    "tony-robbins - Motivational coaching and peak performance",
    "oprah - Empathetic guidance and life wisdom",
)


def format_basic_facts(basic_facts: Dict[str, Any]) -> Dict[str, Dict[str, str]]:
    """Wrap each demographic fact as a stated value."""
    return {
        key: {"value": value, "status": STATED_FACT_STATUS}
        for key, value in basic_facts.items()
    }


def _create_model_call(args: Dict[str, Any]) -> RemoteCallSpec:
    body: Dict[str, Any] = {"name": args["name"], "username": args["username"]}
    basic_facts = format_basic_facts(args.get("basic_facts") or {})
    if basic_facts:
        body["basic_facts"] = basic_facts
    # an explicit empty list still reaches the service
    if args.get("default_tools") is not None:
        body["default_tools"] = args["default_tools"]
    return RemoteCallSpec(method="POST", path="/models", body=body)


def _render_created_model(args: Dict[str, Any], body: Any) -> RenderedResult:
    result = as_mapping(body)
    username = args["username"]
    created = iso_timestamp(result.get("created"))
    text = (
        f"Created deepself model: {username}\n"
        f"Model ID: {result.get('id')}\n"
        f"Created: {created}\n\n"
        "You can now train it with deepself_train_document or deepself_start_room."
    )
    return RenderedResult(
        text=text,
        fields={"model_id": result.get("id"), "username": username, "created": created},
    )


def _list_models_call(args: Dict[str, Any]) -> RemoteCallSpec:
    return RemoteCallSpec(method="GET", path="/models")


def summarize_model(model: Any) -> Dict[str, Any]:
    """Reduce one remote model record to id, owner, creation time and tool tags."""
    record = as_mapping(model)
    return {
        "id": record.get("id"),
        "username": record.get("owned_by"),
        "created": iso_timestamp(record.get("created")),
        "default_tools": list(record.get("default_tools") or []),
    }


def _render_model_list(args: Dict[str, Any], body: Any) -> RenderedResult:
    records = as_mapping(body).get("data") or []
    models: List[Dict[str, Any]] = [summarize_model(record) for record in records]

    count = len(models)
    text = f"Found {count} deepself model{'s' if count != 1 else ''}.\n\n"
    if models:
        lines = ["Available Models:"]
        for record, model in zip(records, models):
            tools = model["default_tools"]
            tool_note = f" (tools: {', '.join(tools)})" if tools else ""
            created = iso_date(as_mapping(record).get("created"))
            lines.append(f"- {model['id']}{tool_note} [created: {created}]")
        text += "\n".join(lines) + "\n"
    else:
        text += "No models found. Use deepself_create_model to create your first deepself."

    return RenderedResult(
        text=text,
        fields={
            "your_models": models,
            "platform_models": list(PLATFORM_MODELS),
            "message": (
                f"Found {count} of your models. "
                f"Platform models available: {len(PLATFORM_MODELS)}"
            ),
        },
    )


CREATE_MODEL = ToolDefinition(
    name=CREATE_MODEL_TOOL,
    description=(
        "Create a new deepself model. Use this to create a new persona (higher self, "
        "bad cop, specialist, etc.). The 'username' must be unique and will be used "
        "to identify this deepself in all future operations."
    ),
    parameters={
        "name": ParameterSpec(
            STRING_TYPE,
            "Display name for the model (e.g., 'My Higher Self', 'Bad Cop')",
            required=True,
        ),
        "username": ParameterSpec(
            STRING_TYPE,
            "Unique username identifier (e.g., 'clawdbot-higher-001', 'clawdbot-badcop-001')",
            required=True,
        ),
        "basic_facts": ParameterSpec(
            OBJECT_TYPE,
            "Optional: Key demographic facts. Values must be strings. "
            'Example: {"age": "28", "occupation": "Engineer", "location": "San Francisco"}',
            allowed_keys=BASIC_FACT_KEYS,
            value_type=STRING_TYPE,
        ),
        "default_tools": ParameterSpec(
            ARRAY_TYPE,
            "Optional: Built-in tools to enable for this model "
            '(e.g., ["web_search", "memory"])',
            item_enum=DEFAULT_TOOL_CHOICES,
        ),
    },
    operation=_create_model_call,
    render=_render_created_model,
    progress=lambda args: f"Creating deepself model: {args['username']}",
)

LIST_MODELS = ToolDefinition(
    name=LIST_MODELS_TOOL,
    description="List available deepself models. Returns all models owned by you.",
    parameters={},
    operation=_list_models_call,
    render=_render_model_list,
    progress=lambda args: "Listing deepself models",
)
