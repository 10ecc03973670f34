"""Tests for parameter specs, tool definitions, and argument validation."""

import pytest

from deepself.core.exceptions import (
    InvalidEnumValueError,
    InvalidKeyError,
    InvalidParameterTypeError,
    MissingParameterError,
    ToolInputError,
)
from deepself.core.schema import (
    ARRAY_TYPE,
    OBJECT_TYPE,
    STRING_TYPE,
    OutputShape,
    ParameterSpec,
    RemoteCallSpec,
    RenderedResult,
    ToolDefinition,
    validate_arguments,
)

PARAMETERS = {
    "model": ParameterSpec(STRING_TYPE, "Model username", required=True),
    "label": ParameterSpec(STRING_TYPE, "Title", required=True),
    "perspective": ParameterSpec(
        STRING_TYPE,
        "Perspective",
        enum=("first-person", "third-person"),
        default="first-person",
    ),
    "facts": ParameterSpec(
        OBJECT_TYPE, "Facts", allowed_keys=("age", "location"), value_type=STRING_TYPE
    ),
    "tools": ParameterSpec(ARRAY_TYPE, "Tools", item_enum=("web_search", "memory")),
}


def _definition(**overrides):
    fields = dict(
        name="demo_tool",
        description="Demo tool",
        parameters=PARAMETERS,
        operation=lambda args: RemoteCallSpec(method="GET", path="/demo"),
        render=lambda args, body: RenderedResult(text="ok"),
    )
    fields.update(overrides)
    return ToolDefinition(**fields)


class TestValidateArguments:
    def test_valid_arguments_apply_defaults(self):
        result = validate_arguments(PARAMETERS, {"model": "me", "label": "Values"})
        assert result == {
            "model": "me",
            "label": "Values",
            "perspective": "first-person",
            "facts": None,
            "tools": None,
        }

    def test_first_missing_required_field_in_declaration_order(self):
        with pytest.raises(MissingParameterError) as exc_info:
            validate_arguments(PARAMETERS, {})
        assert exc_info.value.field_name == "model"
        assert str(exc_info.value) == "Missing required parameter: model"

    def test_missing_reported_before_other_defects(self):
        with pytest.raises(MissingParameterError) as exc_info:
            validate_arguments(PARAMETERS, {"model": "me", "perspective": "sideways"})
        assert exc_info.value.field_name == "label"

    def test_none_counts_as_absent(self):
        with pytest.raises(MissingParameterError):
            validate_arguments(PARAMETERS, {"model": None, "label": "x"})

    def test_empty_string_is_present(self):
        result = validate_arguments(PARAMETERS, {"model": "", "label": ""})
        assert result["model"] == ""

    def test_wrong_type_rejected(self):
        with pytest.raises(InvalidParameterTypeError) as exc_info:
            validate_arguments(PARAMETERS, {"model": 42, "label": "x"})
        assert exc_info.value.expected_type == "string"
        assert exc_info.value.actual_type == "number"

    def test_boolean_is_not_a_string(self):
        with pytest.raises(InvalidParameterTypeError) as exc_info:
            validate_arguments(PARAMETERS, {"model": True, "label": "x"})
        assert exc_info.value.actual_type == "boolean"

    def test_enum_violation(self):
        with pytest.raises(InvalidEnumValueError) as exc_info:
            validate_arguments(
                PARAMETERS, {"model": "me", "label": "x", "perspective": "second-person"}
            )
        assert exc_info.value.field_name == "perspective"
        assert "first-person" in str(exc_info.value)

    def test_disallowed_object_key(self):
        with pytest.raises(InvalidKeyError) as exc_info:
            validate_arguments(
                PARAMETERS, {"model": "me", "label": "x", "facts": {"age": "28", "hobby": "chess"}}
            )
        assert str(exc_info.value) == "Invalid facts key: hobby. Allowed keys: age, location"

    def test_object_value_of_wrong_type(self):
        with pytest.raises(InvalidParameterTypeError) as exc_info:
            validate_arguments(PARAMETERS, {"model": "me", "label": "x", "facts": {"age": 28}})
        assert exc_info.value.field_name == "facts.age"
        assert str(exc_info.value) == (
            "Invalid type for parameter 'facts.age': expected string, got number"
        )

    def test_array_item_outside_enum(self):
        with pytest.raises(InvalidEnumValueError):
            validate_arguments(
                PARAMETERS, {"model": "me", "label": "x", "tools": ["web_search", "shell"]}
            )

    def test_input_errors_share_a_base(self):
        with pytest.raises(ToolInputError):
            validate_arguments(PARAMETERS, {"model": "me", "label": "x", "tools": "memory"})

    def test_undeclared_arguments_dropped(self):
        result = validate_arguments(PARAMETERS, {"model": "me", "label": "x", "extra": 1})
        assert "extra" not in result

    def test_none_raw_args_treated_as_empty(self):
        assert validate_arguments({}, None) == {}


class TestParameterSpec:
    def test_unsupported_type_rejected(self):
        with pytest.raises(ValueError):
            ParameterSpec("integer")

    def test_array_schema_lists_item_enum(self):
        schema = PARAMETERS["tools"].to_json_schema()
        assert schema["type"] == "array"
        assert schema["items"] == {"type": "string", "enum": ["web_search", "memory"]}

    def test_allowed_keys_appear_in_description(self):
        schema = PARAMETERS["facts"].to_json_schema()
        assert "ONLY these keys are allowed: age, location." in schema["description"]

    def test_object_value_type_in_schema(self):
        schema = PARAMETERS["facts"].to_json_schema()
        assert schema["additionalProperties"] == {"type": "string"}


class TestToolDefinition:
    def test_parameters_schema_lists_required(self):
        schema = _definition().parameters_schema()
        assert schema["type"] == "object"
        assert schema["required"] == ["model", "label"]
        assert schema["properties"]["perspective"]["enum"] == ["first-person", "third-person"]

    def test_empty_parameters_omit_required(self):
        schema = _definition(parameters={}).parameters_schema()
        assert schema == {"type": "object", "properties": {}}

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            _definition(name="  ")

    def test_parameters_are_read_only(self):
        definition = _definition()
        with pytest.raises(TypeError):
            definition.parameters["new"] = ParameterSpec(STRING_TYPE)

    def test_with_output_shape_returns_copy(self):
        definition = _definition()
        structured = definition.with_output_shape(OutputShape.STRUCTURED)
        assert structured.output_shape is OutputShape.STRUCTURED
        assert definition.output_shape is OutputShape.TEXT

    def test_describe_call_defaults_to_tool_name(self):
        assert _definition().describe_call({}) == "Running deepself tool: demo_tool"


class TestRemoteCallSpec:
    def test_unsupported_method_rejected(self):
        with pytest.raises(ValueError):
            RemoteCallSpec(method="DELETE", path="/models")

    def test_relative_path_rejected(self):
        with pytest.raises(ValueError):
            RemoteCallSpec(method="GET", path="models")


class TestOutputShape:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("text", OutputShape.TEXT),
            ("STRUCTURED", OutputShape.STRUCTURED),
            (" structured ", OutputShape.STRUCTURED),
            (OutputShape.TEXT, OutputShape.TEXT),
        ],
    )
    def test_parse(self, raw, expected):
        assert OutputShape.parse(raw) is expected

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unknown output shape"):
            OutputShape.parse("html")
