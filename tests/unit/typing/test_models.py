from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from extractschema.typing.enums import FieldType, HttpMethod, RuleType, SchemaType
from extractschema.typing.models import (
    APICall,
    DataSchema,
    FormField,
    InferOptions,
    PropertySchema,
    RuleConfig,
    ValidationRule,
    js_type_of,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, SchemaType.BOOLEAN),
        (3, SchemaType.NUMBER),
        (2.5, SchemaType.NUMBER),
        ("x", SchemaType.STRING),
        ([1], SchemaType.ARRAY),
        ({"a": 1}, SchemaType.OBJECT),
        (None, SchemaType.STRING),
    ],
)
def test_js_type_of(value: object, expected: SchemaType) -> None:
    assert js_type_of(value) == expected


def test_property_schema_rejects_items_and_properties() -> None:
    with pytest.raises(ValidationError, match="both 'items' and 'properties'"):
        PropertySchema(
            type=SchemaType.ARRAY,
            items=PropertySchema(type=SchemaType.STRING),
            properties={"a": PropertySchema(type=SchemaType.STRING)},
        )


def test_property_schema_rejects_enum_member_of_wrong_type() -> None:
    with pytest.raises(ValidationError, match="does not match schema type"):
        PropertySchema(type=SchemaType.STRING, enum=["a", 1])


def test_property_schema_serializes_camel_case_keys() -> None:
    schema = PropertySchema.model_validate({"type": "string", "minLength": 2, "maxLength": 8})

    assert schema.min_length == 2
    assert schema.to_dict() == {"type": "string", "minLength": 2, "maxLength": 8}


def test_data_schema_dedupes_required_in_first_seen_order() -> None:
    schema = DataSchema(required=["email", "name", "email"])

    assert schema.required == ["email", "name"]


def test_data_schema_parses_additional_properties_alias() -> None:
    schema = DataSchema.model_validate({"type": "object", "properties": {}, "additionalProperties": False})

    assert schema.additional_properties is False
    assert schema.to_dict()["additionalProperties"] is False


def test_data_schema_rejects_non_object_root() -> None:
    with pytest.raises(ValidationError):
        DataSchema.model_validate({"type": "array"})


def test_rule_config_compiles_pattern_with_js_flags() -> None:
    config = RuleConfig(pattern="^abc$", flags="gi", message="Invalid format")

    compiled = config.compile_pattern()

    assert compiled is not None
    assert compiled.flags & re.IGNORECASE
    assert compiled.search("ABC") is not None


def test_rule_config_without_pattern_compiles_to_none() -> None:
    assert RuleConfig(min=1, message="Too short").compile_pattern() is None


def test_custom_validator_is_excluded_from_dump() -> None:
    rule = ValidationRule(
        field="age",
        type=RuleType.CUSTOM,
        config=RuleConfig(validator=lambda value: value > 0, message="Must be positive"),
    )

    assert rule.model_dump(mode="json") == {
        "field": "age",
        "type": "custom",
        "config": {"pattern": None, "flags": None, "min": None, "max": None, "message": "Must be positive"},
    }


def test_api_call_accepts_wire_aliases() -> None:
    call = APICall.model_validate({"method": "POST", "endpoint": "/api/users", "requestBody": {"name": ""}})

    assert call.method == HttpMethod.POST
    assert call.request_body == {"name": ""}


def test_form_field_defaults_to_text() -> None:
    assert FormField(name="username").type == FieldType.TEXT


def test_form_field_is_frozen() -> None:
    form_field = FormField(name="username")

    with pytest.raises(ValidationError):
        form_field.name = "other"  # type: ignore[misc]


def test_infer_options_rejects_zero_sample_size() -> None:
    with pytest.raises(ValidationError):
        InferOptions(sample_size=0)
