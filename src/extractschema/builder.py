"""Fuse extracted fields and calls into schemas and render them."""

from __future__ import annotations

import json
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from extractschema.typing.enums import FieldType, RuleType, SchemaType
from extractschema.typing.models import (
    APICall,
    DataSchema,
    FormField,
    PropertySchema,
    SchemaExtractionResult,
    ValidationRule,
    js_type_of,
)

JSON_SCHEMA_DIALECT = "http://json-schema.org/draft-07/schema#"
DEFAULT_INTERFACE_NAME = "GeneratedSchema"

_TS_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")

# FormField type -> (schema type, format)
_FIELD_TYPE_SCHEMAS: dict[FieldType, tuple[SchemaType, str | None]] = {
    FieldType.NUMBER: (SchemaType.NUMBER, None),
    FieldType.EMAIL: (SchemaType.STRING, "email"),
    FieldType.DATE: (SchemaType.STRING, "date"),
    FieldType.CHECKBOX: (SchemaType.BOOLEAN, None),
}


def _select_enum(form_field: FormField) -> tuple[SchemaType, list[Any] | None]:
    values = list(dict.fromkeys(option.value for option in form_field.options or []))
    if not values:
        return SchemaType.STRING, None
    kinds = {js_type_of(value) for value in values}
    if kinds == {SchemaType.STRING}:
        return SchemaType.STRING, values
    if kinds == {SchemaType.NUMBER}:
        return SchemaType.NUMBER, values
    return SchemaType.STRING, None


def field_to_property_schema(form_field: FormField) -> PropertySchema:
    """Compute the property schema describing one form field.

    Args:
        form_field (FormField): Extracted form field.

    Returns:
        PropertySchema: Schema of the field value.
    """
    schema_type, value_format = _FIELD_TYPE_SCHEMAS.get(form_field.type, (SchemaType.STRING, None))
    enum: list[Any] | None = None
    if form_field.type == FieldType.SELECT:
        schema_type, enum = _select_enum(form_field)

    constraints: dict[str, Any] = {}
    rule = form_field.validation
    if rule is not None:
        if rule.type == RuleType.PATTERN and rule.config.pattern:
            constraints["pattern"] = rule.config.pattern
        elif rule.type == RuleType.LENGTH:
            constraints["min_length"] = _as_int(rule.config.min)
            constraints["max_length"] = _as_int(rule.config.max)
        elif rule.type == RuleType.RANGE:
            constraints["minimum"] = _finite(rule.config.min)
            constraints["maximum"] = _finite(rule.config.max)

    return PropertySchema(type=schema_type, format=value_format, enum=enum, **constraints)


def _finite(value: float | None) -> float | None:
    if value is None or isinstance(value, int):
        return value
    return value if math.isfinite(value) else None


def _as_int(value: float | None) -> int | None:
    finite = _finite(value)
    return None if finite is None else int(finite)


def infer_shallow_schema(value: Any) -> dict[str, PropertySchema]:  # noqa: ANN401
    """Describe a request body one level deep.

    Each top-level key maps to the JS type of its immediate value; nothing is
    inferred below that level.

    Args:
        value (Any): Request body placeholder.

    Returns:
        dict[str, PropertySchema]: Per-key schemas, empty when the body is not a mapping.
    """
    if not isinstance(value, Mapping):
        return {}
    return {str(key): PropertySchema(type=js_type_of(item)) for key, item in value.items()}


def _ts_literal(value: Any) -> str:  # noqa: ANN401
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    return json.dumps(value)


def _ts_key(key: str) -> str:
    return key if _TS_IDENTIFIER_RE.match(key) else json.dumps(key)


class SchemaBuilder:
    """Build data schemas and their TypeScript and JSON-Schema renderings."""

    def __init__(self, *, interface_name: str = DEFAULT_INTERFACE_NAME) -> None:
        """Initialize the builder.

        Args:
            interface_name (str): Interface name used by `build_result`.
        """
        self._interface_name = interface_name

    @staticmethod
    def build_data_schema(form_fields: Iterable[FormField], api_calls: Iterable[APICall] = ()) -> DataSchema:
        """Merge form fields and request bodies into one root schema.

        Form fields come first; request-body keys are only added when no form
        field already defines them.

        Args:
            form_fields (Iterable[FormField]): Deduplicated form fields.
            api_calls (Iterable[APICall]): Extracted request calls.

        Returns:
            DataSchema: Unified schema.
        """
        properties: dict[str, PropertySchema] = {}
        required: list[str] = []
        for form_field in form_fields:
            properties[form_field.name] = field_to_property_schema(form_field)
            if form_field.validation is not None and form_field.validation.type == RuleType.REQUIRED:
                required.append(form_field.name)

        for call in api_calls:
            if call.request_body is None:
                continue
            for key, schema in infer_shallow_schema(call.request_body).items():
                properties.setdefault(key, schema)

        return DataSchema(properties=properties, required=required)

    @staticmethod
    def collect_validations(form_fields: Iterable[FormField]) -> list[ValidationRule]:
        """Return the validation rules attached to fields, in field order."""
        return [form_field.validation for form_field in form_fields if form_field.validation is not None]

    @classmethod
    def to_typescript(cls, schema: DataSchema, interface_name: str = DEFAULT_INTERFACE_NAME) -> str:
        """Render a root schema as an exported TypeScript interface.

        Args:
            schema (DataSchema): Root schema.
            interface_name (str): Interface name.

        Returns:
            str: Interface source text.
        """
        lines = [f"export interface {interface_name} {{"]
        required = set(schema.required)
        for key, prop in schema.properties.items():
            optional = "" if key in required else "?"
            lines.append(f"  {_ts_key(key)}{optional}: {cls.property_to_typescript(prop)}")
        lines.append("}")
        return "\n".join(lines)

    @classmethod
    def property_to_typescript(cls, prop: PropertySchema) -> str:
        """Render one schema node as a TypeScript type expression.

        Args:
            prop (PropertySchema): Schema node.

        Returns:
            str: TypeScript type.
        """
        if prop.enum and prop.type in {SchemaType.STRING, SchemaType.NUMBER}:
            return " | ".join(_ts_literal(member) for member in prop.enum)
        if prop.type == SchemaType.ARRAY:
            return f"{cls.property_to_typescript(prop.items)}[]" if prop.items is not None else "any[]"
        if prop.type == SchemaType.OBJECT:
            if prop.properties is None:
                return "Record<string, any>"
            members = "; ".join(
                f"{_ts_key(key)}: {cls.property_to_typescript(value)}" for key, value in prop.properties.items()
            )
            return f"{{ {members} }}"
        return prop.type.to_str()

    @staticmethod
    def to_json_schema(schema: DataSchema) -> dict[str, Any]:
        """Tag a root schema with the draft-07 dialect marker.

        Args:
            schema (DataSchema): Root schema.

        Returns:
            dict[str, Any]: JSON Schema document.
        """
        return {"$schema": JSON_SCHEMA_DIALECT, **schema.to_dict()}

    def build_result(self, form_fields: list[FormField], api_calls: list[APICall]) -> SchemaExtractionResult:
        """Bundle every view of one component's extraction.

        Args:
            form_fields (list[FormField]): Deduplicated form fields.
            api_calls (list[APICall]): Extracted request calls.

        Returns:
            SchemaExtractionResult: Complete extraction result.
        """
        data_schema = self.build_data_schema(form_fields, api_calls)
        return SchemaExtractionResult(
            data_schema=data_schema,
            form_fields=form_fields,
            api_calls=api_calls,
            validations=self.collect_validations(form_fields),
            typescript=self.to_typescript(data_schema, self._interface_name),
            json_schema=self.to_json_schema(data_schema),
        )


def combine_typescript_definitions(results: Mapping[str, SchemaExtractionResult]) -> str:
    """Concatenate every component's interface under a `// name` comment.

    Args:
        results (Mapping[str, SchemaExtractionResult]): Results keyed by component name.

    Returns:
        str: Combined TypeScript text.
    """
    return "".join(f"// {name}\n{result.typescript}\n\n" for name, result in results.items())


def combine_json_schemas(results: Mapping[str, SchemaExtractionResult]) -> dict[str, Any]:
    """Gather every component's JSON Schema under `definitions`.

    Args:
        results (Mapping[str, SchemaExtractionResult]): Results keyed by component name.

    Returns:
        dict[str, Any]: Combined draft-07 document.
    """
    return {
        "$schema": JSON_SCHEMA_DIALECT,
        "type": "object",
        "properties": {},
        "definitions": {name: result.json_schema for name, result in results.items()},
    }
