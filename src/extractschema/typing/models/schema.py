"""Schema-centric domain models."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping  # noqa: TC003
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from extractschema.typing.enums import RuleType, SchemaType

# JS regex flags with a Python equivalent; others (g, y, u, d) do not change a single test().
_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def js_type_of(value: object) -> SchemaType:
    """Return the schema type a Python value maps to.

    `bool` is tested before numbers since it subclasses `int`. Values outside the
    JSON value model fall back to string.

    Args:
        value (object): Any Python value.

    Returns:
        SchemaType: Structural type of the value.
    """
    if isinstance(value, bool):
        return SchemaType.BOOLEAN
    if isinstance(value, int | float):
        return SchemaType.NUMBER
    if isinstance(value, list | tuple):
        return SchemaType.ARRAY
    if isinstance(value, Mapping):
        return SchemaType.OBJECT
    return SchemaType.STRING


class RuleConfig(BaseModel):
    """Parameters of a validation rule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str | None = None
    flags: str | None = None
    min: int | float | None = None
    max: int | float | None = None
    validator: Callable[[Any], bool] | None = Field(default=None, exclude=True)
    message: str

    def compile_pattern(self) -> re.Pattern[str] | None:
        """Compile the configured pattern source with its JS flags.

        Raises:
            re.error: If the pattern source is not a valid regular expression.

        Returns:
            re.Pattern[str] | None: Compiled pattern, or None when no pattern is set.
        """
        if self.pattern is None:
            return None
        flags = 0
        for flag in self.flags or "":
            flags |= _REGEX_FLAGS.get(flag, 0)
        return re.compile(self.pattern, flags)


class ValidationRule(BaseModel):
    """Single validation constraint extracted for a field."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    field: str
    type: RuleType
    config: RuleConfig


class PropertySchema(BaseModel):
    """Node of a structural schema tree."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    type: SchemaType
    description: str | None = None
    format: str | None = None
    pattern: str | None = None
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    minimum: int | float | None = None
    maximum: int | float | None = None
    enum: list[Any] | None = None
    items: PropertySchema | None = None
    properties: dict[str, PropertySchema] | None = None
    required: list[str] | None = None
    validation: ValidationRule | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> Self:
        """Enforce the structural invariants of a schema node.

        Raises:
            ValueError: If `items` and `properties` are both set, or an enum member
                does not match the declared type.

        Returns:
            Self: Validated schema node.
        """
        if self.items is not None and self.properties is not None:
            raise ValueError("A schema cannot define both 'items' and 'properties'")  # noqa: TRY003
        if self.enum is not None:
            for member in self.enum:
                if js_type_of(member) != self.type:
                    message = f"Enum member {member!r} does not match schema type '{self.type}'"
                    raise ValueError(message)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible payload with camelCase keys.

        Returns:
            dict[str, Any]: Serialized schema node.
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class DataSchema(BaseModel):
    """Root object schema produced by one extraction."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    type: Literal["object"] = "object"
    properties: dict[str, PropertySchema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    additional_properties: bool | None = Field(default=None, alias="additionalProperties")

    @field_validator("required")
    @classmethod
    def _dedupe_required(cls, value: list[str]) -> list[str]:
        """Keep `required` an ordered set.

        Args:
            value (list[str]): Raw required names.

        Returns:
            list[str]: Names in first-seen order without duplicates.
        """
        return list(dict.fromkeys(value))

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible payload with camelCase keys.

        Returns:
            dict[str, Any]: Serialized schema.
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
