"""Extraction request/result models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from extractschema.typing.enums import FieldType, HttpMethod
from extractschema.typing.models.schema import DataSchema, ValidationRule


class FieldOption(BaseModel):
    """Choice offered by a select or radio field."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str
    value: Any


class FormField(BaseModel):
    """Form field recovered from component source."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: FieldType = FieldType.TEXT
    label: str | None = None
    placeholder: str | None = None
    validation: ValidationRule | None = None
    options: list[FieldOption] | None = None


class APICall(BaseModel):
    """Outbound request recovered from component source."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    method: HttpMethod = HttpMethod.GET
    endpoint: str
    request_body: Any = Field(default=None, alias="requestBody")
    headers: dict[str, str] | None = None
    response_type: Any = Field(default=None, alias="responseType")


class InferOptions(BaseModel):
    """Options steering value-based schema inference."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mark_required: bool = False
    detect_patterns: bool = False
    sample_size: int | None = Field(default=None, ge=1)


class SchemaExtractionResult(BaseModel):
    """Bundle returned for one component."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    data_schema: DataSchema = Field(alias="dataSchema")
    form_fields: list[FormField] = Field(default_factory=list, alias="formFields")
    api_calls: list[APICall] = Field(default_factory=list, alias="apiCalls")
    validations: list[ValidationRule] = Field(default_factory=list)
    typescript: str
    json_schema: dict[str, Any] = Field(alias="jsonSchema")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible payload with camelCase keys.

        Returns:
            dict[str, Any]: Serialized extraction result.
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
