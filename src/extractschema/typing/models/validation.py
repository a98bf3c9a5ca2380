"""Validation outcome models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from extractschema.typing.enums import ViolationKind


class ValidationIssue(BaseModel):
    """Single constraint violation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    field: str
    message: str
    type: ViolationKind


class ValidationResult(BaseModel):
    """Outcome of validating one value against a schema."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
