"""Core domain model exports."""

from extractschema.typing.models.extraction import (
    APICall,
    FieldOption,
    FormField,
    InferOptions,
    SchemaExtractionResult,
)
from extractschema.typing.models.schema import (
    DataSchema,
    PropertySchema,
    RuleConfig,
    ValidationRule,
    js_type_of,
)
from extractschema.typing.models.validation import ValidationIssue, ValidationResult

__all__ = [
    "APICall",
    "DataSchema",
    "FieldOption",
    "FormField",
    "InferOptions",
    "PropertySchema",
    "RuleConfig",
    "SchemaExtractionResult",
    "ValidationIssue",
    "ValidationResult",
    "ValidationRule",
    "js_type_of",
]
