"""Typing-centric domain modules."""

from extractschema.typing.enums import (
    ExtractorBackendType,
    FieldType,
    HttpMethod,
    RuleType,
    SchemaType,
    ViolationKind,
)
from extractschema.typing.models import (
    APICall,
    DataSchema,
    FieldOption,
    FormField,
    InferOptions,
    PropertySchema,
    RuleConfig,
    SchemaExtractionResult,
    ValidationIssue,
    ValidationResult,
    ValidationRule,
)
from extractschema.typing.protocol import SchemaExtractorBackend

__all__ = [
    "APICall",
    "DataSchema",
    "ExtractorBackendType",
    "FieldOption",
    "FieldType",
    "FormField",
    "HttpMethod",
    "InferOptions",
    "PropertySchema",
    "RuleConfig",
    "RuleType",
    "SchemaExtractionResult",
    "SchemaExtractorBackend",
    "SchemaType",
    "ValidationIssue",
    "ValidationResult",
    "ValidationRule",
    "ViolationKind",
]
