"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class SchemaType(_EnumMixin):
    """Structural type of a schema node."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


class FieldType(_EnumMixin):
    """Supported form field kinds."""

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"  # noqa: S105
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    TEXTAREA = "textarea"


class HttpMethod(_EnumMixin):
    """HTTP methods recognized on outbound requests."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class RuleType(_EnumMixin):
    """Validation rule kinds attached to a field."""

    REQUIRED = "required"
    PATTERN = "pattern"
    LENGTH = "length"
    RANGE = "range"
    CUSTOM = "custom"


class ViolationKind(_EnumMixin):
    """Kinds of violation reported by the schema validator."""

    REQUIRED = "required"
    TYPE = "type"
    PATTERN = "pattern"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    FORMAT = "format"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    ENUM = "enum"
    ADDITIONAL = "additional"
    CUSTOM = "custom"
    LENGTH = "length"
    RANGE = "range"


class ExtractorBackendType(_EnumMixin):
    """Source extractor implementations."""

    REGEX = "regex"
    AST = "ast"
