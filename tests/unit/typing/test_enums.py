from __future__ import annotations

import pytest

from extractschema.typing.enums import ExtractorBackendType, FieldType, HttpMethod, ViolationKind


def test_field_type_from_str() -> None:
    assert FieldType.from_str("textarea") == FieldType.TEXTAREA


def test_field_type_from_str_raises_on_invalid_value() -> None:
    with pytest.raises(ValueError, match="Unsupported FieldType value"):
        FieldType.from_str("tel")


def test_http_method_values_are_upper_case() -> None:
    assert [method.to_str() for method in HttpMethod] == ["GET", "POST", "PUT", "DELETE", "PATCH"]


def test_violation_kind_uses_camel_case_wire_names() -> None:
    assert ViolationKind.MIN_LENGTH.to_str() == "minLength"
    assert ViolationKind.from_str("maxLength") == ViolationKind.MAX_LENGTH


def test_extractor_backend_type_from_str() -> None:
    assert ExtractorBackendType.from_str("ast") == ExtractorBackendType.AST
