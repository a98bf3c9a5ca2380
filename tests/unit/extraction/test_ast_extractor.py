from __future__ import annotations

import pytest

pytest.importorskip("tree_sitter")
pytest.importorskip("tree_sitter_typescript")

from extractschema.exceptions import ComponentParseError, DependencyError
from extractschema.extraction.ast_extractor import TreeSitterSchemaExtractor
from extractschema.extraction.regex_extractor import RegexSchemaExtractor
from extractschema.typing.enums import FieldType, HttpMethod, RuleType
from extractschema.typing.models import FieldOption


@pytest.fixture
def extractor() -> TreeSitterSchemaExtractor:
    return TreeSitterSchemaExtractor()


def test_matches_regex_backend_on_markup_fields(
    extractor: TreeSitterSchemaExtractor,
    login_form: str,
    validation_form: str,
) -> None:
    for source in (login_form, validation_form):
        assert extractor.extract_form_fields(source) == RegexSchemaExtractor().extract_form_fields(source)


def test_extracts_registrations(extractor: TreeSitterSchemaExtractor, register_form: str) -> None:
    fields = extractor.extract_form_fields(register_form)

    assert [(field.name, field.type) for field in fields] == [
        ("username", FieldType.TEXT),
        ("age", FieldType.NUMBER),
        ("isSubscribed", FieldType.CHECKBOX),
    ]
    assert fields[1].validation is not None
    assert fields[1].validation.config.pattern == r"^\d+$"


def test_member_register_callee_is_recognized(extractor: TreeSitterSchemaExtractor) -> None:
    source = "const Form = () => <input {...form.register('city', { required: 'City please' })} />;"

    fields = extractor.extract_form_fields(source)

    assert [field.name for field in fields] == ["city"]
    assert fields[0].validation is not None
    assert fields[0].validation.config.message == "City please"


def test_extracts_select_options_and_controller_rules(
    extractor: TreeSitterSchemaExtractor,
    profile_form: str,
) -> None:
    fields = extractor.extract_form_fields(profile_form)

    assert [field.name for field in fields] == ["role", "bio", "country", "nickname"]
    assert fields[0].options == [
        FieldOption(label="Administrator", value="admin"),
        FieldOption(label="User", value="user"),
    ]
    assert fields[2].validation is not None
    assert fields[2].validation.type == RuleType.REQUIRED


def test_fetch_body_becomes_shallow_placeholder(extractor: TreeSitterSchemaExtractor, login_form: str) -> None:
    calls = extractor.extract_api_calls(login_form)

    assert len(calls) == 1
    assert calls[0].method == HttpMethod.POST
    assert calls[0].headers == {"Content-Type": "application/json"}
    assert calls[0].request_body == {"email": "demo@example.com", "remember": True, "attempts": 1}


def test_non_literal_body_yields_empty_placeholder(
    extractor: TreeSitterSchemaExtractor,
    api_component: str,
) -> None:
    calls = extractor.extract_api_calls(api_component)

    assert [(call.method, call.endpoint) for call in calls] == [
        (HttpMethod.GET, "/api/users/refresh"),
        (HttpMethod.PATCH, "/api/users/bulk"),
        (HttpMethod.GET, "/api/users"),
        (HttpMethod.POST, "/api/users"),
    ]
    assert calls[0].request_body is None
    assert calls[1].request_body == {}


def test_syntax_error_raises_component_parse_error(extractor: TreeSitterSchemaExtractor) -> None:
    source = "export function Broken() {\n  return <input name='x' ;\n"

    with pytest.raises(ComponentParseError) as exc_info:
        extractor.extract_form_fields(source, "Broken")

    error = exc_info.value
    assert error.component_name == "Broken"
    assert error.line is not None
    assert error.line >= 1


def test_missing_dependencies_are_reported(monkeypatch) -> None:
    monkeypatch.setattr("extractschema.dependencies._is_module_available", lambda module_name: False)

    with pytest.raises(DependencyError):
        TreeSitterSchemaExtractor()
