from extractschema.exceptions import (
    AsyncExecutionError,
    ComponentParseError,
    DependencyError,
    ExtractionError,
    PackageError,
    SettingsError,
)


def test_root_exception_hierarchy() -> None:
    assert issubclass(SettingsError, PackageError)
    assert issubclass(AsyncExecutionError, PackageError)
    assert issubclass(ExtractionError, PackageError)
    assert issubclass(ComponentParseError, ExtractionError)
    assert issubclass(DependencyError, PackageError)


def test_component_parse_error_reports_position() -> None:
    error = ComponentParseError(message="Syntax error", component_name="LoginForm", line=3, column=7)

    assert str(error) == "LoginForm:3:7: Syntax error"


def test_component_parse_error_without_position() -> None:
    error = ComponentParseError(message="Syntax error")

    assert str(error) == "Component: Syntax error"


def test_settings_error_includes_cause() -> None:
    assert str(SettingsError(exc=ValueError("bad"))) == "Failed to load settings: bad"
    assert str(SettingsError()) == "Failed to load settings"
