from __future__ import annotations

import pytest

from extractschema.typing.enums import RuleType, SchemaType, ViolationKind
from extractschema.typing.models import DataSchema, PropertySchema, RuleConfig, ValidationRule
from extractschema.validation import SchemaValidator, js_number, js_string, parses_as_date, validate


@pytest.fixture
def user_schema() -> DataSchema:
    return DataSchema(
        properties={
            "email": PropertySchema(type=SchemaType.STRING, format="email"),
            "name": PropertySchema(type=SchemaType.STRING, min_length=2, max_length=5),
            "age": PropertySchema(type=SchemaType.NUMBER, minimum=18, maximum=99),
            "role": PropertySchema(type=SchemaType.STRING, enum=["admin", "user"]),
        },
        required=["email", "name"],
    )


def _kinds(result) -> list[tuple[str, ViolationKind]]:
    return [(issue.field, issue.type) for issue in result.errors]


def test_valid_data_passes(user_schema: DataSchema) -> None:
    result = validate({"email": "jane@example.com", "name": "Jane", "age": 30, "role": "admin"}, user_schema)

    assert result.valid is True
    assert result.errors == []


def test_missing_and_null_required_fields(user_schema: DataSchema) -> None:
    result = validate({"name": None}, user_schema)

    assert _kinds(result) == [("email", ViolationKind.REQUIRED), ("name", ViolationKind.REQUIRED)]
    assert result.errors[0].message == "Field 'email' is required"


def test_type_mismatch_stops_further_checks(user_schema: DataSchema) -> None:
    result = validate({"email": "jane@example.com", "name": "Jane", "age": "30"}, user_schema)

    assert _kinds(result) == [("age", ViolationKind.TYPE)]
    assert result.errors[0].message == "Expected type 'number' but got 'string'"


def test_boolean_is_not_a_number(user_schema: DataSchema) -> None:
    result = validate({"email": "jane@example.com", "name": "Jane", "age": True}, user_schema)

    assert result.errors[0].message == "Expected type 'number' but got 'boolean'"


@pytest.mark.parametrize(
    ("name", "age", "expected"),
    [
        ("Jo", 18, []),
        ("Jonas", 99, []),
        ("J", 18, [("name", ViolationKind.MIN_LENGTH)]),
        ("Jonathan", 18, [("name", ViolationKind.MAX_LENGTH)]),
        ("Jo", 17, [("age", ViolationKind.MINIMUM)]),
        ("Jo", 99.5, [("age", ViolationKind.MAXIMUM)]),
    ],
)
def test_length_and_range_boundaries(
    user_schema: DataSchema,
    name: str,
    age: float,
    expected: list[tuple[str, ViolationKind]],
) -> None:
    result = validate({"email": "jane@example.com", "name": name, "age": age}, user_schema)

    assert _kinds(result) == expected


def test_violation_messages(user_schema: DataSchema) -> None:
    result = validate({"email": "nope", "name": "J", "age": 100, "role": "root"}, user_schema)

    assert [issue.message for issue in result.errors] == [
        "Value is not a valid email",
        "Value must be at least 2 characters",
        "Value must be at most 99",
        "Value must be one of: admin, user",
    ]
    assert [issue.field for issue in result.errors] == ["email", "name", "age", "role"]


def test_enum_comparison_is_type_strict() -> None:
    schema = DataSchema(properties={"level": PropertySchema(type=SchemaType.NUMBER, enum=[1, 2])})

    assert validate({"level": 1}, schema).valid
    assert _kinds(validate({"level": True}, schema)) == [("level", ViolationKind.TYPE)]
    assert _kinds(validate({"level": 3}, schema)) == [("level", ViolationKind.ENUM)]


def test_null_never_fails_type_but_fails_enum() -> None:
    schema = DataSchema(
        properties={
            "note": PropertySchema(type=SchemaType.STRING, min_length=3),
            "role": PropertySchema(type=SchemaType.STRING, enum=["a"]),
        },
    )

    assert _kinds(validate({"note": None, "role": None}, schema)) == [("role", ViolationKind.ENUM)]


@pytest.mark.parametrize(
    ("value_format", "good", "bad"),
    [
        ("url", "https://example.com", "example.com"),
        ("date", "2024-02-29", "someday"),
        ("date-time", "2024-02-29T10:00:00Z", "later"),
        ("time", "23:59", "24:00"),
        ("uuid", "123e4567-e89b-12d3-a456-426614174000", "123"),
    ],
)
def test_format_checks(value_format: str, good: str, bad: str) -> None:
    schema = DataSchema(properties={"value": PropertySchema(type=SchemaType.STRING, format=value_format)})

    assert validate({"value": good}, schema).valid
    assert _kinds(validate({"value": bad}, schema)) == [("value", ViolationKind.FORMAT)]


def test_unknown_format_is_ignored() -> None:
    schema = DataSchema(properties={"value": PropertySchema(type=SchemaType.STRING, format="phone")})

    assert validate({"value": "not a phone"}, schema).valid


def test_pattern_check_and_invalid_pattern() -> None:
    schema = DataSchema(
        properties={
            "zip": PropertySchema(type=SchemaType.STRING, pattern=r"^\d{5}$"),
            "code": PropertySchema(type=SchemaType.STRING, pattern="(unclosed"),
        },
    )

    result = validate({"zip": "1234", "code": "anything"}, schema)

    assert _kinds(result) == [("zip", ViolationKind.PATTERN), ("code", ViolationKind.PATTERN)]
    assert result.errors[0].message == "Value does not match pattern: ^\\d{5}$"


def test_array_items_and_nested_objects() -> None:
    schema = DataSchema(
        properties={
            "tags": PropertySchema(type=SchemaType.ARRAY, items=PropertySchema(type=SchemaType.STRING)),
            "address": PropertySchema(
                type=SchemaType.OBJECT,
                properties={
                    "city": PropertySchema(type=SchemaType.STRING),
                    "zip": PropertySchema(type=SchemaType.STRING),
                },
                required=["city", "zip"],
            ),
        },
    )

    result = validate({"tags": ["a", 2], "address": {"city": 5}}, schema)

    assert _kinds(result) == [
        ("tags[1]", ViolationKind.TYPE),
        ("address.city", ViolationKind.TYPE),
        ("address.zip", ViolationKind.REQUIRED),
    ]
    assert result.errors[-1].message == "Field is required"


def test_additional_properties_are_reported_only_when_forbidden() -> None:
    open_schema = DataSchema(properties={"a": PropertySchema(type=SchemaType.STRING)})
    closed_schema = open_schema.model_copy(update={"additional_properties": False})

    assert validate({"a": "x", "b": 1}, open_schema).valid
    result = validate({"a": "x", "b": 1}, closed_schema)
    assert _kinds(result) == [("b", ViolationKind.ADDITIONAL)]
    assert result.errors[0].message == "Additional property 'b' is not allowed"


def test_rule_checks_run_last_with_rule_message() -> None:
    rule = ValidationRule(
        field="code",
        type=RuleType.PATTERN,
        config=RuleConfig(pattern="^abc$", flags="i", message="Bad code"),
    )
    schema = DataSchema(properties={"code": PropertySchema(type=SchemaType.STRING, min_length=4, validation=rule)})

    assert _kinds(validate({"code": "ABC"}, schema)) == [("code", ViolationKind.MIN_LENGTH)]
    result = validate({"code": "xyz"}, schema)
    assert _kinds(result) == [("code", ViolationKind.MIN_LENGTH), ("code", ViolationKind.PATTERN)]
    assert result.errors[-1].message == "Bad code"


def test_length_and_range_rules_use_js_coercions() -> None:
    length = ValidationRule(field="n", type=RuleType.LENGTH, config=RuleConfig(min=2, max=3, message="len"))
    value_range = ValidationRule(field="n", type=RuleType.RANGE, config=RuleConfig(min=1, max=10, message="range"))
    schema = DataSchema(
        properties={
            "short": PropertySchema(type=SchemaType.NUMBER, validation=length),
            "count": PropertySchema(type=SchemaType.STRING, validation=value_range),
        },
    )

    assert validate({"short": 12, "count": "5"}, schema).valid
    assert _kinds(validate({"short": 1, "count": "50"}, schema)) == [
        ("short", ViolationKind.LENGTH),
        ("count", ViolationKind.RANGE),
    ]
    assert validate({"count": "abc"}, schema).valid


def test_custom_validator_failures_and_exceptions() -> None:
    def _explode(value: object) -> bool:
        raise RuntimeError(value)

    positive = ValidationRule(
        field="n",
        type=RuleType.CUSTOM,
        config=RuleConfig(validator=lambda value: value > 0, message="Must be positive"),
    )
    exploding = ValidationRule(
        field="m",
        type=RuleType.CUSTOM,
        config=RuleConfig(validator=_explode, message="Check failed"),
    )
    schema = DataSchema(
        properties={
            "n": PropertySchema(type=SchemaType.NUMBER, validation=positive),
            "m": PropertySchema(type=SchemaType.NUMBER, validation=exploding),
        },
    )

    result = SchemaValidator().validate({"n": -1, "m": 1}, schema)

    assert [(issue.field, issue.type, issue.message) for issue in result.errors] == [
        ("n", ViolationKind.CUSTOM, "Must be positive"),
        ("m", ViolationKind.CUSTOM, "Check failed"),
    ]


def test_schema_mapping_is_accepted_and_invalid_schema_is_reported() -> None:
    schema = {"type": "object", "properties": {"a": {"type": "number", "minimum": 1}}, "required": ["a"]}

    assert _kinds(validate({"a": 0}, schema)) == [("a", ViolationKind.MINIMUM)]
    result = validate({"a": 0}, {"type": "object", "properties": {"a": {"type": "decimal"}}})
    assert _kinds(result) == [("$schema", ViolationKind.TYPE)]


def test_non_object_data_is_reported_at_root() -> None:
    result = validate(["a"], DataSchema())

    assert _kinds(result) == [("$", ViolationKind.TYPE)]
    assert result.errors[0].message == "Expected type 'object' but got 'array'"


def test_js_coercion_helpers() -> None:
    assert js_string(None) == "null"
    assert js_string(True) == "true"
    assert js_string(5.0) == "5"
    assert js_string([1, None, "a"]) == "1,,a"
    assert js_string({"a": 1}) == "[object Object]"
    assert js_number("  ") == 0.0
    assert js_number("12.5") == 12.5
    assert js_number("abc") is None
    assert js_number(None) == 0.0
    assert js_number([1]) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1e21, "1e+21"),
        (10**21, "1e+21"),
        (1.5e300, "1.5e+300"),
        (-2.5e-7, "-2.5e-7"),
        (1e20, "100000000000000000000"),
        (0.000001, "0.000001"),
        (0.1, "0.1"),
        (-0.0, "0"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
        (float("nan"), "NaN"),
        (12345678901234567890, "12345678901234567890"),
    ],
)
def test_js_string_formats_numbers_like_javascript(value: float, expected: str) -> None:
    assert js_string(value) == expected


def test_length_rule_measures_exponent_form_of_large_numbers() -> None:
    rule = ValidationRule(field="n", type=RuleType.LENGTH, config=RuleConfig(max=5, message="len"))
    schema = DataSchema(properties={"big": PropertySchema(type=SchemaType.NUMBER, validation=rule)})

    assert validate({"big": 1e21}, schema).valid
    assert _kinds(validate({"big": 1e20}, schema)) == [("big", ViolationKind.LENGTH)]


def test_parses_as_date_accepts_common_layouts() -> None:
    assert parses_as_date("2024-01-31")
    assert parses_as_date("Wed, 31 Jan 2024 10:00:00 GMT")
    assert parses_as_date("January 31, 2024")
    assert not parses_as_date("")
    assert not parses_as_date("31st of never")
