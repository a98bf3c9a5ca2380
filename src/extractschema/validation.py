"""Validate data against extracted or inferred schemas."""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from datetime import datetime
from decimal import Decimal
from email.utils import parsedate_to_datetime
from typing import Any

from pydantic import ValidationError

from extractschema.inference import is_email, is_url, is_uuid, parse_iso_datetime
from extractschema.logging import get_logger
from extractschema.typing.enums import RuleType, SchemaType, ViolationKind
from extractschema.typing.models import (
    DataSchema,
    PropertySchema,
    ValidationIssue,
    ValidationResult,
    ValidationRule,
    js_type_of,
)

logger = get_logger(__name__)

SCHEMA_FIELD = "$schema"
ROOT_FIELD = "$"

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_LENIENT_DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)
_JS_EXPONENT_THRESHOLD = 10**21


def _js_number_string(value: float) -> str:
    """Format a number like JavaScript's `Number.prototype.toString()`.

    Shortest round-trip digits, fixed notation for magnitudes in [1e-6, 1e21),
    exponent notation (`1e+21`, `1.5e-7`) outside of it.

    Args:
        value (float): Number to format.

    Returns:
        str: JavaScript string form.
    """
    try:
        number = float(value)
    except OverflowError:
        number = math.inf if value > 0 else -math.inf
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"

    sign = "-" if number < 0 else ""
    decimal = Decimal(repr(abs(number))).normalize()
    _, digit_tuple, exponent = decimal.as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple)
    count = len(digits)
    # value == 0.digits * 10**point
    point = int(exponent) + count

    if count <= point <= 21:  # noqa: PLR2004
        return f"{sign}{digits}{'0' * (point - count)}"
    if 0 < point <= 21:  # noqa: PLR2004
        return f"{sign}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:  # noqa: PLR2004
        return f"{sign}0.{'0' * -point}{digits}"

    power = point - 1
    mantissa = digits if count == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{sign}{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


def js_string(value: Any) -> str:  # noqa: ANN401
    """Stringify a value the way JavaScript's `String()` does for JSON values.

    Args:
        value (Any): Value to stringify.

    Returns:
        str: String form.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int) and abs(value) < _JS_EXPONENT_THRESHOLD:
        return str(value)
    if isinstance(value, int | float):
        return _js_number_string(value)
    if isinstance(value, list | tuple):
        return ",".join("" if item is None else js_string(item) for item in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def js_number(value: Any) -> float | None:  # noqa: ANN401, PLR0911
    """Convert a value the way JavaScript's `Number()` does.

    Args:
        value (Any): Value to convert.

    Returns:
        float | None: Numeric value, None where JavaScript yields NaN.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int | float):
        return None if isinstance(value, float) and math.isnan(value) else float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


def parses_as_date(value: str) -> bool:
    """Return whether a string is a parseable date or timestamp.

    Accepts ISO-8601, RFC 2822 and a few common human-readable layouts.

    Args:
        value (str): Candidate string.

    Returns:
        bool: True when the string parses.
    """
    text = value.strip()
    if not text:
        return False
    if parse_iso_datetime(text) is not None:
        return True
    try:
        parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass
    else:
        return True
    for layout in _LENIENT_DATE_FORMATS:
        try:
            datetime.strptime(text, layout)  # noqa: DTZ007
        except ValueError:
            continue
        return True
    return False


_FORMAT_CHECKS: dict[str, Callable[[str], bool]] = {
    "email": is_email,
    "url": is_url,
    "date": parses_as_date,
    "time": lambda value: bool(_TIME_RE.match(value)),
    "date-time": parses_as_date,
    "uuid": is_uuid,
}


def _matches(pattern: str, value: str) -> bool:
    """Search a pattern in a value; an invalid pattern never matches."""
    try:
        return re.search(pattern, value) is not None
    except re.error:
        logger.warning("Invalid schema pattern", extra={"pattern": pattern})
        return False


class SchemaValidator:
    """Check data against a `DataSchema`, collecting every violation."""

    def validate(self, data: Any, schema: DataSchema | Mapping[str, Any]) -> ValidationResult:  # noqa: ANN401
        """Validate data against a root schema.

        Never raises: an unusable schema or a non-object value is reported as
        a violation.

        Args:
            data (Any): Candidate data, normally a mapping.
            schema (DataSchema | Mapping[str, Any]): Root schema or its JSON form.

        Returns:
            ValidationResult: Outcome with violations in check order.
        """
        if not isinstance(schema, DataSchema):
            try:
                schema = DataSchema.model_validate(schema)
            except ValidationError as exc:
                issue = ValidationIssue(
                    field=SCHEMA_FIELD,
                    message=f"Invalid schema: {exc.error_count()} validation error(s)",
                    type=ViolationKind.TYPE,
                )
                return ValidationResult(valid=False, errors=[issue])

        if not isinstance(data, Mapping):
            issue = ValidationIssue(
                field=ROOT_FIELD,
                message=f"Expected type 'object' but got '{self._type_name(data)}'",
                type=ViolationKind.TYPE,
            )
            return ValidationResult(valid=False, errors=[issue])

        errors: list[ValidationIssue] = [
            ValidationIssue(field=name, message=f"Field '{name}' is required", type=ViolationKind.REQUIRED)
            for name in schema.required
            if data.get(name) is None
        ]

        for key, prop in schema.properties.items():
            if key in data:
                errors.extend(self._validate_property(key, data[key], prop))

        if schema.additional_properties is False:
            errors.extend(
                ValidationIssue(
                    field=str(key),
                    message=f"Additional property '{key}' is not allowed",
                    type=ViolationKind.ADDITIONAL,
                )
                for key in data
                if key not in schema.properties
            )

        logger.debug("Data validated", extra={"violations": len(errors)})
        return ValidationResult(valid=not errors, errors=errors)

    @staticmethod
    def _type_name(value: Any) -> str:  # noqa: ANN401
        return "null" if value is None else js_type_of(value).to_str()

    def _validate_property(self, field: str, value: Any, schema: PropertySchema) -> list[ValidationIssue]:  # noqa: ANN401, C901
        actual = js_type_of(value)
        if value is not None and actual != schema.type:
            return [
                ValidationIssue(
                    field=field,
                    message=f"Expected type '{schema.type}' but got '{actual}'",
                    type=ViolationKind.TYPE,
                ),
            ]

        errors: list[ValidationIssue] = []
        if schema.type == SchemaType.STRING and isinstance(value, str):
            errors.extend(self._check_string(field, value, schema))

        if schema.type == SchemaType.NUMBER and value is not None and actual == SchemaType.NUMBER:
            if schema.minimum is not None and value < schema.minimum:
                errors.append(
                    ValidationIssue(
                        field=field,
                        message=f"Value must be at least {js_string(schema.minimum)}",
                        type=ViolationKind.MINIMUM,
                    ),
                )
            if schema.maximum is not None and value > schema.maximum:
                errors.append(
                    ValidationIssue(
                        field=field,
                        message=f"Value must be at most {js_string(schema.maximum)}",
                        type=ViolationKind.MAXIMUM,
                    ),
                )

        if schema.enum is not None and not any(
            js_type_of(member) == actual and member == value for member in schema.enum
        ):
            errors.append(
                ValidationIssue(
                    field=field,
                    message=f"Value must be one of: {', '.join(js_string(member) for member in schema.enum)}",
                    type=ViolationKind.ENUM,
                ),
            )

        if schema.type == SchemaType.ARRAY and isinstance(value, list | tuple) and schema.items is not None:
            for index, item in enumerate(value):
                errors.extend(self._validate_property(f"{field}[{index}]", item, schema.items))

        if schema.type == SchemaType.OBJECT and isinstance(value, Mapping) and schema.properties is not None:
            for key, prop in schema.properties.items():
                if key in value:
                    errors.extend(self._validate_property(f"{field}.{key}", value[key], prop))
            errors.extend(
                ValidationIssue(field=f"{field}.{name}", message="Field is required", type=ViolationKind.REQUIRED)
                for name in schema.required or []
                if name not in value
            )

        if schema.validation is not None:
            errors.extend(self._check_rule(field, value, schema.validation))
        return errors

    @staticmethod
    def _check_string(field: str, value: str, schema: PropertySchema) -> list[ValidationIssue]:
        errors: list[ValidationIssue] = []
        if schema.pattern and not _matches(schema.pattern, value):
            errors.append(
                ValidationIssue(
                    field=field,
                    message=f"Value does not match pattern: {schema.pattern}",
                    type=ViolationKind.PATTERN,
                ),
            )
        if schema.min_length is not None and len(value) < schema.min_length:
            errors.append(
                ValidationIssue(
                    field=field,
                    message=f"Value must be at least {schema.min_length} characters",
                    type=ViolationKind.MIN_LENGTH,
                ),
            )
        if schema.max_length is not None and len(value) > schema.max_length:
            errors.append(
                ValidationIssue(
                    field=field,
                    message=f"Value must be at most {schema.max_length} characters",
                    type=ViolationKind.MAX_LENGTH,
                ),
            )
        check = _FORMAT_CHECKS.get(schema.format or "")
        if check is not None and not check(value):
            errors.append(
                ValidationIssue(
                    field=field,
                    message=f"Value is not a valid {schema.format}",
                    type=ViolationKind.FORMAT,
                ),
            )
        return errors

    @staticmethod
    def _check_rule(field: str, value: Any, rule: ValidationRule) -> list[ValidationIssue]:  # noqa: ANN401, C901
        config = rule.config
        failures: list[ViolationKind] = []
        if rule.type == RuleType.CUSTOM and config.validator is not None:
            try:
                passed = bool(config.validator(value))
            except Exception:  # noqa: BLE001
                logger.exception("Custom validator raised", extra={"field": field})
                passed = False
            if not passed:
                failures.append(ViolationKind.CUSTOM)
        elif rule.type == RuleType.PATTERN and config.pattern:
            try:
                compiled = config.compile_pattern()
            except re.error:
                logger.warning("Invalid rule pattern", extra={"field": field, "pattern": config.pattern})
                compiled = None
            if compiled is None or compiled.search(js_string(value)) is None:
                failures.append(ViolationKind.PATTERN)
        elif rule.type == RuleType.LENGTH:
            length = len(js_string(value))
            if config.min is not None and length < config.min:
                failures.append(ViolationKind.LENGTH)
            if config.max is not None and length > config.max:
                failures.append(ViolationKind.LENGTH)
        elif rule.type == RuleType.RANGE:
            number = js_number(value)
            if number is not None and config.min is not None and number < config.min:
                failures.append(ViolationKind.RANGE)
            if number is not None and config.max is not None and number > config.max:
                failures.append(ViolationKind.RANGE)
        return [ValidationIssue(field=field, message=config.message, type=kind) for kind in failures]


_DEFAULT_VALIDATOR = SchemaValidator()


def validate(data: Any, schema: DataSchema | Mapping[str, Any]) -> ValidationResult:  # noqa: ANN401
    """Validate data against a root schema with the shared validator.

    Args:
        data (Any): Candidate data.
        schema (DataSchema | Mapping[str, Any]): Root schema or its JSON form.

    Returns:
        ValidationResult: Outcome with violations in check order.
    """
    return _DEFAULT_VALIDATOR.validate(data, schema)
