from __future__ import annotations

import pytest

from extractschema.extraction.base import as_number, rule_from_attributes
from extractschema.patterns import LENGTH_MESSAGE, VALIDATION_ATTRIBUTES
from extractschema.typing.enums import RuleType


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (8, 8),
        (2.5, 2.5),
        (" 12 ", 12),
        ("1e3", 1000.0),
        (True, None),
        ("abc", None),
        ("Infinity", None),
        ("-Infinity", None),
        ("1e999", None),
        ("NaN", None),
        (float("inf"), None),
        (float("nan"), None),
        (None, None),
    ],
)
def test_as_number_keeps_finite_numbers_only(value: object, expected: float | None) -> None:
    assert as_number(value) == expected


def test_rule_from_attributes_follows_attribute_order() -> None:
    attributes = {name: "4" for name in reversed(VALIDATION_ATTRIBUTES)}

    rule = rule_from_attributes("code", attributes)

    assert rule is not None
    assert rule.type == RuleType.REQUIRED


def test_rule_from_attributes_ignores_unrelated_attributes() -> None:
    assert rule_from_attributes("code", {"name": "code", "placeholder": "Code", "type": "text"}) is None


def test_rule_from_attributes_reads_length_bounds() -> None:
    rule = rule_from_attributes("code", {"minLength": "2", "maxLength": "Infinity"})

    assert rule is not None
    assert rule.type == RuleType.LENGTH
    assert (rule.config.min, rule.config.max, rule.config.message) == (2, None, LENGTH_MESSAGE)
