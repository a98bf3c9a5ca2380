"""Shared mapping from scanned source constructs to extraction models."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from extractschema.extraction.js_literals import Expression, RegexLiteral
from extractschema.logging import get_logger
from extractschema.patterns import (
    CUSTOM_FIELD_COMPONENTS,
    DEFAULT_TAG_FIELD_TYPES,
    FIELD_ELEMENT_TAGS,
    LENGTH_MESSAGE,
    PATTERN_MESSAGE,
    RANGE_MESSAGE,
    REQUIRED_MESSAGE,
    VALIDATION_ATTRIBUTES,
    infer_field_type_from_name,
    normalize_input_type,
)
from extractschema.typing.enums import FieldType, HttpMethod, RuleType
from extractschema.typing.models import APICall, FieldOption, FormField, RuleConfig, ValidationRule

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScannedElement:
    """Markup element with its evaluated attributes."""

    tag: str
    attributes: Mapping[str, Any]
    options: list[FieldOption] | None = None


@dataclass(frozen=True)
class ScannedRegistration:
    """Hook registration call `register(name, rules)`."""

    name: Any
    rules: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ScannedRequest:
    """Outbound request call.

    `method` is set for namespaced client calls, fetch-style calls carry their
    method (and headers) inside `options`.
    """

    endpoint: Any
    method: HttpMethod | None = None
    options: Mapping[str, Any] | None = None
    request_body: Any = None


def as_number(value: Any) -> int | float | None:  # noqa: ANN401
    """Coerce an attribute value to a number.

    Args:
        value (Any): Evaluated attribute value.

    Returns:
        int | float | None: Numeric value, None when the value is not a finite number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def rule_from_attributes(name: str, attributes: Mapping[str, Any]) -> ValidationRule | None:
    """Derive the single validation rule carried by native validation attributes.

    Attributes are considered in the order required, pattern, minLength/maxLength,
    min/max; the first present one wins.

    Args:
        name (str): Field name.
        attributes (Mapping[str, Any]): Evaluated element attributes.

    Returns:
        ValidationRule | None: Rule for the field, None when no attribute applies.
    """
    if not any(key in attributes for key in VALIDATION_ATTRIBUTES):
        return None

    if "required" in attributes and attributes["required"] is not False:
        return ValidationRule(field=name, type=RuleType.REQUIRED, config=RuleConfig(message=REQUIRED_MESSAGE))

    pattern = attributes.get("pattern")
    if isinstance(pattern, str) and pattern:
        return ValidationRule(
            field=name,
            type=RuleType.PATTERN,
            config=RuleConfig(pattern=pattern, message=PATTERN_MESSAGE),
        )
    if isinstance(pattern, RegexLiteral):
        return ValidationRule(
            field=name,
            type=RuleType.PATTERN,
            config=RuleConfig(pattern=pattern.pattern, flags=pattern.flags or None, message=PATTERN_MESSAGE),
        )

    min_length = as_number(attributes.get("minLength"))
    max_length = as_number(attributes.get("maxLength"))
    if min_length is not None or max_length is not None:
        return ValidationRule(
            field=name,
            type=RuleType.LENGTH,
            config=RuleConfig(min=min_length, max=max_length, message=LENGTH_MESSAGE),
        )

    minimum = as_number(attributes.get("min"))
    maximum = as_number(attributes.get("max"))
    if minimum is not None or maximum is not None:
        return ValidationRule(
            field=name,
            type=RuleType.RANGE,
            config=RuleConfig(min=minimum, max=maximum, message=RANGE_MESSAGE),
        )
    return None


def rule_from_rules_object(name: str, rules: Mapping[str, Any]) -> ValidationRule | None:
    """Derive a validation rule from a registration rules object.

    Only `required` and `pattern` are interpreted. When both are present the
    key written last wins.

    Args:
        name (str): Field name.
        rules (Mapping[str, Any]): Evaluated rules object entries.

    Returns:
        ValidationRule | None: Rule for the field, None when no entry applies.
    """
    rule: ValidationRule | None = None
    for key, value in rules.items():
        if key == "required" and value is not False and value is not None:
            message = value if isinstance(value, str) and value else REQUIRED_MESSAGE
            rule = ValidationRule(field=name, type=RuleType.REQUIRED, config=RuleConfig(message=message))
        elif key == "pattern":
            rule = _pattern_rule(name, value) or rule
    return rule


def _pattern_rule(name: str, value: Any) -> ValidationRule | None:  # noqa: ANN401
    message = PATTERN_MESSAGE
    if isinstance(value, Mapping):
        raw_message = value.get("message")
        message = raw_message if isinstance(raw_message, str) and raw_message else PATTERN_MESSAGE
        value = value.get("value")
    if not isinstance(value, RegexLiteral):
        return None
    return ValidationRule(
        field=name,
        type=RuleType.PATTERN,
        config=RuleConfig(pattern=value.pattern, flags=value.flags or None, message=message),
    )


def dedupe_fields(fields: Iterable[FormField]) -> list[FormField]:
    """Collapse fields sharing a name.

    The first occurrence keeps its position; a later duplicate replaces it only
    when it carries a validation rule and the kept entry does not.

    Args:
        fields (Iterable[FormField]): Fields in discovery order.

    Returns:
        list[FormField]: Unique fields.
    """
    unique: dict[str, FormField] = {}
    for form_field in fields:
        existing = unique.get(form_field.name)
        if existing is None or (existing.validation is None and form_field.validation is not None):
            unique[form_field.name] = form_field
    return list(unique.values())


class BaseSchemaExtractor[DocumentT](ABC):
    """Template for source extractors.

    Subclasses turn source text into a document (`_parse`) and yield scanned
    constructs from it; this class maps them onto form fields and API calls.
    """

    @abstractmethod
    def _parse(self, source: str, component_name: str) -> DocumentT:
        """Prepare source text for scanning."""

    @abstractmethod
    def _iter_elements(self, document: DocumentT, tags: tuple[str, ...]) -> Iterable[ScannedElement]:
        """Yield markup elements whose tag is in `tags`, in source order."""

    @abstractmethod
    def _iter_registrations(self, document: DocumentT) -> Iterable[ScannedRegistration]:
        """Yield hook registration calls in source order."""

    @abstractmethod
    def _iter_fetch_calls(self, document: DocumentT) -> Iterable[ScannedRequest]:
        """Yield fetch-style calls in source order."""

    @abstractmethod
    def _iter_namespaced_calls(self, document: DocumentT) -> Iterable[ScannedRequest]:
        """Yield `client.method(url)` calls in source order."""

    def extract_form_fields(self, source: str, component_name: str = "Component") -> list[FormField]:
        """Recover deduplicated form fields from component source.

        Markup fields come first, then registered fields, then custom field
        components.

        Args:
            source (str): Component source text.
            component_name (str): Name used in parse error reports.

        Returns:
            list[FormField]: Fields in discovery order.
        """
        return self._form_fields_from(self._parse(source, component_name), component_name)

    def extract_api_calls(self, source: str, component_name: str = "Component") -> list[APICall]:
        """Recover outbound request calls from component source.

        Fetch-style calls come first, then namespaced client calls.

        Args:
            source (str): Component source text.
            component_name (str): Name used in parse error reports.

        Returns:
            list[APICall]: Calls in discovery order.
        """
        return self._api_calls_from(self._parse(source, component_name), component_name)

    def extract(self, source: str, component_name: str = "Component") -> tuple[list[FormField], list[APICall]]:
        """Recover form fields and API calls from a single parse of the source.

        Args:
            source (str): Component source text.
            component_name (str): Name used in parse error reports.

        Returns:
            tuple[list[FormField], list[APICall]]: Fields and calls in discovery order.
        """
        document = self._parse(source, component_name)
        return self._form_fields_from(document, component_name), self._api_calls_from(document, component_name)

    def _form_fields_from(self, document: DocumentT, component_name: str) -> list[FormField]:
        discovered: list[FormField] = []
        for element in self._iter_elements(document, FIELD_ELEMENT_TAGS):
            discovered.extend(self._field_from_element(element))
        for registration in self._iter_registrations(document):
            discovered.extend(self._field_from_registration(registration))
        for element in self._iter_elements(document, CUSTOM_FIELD_COMPONENTS):
            discovered.extend(self._field_from_element(element))

        fields = dedupe_fields(discovered)
        logger.debug(
            "Form fields extracted",
            extra={"component": component_name, "discovered": len(discovered), "fields": len(fields)},
        )
        return fields

    def _api_calls_from(self, document: DocumentT, component_name: str) -> list[APICall]:
        calls: list[APICall] = []
        for request in (*self._iter_fetch_calls(document), *self._iter_namespaced_calls(document)):
            calls.extend(self._api_call_from_request(request))
        logger.debug("API calls extracted", extra={"component": component_name, "calls": len(calls)})
        return calls

    @staticmethod
    def _field_from_element(element: ScannedElement) -> list[FormField]:
        attributes = element.attributes
        name = attributes.get("name")
        if not isinstance(name, str) or not name:
            return []

        raw_type = attributes.get("type")
        default_type = DEFAULT_TAG_FIELD_TYPES.get(element.tag, FieldType.TEXT)
        field_type = normalize_input_type(raw_type if isinstance(raw_type, str) else None, default=default_type)
        if field_type is None:
            return []

        validation = rule_from_attributes(name, attributes)
        rules = attributes.get("rules")
        if validation is None and isinstance(rules, Mapping):
            validation = rule_from_rules_object(name, rules)

        label = attributes.get("label")
        placeholder = attributes.get("placeholder")
        return [
            FormField(
                name=name,
                type=field_type,
                label=label if isinstance(label, str) else None,
                placeholder=placeholder if isinstance(placeholder, str) else None,
                validation=validation,
                options=element.options or None,
            ),
        ]

    @staticmethod
    def _field_from_registration(registration: ScannedRegistration) -> list[FormField]:
        name = registration.name
        if not isinstance(name, str) or not name:
            return []
        return [
            FormField(
                name=name,
                type=infer_field_type_from_name(name),
                validation=rule_from_rules_object(name, registration.rules),
            ),
        ]

    @staticmethod
    def _api_call_from_request(request: ScannedRequest) -> list[APICall]:
        if not isinstance(request.endpoint, str) or not request.endpoint:
            return []

        method = request.method or HttpMethod.GET
        headers: dict[str, str] | None = None
        options = request.options or {}
        if request.method is None:
            raw_method = options.get("method")
            if isinstance(raw_method, str):
                try:
                    method = HttpMethod(raw_method.strip().upper())
                except ValueError:
                    logger.debug("Unsupported request method ignored", extra={"method": raw_method})
            raw_headers = options.get("headers")
            if isinstance(raw_headers, Mapping):
                headers = {str(key): value for key, value in raw_headers.items() if isinstance(value, str)}

        return [
            APICall(
                method=method,
                endpoint=request.endpoint,
                request_body=request.request_body,
                headers=headers,
            ),
        ]


def to_plain_value(value: Any) -> Any:  # noqa: ANN401
    """Replace non-literal expressions by None, recursively.

    Args:
        value (Any): Evaluated value.

    Returns:
        Any: JSON-compatible value; `Expression` and `RegexLiteral` become None.
    """
    if isinstance(value, Expression | RegexLiteral):
        return None
    if isinstance(value, Mapping):
        return {str(key): to_plain_value(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [to_plain_value(item) for item in value]
    return value
