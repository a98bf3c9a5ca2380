"""Best-effort extractor working on raw source text."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from extractschema.extraction.base import (
    BaseSchemaExtractor,
    ScannedElement,
    ScannedRegistration,
    ScannedRequest,
)
from extractschema.extraction.js_literals import (
    evaluate_literal,
    read_call_arguments,
    read_jsx_attributes,
)
from extractschema.patterns import (
    CUSTOM_COMPONENT_PATTERN,
    CUSTOM_FIELD_COMPONENTS,
    FETCH_CALL_PATTERN,
    FIELD_ELEMENT_PATTERN,
    FIELD_ELEMENT_TAGS,
    NAMESPACED_REQUEST_METHODS,
    NAMESPACED_REQUEST_PATTERN,
    OPTION_ELEMENT_PATTERN,
    REGISTER_CALL_PATTERN,
)
from extractschema.typing.models import FieldOption

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

_WHITESPACE_RE = re.compile(r"\s+")
_TAG_PATTERNS = {
    FIELD_ELEMENT_TAGS: FIELD_ELEMENT_PATTERN,
    CUSTOM_FIELD_COMPONENTS: CUSTOM_COMPONENT_PATTERN,
}


class RegexSchemaExtractor(BaseSchemaExtractor[str]):
    """Extractor scanning source text with patterns and a bracket-aware reader.

    It never fails on malformed input: unreadable constructs are skipped.
    Fetch request bodies are not reconstructed.
    """

    def _parse(self, source: str, component_name: str) -> str:  # noqa: ARG002
        return source

    def _iter_elements(self, document: str, tags: tuple[str, ...]) -> Iterator[ScannedElement]:
        pattern = _TAG_PATTERNS.get(tags) or re.compile(rf"<({'|'.join(map(re.escape, tags))})\b(?![.:-])")
        for match in pattern.finditer(document):
            parsed = read_jsx_attributes(document, match.end())
            if parsed is None:
                continue
            attributes, end, self_closing = parsed
            tag = match.group(1)
            options = None
            if tag == "select" and not self_closing:
                options = _read_select_options(document, end)
            yield ScannedElement(tag=tag, attributes=attributes, options=options)

    def _iter_registrations(self, document: str) -> Iterator[ScannedRegistration]:
        for match in REGISTER_CALL_PATTERN.finditer(document):
            arguments = read_call_arguments(document, match.end() - 1)
            if not arguments:
                continue
            rules = evaluate_literal(arguments[1]) if len(arguments) > 1 else {}
            yield ScannedRegistration(
                name=evaluate_literal(arguments[0]),
                rules=rules if isinstance(rules, dict) else {},
            )

    def _iter_fetch_calls(self, document: str) -> Iterator[ScannedRequest]:
        for match in FETCH_CALL_PATTERN.finditer(document):
            arguments = read_call_arguments(document, match.end() - 1)
            if not arguments:
                continue
            options: Mapping[str, object] | None = None
            if len(arguments) > 1:
                evaluated = evaluate_literal(arguments[1])
                options = evaluated if isinstance(evaluated, dict) else None
            yield ScannedRequest(endpoint=evaluate_literal(arguments[0]), options=options)

    def _iter_namespaced_calls(self, document: str) -> Iterator[ScannedRequest]:
        for match in NAMESPACED_REQUEST_PATTERN.finditer(document):
            arguments = read_call_arguments(document, match.end() - 1)
            if not arguments:
                continue
            yield ScannedRequest(
                endpoint=evaluate_literal(arguments[0]),
                method=NAMESPACED_REQUEST_METHODS[match.group(2)],
            )


def _read_select_options(source: str, start: int) -> list[FieldOption]:
    """Read the static `<option>` children of a select element.

    Args:
        source (str): Source text.
        start (int): Index right after the `<select ...>` opening tag.

    Returns:
        list[FieldOption]: Options with literal values, in source order.
    """
    close = source.find("</select", start)
    body = source[start:] if close == -1 else source[start:close]
    options: list[FieldOption] = []
    for match in OPTION_ELEMENT_PATTERN.finditer(body):
        parsed = read_jsx_attributes(body, match.end())
        if parsed is None:
            continue
        attributes, end, self_closing = parsed
        label: str | None = None
        if not self_closing:
            label_end = body.find("</option", end)
            raw_label = body[end:] if label_end == -1 else body[end:label_end]
            if "{" not in raw_label and "<" not in raw_label:
                label = _WHITESPACE_RE.sub(" ", raw_label).strip()

        value = attributes.get("value", label)
        if value is None or value == "" or not isinstance(value, str | int | float):
            continue
        options.append(FieldOption(label=label if label else str(value), value=value))
    return options
