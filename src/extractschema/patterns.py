"""Reusable recognizers for form, request and validation idioms in component source.

Everything here is immutable data or a pure function over a string, so the
recognizers can be shared freely between extractor instances and threads.
"""

from __future__ import annotations

import re
from types import MappingProxyType

from extractschema.typing.enums import FieldType, HttpMethod

# Markup elements
FIELD_ELEMENT_TAGS: tuple[str, ...] = ("input", "select", "textarea")
CUSTOM_FIELD_COMPONENTS: tuple[str, ...] = ("Input", "TextField", "FormInput", "Field", "Controller")

FIELD_ELEMENT_PATTERN = re.compile(r"<(input|select|textarea)\b(?![.:-])")
CUSTOM_COMPONENT_PATTERN = re.compile(r"<(Input|TextField|FormInput|Field|Controller)\b(?![.:-])")
OPTION_ELEMENT_PATTERN = re.compile(r"<option\b(?![.:-])")

DEFAULT_TAG_FIELD_TYPES = MappingProxyType(
    {
        "select": FieldType.SELECT,
        "textarea": FieldType.TEXTAREA,
    },
)

# Hook-based registration: `register('name', {...})` and `form.register(...)`.
REGISTER_CALL_PATTERN = re.compile(r"(?<![\w$])register\s*\(")
REGISTER_CALLEE = "register"

# Request calls
FETCH_CALL_PATTERN = re.compile(r"(?<![\w$.])fetch\s*\(")
FETCH_CALLEE = "fetch"
REQUEST_CLIENT_NAMES: tuple[str, ...] = ("axios",)
NAMESPACED_REQUEST_PATTERN = re.compile(r"(?<![\w$.])(axios)\s*\.\s*(get|post|put|delete|patch)\s*\(")
NAMESPACED_REQUEST_METHODS = MappingProxyType(
    {
        "get": HttpMethod.GET,
        "post": HttpMethod.POST,
        "put": HttpMethod.PUT,
        "delete": HttpMethod.DELETE,
        "patch": HttpMethod.PATCH,
    },
)

# Native validation attributes, in the order rules are derived from them.
VALIDATION_ATTRIBUTES: tuple[str, ...] = ("required", "pattern", "minLength", "maxLength", "min", "max")

REQUIRED_MESSAGE = "This field is required"
PATTERN_MESSAGE = "Invalid format"
LENGTH_MESSAGE = "Invalid length"
RANGE_MESSAGE = "Value out of range"

# Schema-builder DSLs; recognized only, never interpreted.
VALIDATION_LIBRARY_PATTERNS = MappingProxyType(
    {
        "yup": MappingProxyType(
            {
                "string": re.compile(r"\byup\.string\(\)"),
                "number": re.compile(r"\byup\.number\(\)"),
                "boolean": re.compile(r"\byup\.boolean\(\)"),
                "object": re.compile(r"\byup\.object\("),
                "array": re.compile(r"\byup\.array\("),
            },
        ),
        "zod": MappingProxyType(
            {
                "string": re.compile(r"\bz\.string\(\)"),
                "number": re.compile(r"\bz\.number\(\)"),
                "boolean": re.compile(r"\bz\.boolean\(\)"),
                "object": re.compile(r"\bz\.object\("),
                "array": re.compile(r"\bz\.array\("),
            },
        ),
    },
)

# Fenced code blocks carrying component source inside MDX/Markdown.
FENCED_CODE_BLOCK_PATTERN = re.compile(r"```(?:jsx?|tsx?)[ \t]*\r?\n(.*?)```", re.DOTALL)

# Field-name fragments, in priority order; first match wins.
FIELD_NAME_RULES: tuple[tuple[re.Pattern[str], FieldType], ...] = (
    (re.compile(r"email|e-mail|emailAddress", re.IGNORECASE), FieldType.EMAIL),
    (re.compile(r"password|pass|pwd", re.IGNORECASE), FieldType.PASSWORD),
    (re.compile(r"phone|tel|mobile|cell", re.IGNORECASE), FieldType.TEXT),
    (re.compile(r"url|website|link|site", re.IGNORECASE), FieldType.TEXT),
    (re.compile(r"date|dob|birthday|created|updated|expires", re.IGNORECASE), FieldType.DATE),
    (
        re.compile(r"age|amount|count|quantity|price|cost|total|score|rating", re.IGNORECASE),
        FieldType.NUMBER,
    ),
    (
        re.compile(r"is|has|can|should|enabled|disabled|active|checked", re.IGNORECASE),
        FieldType.CHECKBOX,
    ),
)

# HTML input types without a dedicated field type.
INPUT_TYPE_ALIASES = MappingProxyType(
    {
        "tel": FieldType.TEXT,
        "url": FieldType.TEXT,
        "search": FieldType.TEXT,
        "hidden": FieldType.TEXT,
        "color": FieldType.TEXT,
        "file": FieldType.TEXT,
        "time": FieldType.TEXT,
        "week": FieldType.TEXT,
        "datetime-local": FieldType.DATE,
        "month": FieldType.DATE,
        "range": FieldType.NUMBER,
    },
)
NON_FIELD_INPUT_TYPES = frozenset({"submit", "reset", "button", "image"})


def infer_field_type_from_name(field_name: str) -> FieldType:
    """Infer a field type from name fragments.

    Args:
        field_name (str): Field name as written in source.

    Returns:
        FieldType: First matching rule type, `text` when nothing matches.
    """
    for pattern, field_type in FIELD_NAME_RULES:
        if pattern.search(field_name):
            return field_type
    return FieldType.TEXT


def normalize_input_type(raw_type: str | None, *, default: FieldType = FieldType.TEXT) -> FieldType | None:
    """Map a markup `type` attribute onto a field type.

    Args:
        raw_type (str | None): Attribute value, None when absent.
        default (FieldType): Type used when the attribute is absent.

    Returns:
        FieldType | None: Field type, or None for button-like inputs that are not fields.
    """
    if raw_type is None:
        return default
    lowered = raw_type.strip().lower()
    if lowered in NON_FIELD_INPUT_TYPES:
        return None
    if lowered in INPUT_TYPE_ALIASES:
        return INPUT_TYPE_ALIASES[lowered]
    try:
        return FieldType(lowered)
    except ValueError:
        return default


def detect_validation_libraries(source: str) -> list[str]:
    """List the schema-builder DSLs a component uses.

    Args:
        source (str): Component source text.

    Returns:
        list[str]: Library names (`yup`, `zod`) in declaration order.
    """
    return [
        library
        for library, recognizers in VALIDATION_LIBRARY_PATTERNS.items()
        if any(pattern.search(source) for pattern in recognizers.values())
    ]


def find_fenced_code_blocks(document: str) -> list[str]:
    """Return the bodies of JS/JSX/TS/TSX fenced code blocks in document order.

    Args:
        document (str): Markdown or MDX text.

    Returns:
        list[str]: Code block contents.
    """
    return [match.group(1) for match in FENCED_CODE_BLOCK_PATTERN.finditer(document)]
