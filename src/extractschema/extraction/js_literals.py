"""Lightweight scanning of JavaScript/JSX source text.

The scanner balances brackets while skipping strings, template literals,
comments and regular-expression literals, and evaluates literal expressions
(strings, numbers, booleans, null, regexes, arrays and object literals) into
Python values. Anything that is not a literal evaluates to an `Expression`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_QUOTES = frozenset("'\"`")
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_OPENERS.values())
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORDS = frozenset(
    {"return", "typeof", "case", "in", "of", "new", "delete", "void", "throw", "instanceof", "yield", "await"},
)
_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")
_ATTRIBUTE_NAME_RE = re.compile(r"[A-Za-z_$][\w$.:-]*")
_NUMBER_RE = re.compile(
    r"-?(?:0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][+-]?\d+)?)",
)
_REGEX_LITERAL_RE = re.compile(r"/(.*)/([a-z]*)", re.DOTALL)
_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_LINE_CONTINUATIONS = frozenset({"\n", "\r\n", "\r", "\u2028", "\u2029"})
_TS_CAST_RE = re.compile(r"\s+(?:as|satisfies)\s+[\w$.<>\[\]|&' \"]+$")


@dataclass(frozen=True)
class RegexLiteral:
    """Regular-expression literal as written in source."""

    pattern: str
    flags: str = ""


@dataclass(frozen=True)
class Expression:
    """Non-literal expression kept as raw source text."""

    text: str


def _unescape_match(match: re.Match[str]) -> str:
    sequence = match.group(1)
    if sequence.startswith("u{"):
        return chr(int(sequence[2:-1], 16))
    if len(sequence) == 5 and sequence[0] == "u":  # noqa: PLR2004
        return chr(int(sequence[1:], 16))
    if len(sequence) == 3 and sequence[0] == "x":  # noqa: PLR2004
        return chr(int(sequence[1:], 16))
    if sequence in _LINE_CONTINUATIONS:
        return ""
    return _SIMPLE_ESCAPES.get(sequence, sequence)


def unescape_js_string(body: str) -> str:
    """Resolve JavaScript escape sequences in a string literal body.

    Raises:
        ValueError: If a code point escape is outside the Unicode range.
    """
    return _ESCAPE_RE.sub(_unescape_match, body)


def skip_string(source: str, index: int) -> int:
    """Return the index just past the string or template literal starting at `index`.

    Single and double quoted strings cannot span lines; an unterminated one is
    treated as a stray quote character.

    Args:
        source (str): Source text.
        index (int): Position of the opening quote.

    Returns:
        int: Index after the closing quote.
    """
    quote = source[index]
    i = index + 1
    n = len(source)
    while i < n:
        char = source[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        if quote == "`" and source.startswith("${", i):
            end = find_matching(source, i + 1)
            if end is None:
                return n
            i = end + 1
            continue
        if char == "\n" and quote != "`":
            return index + 1
        i += 1
    return n if quote == "`" else index + 1


def skip_comment(source: str, index: int) -> int:
    """Return the index just past the comment starting at `index`."""
    if source.startswith("//", index):
        end = source.find("\n", index)
        return len(source) if end == -1 else end
    end = source.find("*/", index + 2)
    return len(source) if end == -1 else end + 2


def _is_regex_start(source: str, index: int) -> bool:
    # `</tag>` and `/>` close JSX elements.
    if (index > 0 and source[index - 1] == "<") or source.startswith("/>", index):
        return False
    j = index - 1
    while j >= 0 and source[j].isspace():
        j -= 1
    if j < 0:
        return True
    previous = source[j]
    if previous in _REGEX_PRECEDERS:
        return True
    if previous.isalnum() or previous in "_$":
        start = j
        while start > 0 and (source[start - 1].isalnum() or source[start - 1] in "_$"):
            start -= 1
        return source[start : j + 1] in _REGEX_KEYWORDS
    return False


def skip_regex(source: str, index: int) -> int:
    """Return the index just past the regex literal (flags included) starting at `index`.

    Args:
        source (str): Source text.
        index (int): Position of the opening slash.

    Returns:
        int: Index after the literal, or `index + 1` when no literal closes on this line.
    """
    i = index + 1
    n = len(source)
    in_class = False
    while i < n:
        char = source[i]
        if char == "\\":
            i += 2
            continue
        if char == "\n":
            return index + 1
        if char == "[":
            in_class = True
        elif char == "]":
            in_class = False
        elif char == "/" and not in_class:
            i += 1
            while i < n and source[i].isalpha():
                i += 1
            return i
        i += 1
    return index + 1


def _skip_token(source: str, index: int) -> int | None:
    """Return the end of a string/comment/regex token at `index`, None for ordinary characters."""
    char = source[index]
    if char in _QUOTES:
        return skip_string(source, index)
    if char == "/":
        if source.startswith(("//", "/*"), index):
            return skip_comment(source, index)
        if _is_regex_start(source, index):
            return skip_regex(source, index)
    return None


def find_matching(source: str, open_index: int) -> int | None:
    """Return the index of the bracket closing the one at `open_index`.

    Mismatched closers are tolerated: a closer matching an outer bracket unwinds
    to it, an unknown closer is ignored.

    Args:
        source (str): Source text.
        open_index (int): Position of `(`, `[` or `{`.

    Returns:
        int | None: Index of the matching closer, None when unbalanced.
    """
    stack = [_OPENERS[source[open_index]]]
    i = open_index + 1
    n = len(source)
    while i < n:
        skipped = _skip_token(source, i)
        if skipped is not None:
            i = skipped
            continue
        char = source[i]
        if char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in _CLOSERS and char in stack:
            while stack and stack.pop() != char:
                pass
            if not stack:
                return i
        i += 1
    return None


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split text on a separator that is not nested inside brackets, strings or comments.

    Args:
        text (str): Text to split.
        separator (str): Single separator character.

    Returns:
        list[str]: Stripped, non-empty segments.
    """
    parts: list[str] = []
    start = 0
    i = 0
    n = len(text)
    while i < n:
        skipped = _skip_token(text, i)
        if skipped is not None:
            i = skipped
            continue
        char = text[i]
        if char in _OPENERS:
            end = find_matching(text, i)
            i = n if end is None else end + 1
            continue
        if char == separator:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return [part.strip() for part in parts if part.strip()]


def read_call_arguments(source: str, open_paren: int) -> list[str] | None:
    """Return the raw argument texts of the call whose `(` is at `open_paren`.

    Args:
        source (str): Source text.
        open_paren (int): Position of the opening parenthesis.

    Returns:
        list[str] | None: Argument source texts, None when the call is unbalanced.
    """
    end = find_matching(source, open_paren)
    if end is None:
        return None
    return split_top_level(source[open_paren + 1 : end])


def parse_string_literal(text: str) -> str | None:
    """Evaluate a quoted string or a substitution-free template literal.

    Args:
        text (str): Literal source text.

    Returns:
        str | None: String value, None when the text is not a plain string literal
            or carries an invalid escape.
    """
    if len(text) < 2 or text[0] not in _QUOTES:  # noqa: PLR2004
        return None
    if skip_string(text, 0) != len(text) or text[-1] != text[0]:
        return None
    body = text[1:-1]
    if text[0] == "`" and re.search(r"(?<!\\)\$\{", body):
        return None
    try:
        return unescape_js_string(body)
    except ValueError:
        return None


def parse_number(text: str) -> int | float | None:
    """Evaluate a numeric literal.

    Args:
        text (str): Literal source text.

    Returns:
        int | float | None: Numeric value, None when the text is not a number literal.
    """
    if not _NUMBER_RE.fullmatch(text):
        return None
    compact = text.replace("_", "")
    try:
        return int(compact, 0)
    except ValueError:
        pass
    try:
        return float(compact)
    except ValueError:
        return None


def parse_regex_literal(text: str) -> RegexLiteral | None:
    """Evaluate a regex literal such as `/^a+$/i`.

    Args:
        text (str): Literal source text.

    Returns:
        RegexLiteral | None: Pattern and flags, None when the text is not a regex literal.
    """
    if not text.startswith("/") or skip_regex(text, 0) != len(text):
        return None
    match = _REGEX_LITERAL_RE.fullmatch(text)
    if match is None or not match.group(1):
        return None
    return RegexLiteral(pattern=match.group(1), flags=match.group(2))


def parse_object_entries(text: str) -> dict[str, str] | None:
    """Split an object literal into raw `key -> value source` entries.

    Shorthand properties map to their own name, spreads, computed keys and
    methods are skipped.

    Args:
        text (str): Object literal source text, braces included.

    Returns:
        dict[str, str] | None: Entries in source order, None when text is not an object literal.
    """
    stripped = text.strip()
    if not stripped.startswith("{") or find_matching(stripped, 0) != len(stripped) - 1:
        return None
    entries: dict[str, str] = {}
    for entry in split_top_level(stripped[1:-1]):
        parsed = _parse_object_entry(entry)
        if parsed is not None:
            entries[parsed[0]] = parsed[1]
    return entries


def _parse_object_entry(entry: str) -> tuple[str, str] | None:
    if entry.startswith("..."):
        return None
    if entry[0] in _QUOTES:
        end = skip_string(entry, 0)
        key = parse_string_literal(entry[:end])
        if key is None:
            return None
    else:
        match = _IDENTIFIER_RE.match(entry) or re.match(r"\d+", entry)
        if match is None:
            return None
        key, end = match.group(0), match.end()
    rest = entry[end:].lstrip()
    if not rest:
        return key, key
    if rest.startswith(":"):
        return key, rest[1:].strip()
    return None


def evaluate_literal(text: str) -> Any:  # noqa: ANN401, PLR0911
    """Evaluate a literal expression into a Python value.

    Args:
        text (str): Expression source text.

    Returns:
        Any: `str`, `int`, `float`, `bool`, `None`, `RegexLiteral`, `list`, `dict`,
        or an `Expression` when the text is not a literal.
    """
    stripped = _TS_CAST_RE.sub("", text.strip())
    if not stripped:
        return Expression(text=stripped)
    if stripped in {"true", "false"}:
        return stripped == "true"
    if stripped in {"null", "undefined"}:
        return None
    head = stripped[0]
    if head in _QUOTES:
        value = parse_string_literal(stripped)
        return Expression(text=stripped) if value is None else value
    number = parse_number(stripped)
    if number is not None:
        return number
    if head == "/":
        regex = parse_regex_literal(stripped)
        return Expression(text=stripped) if regex is None else regex
    if head in _OPENERS and find_matching(stripped, 0) == len(stripped) - 1:
        inner = stripped[1:-1]
        if head == "(":
            return evaluate_literal(inner)
        if head == "[":
            return [evaluate_literal(item) for item in split_top_level(inner)]
        entries = parse_object_entries(stripped) or {}
        return {key: evaluate_literal(value) for key, value in entries.items()}
    return Expression(text=stripped)


def read_jsx_attributes(source: str, index: int) -> tuple[dict[str, Any], int, bool] | None:
    """Read JSX attributes following a tag name.

    Flag attributes evaluate to True, quoted values to their raw text and
    `{...}` containers through `evaluate_literal`. Spread attributes and
    comments are skipped.

    Args:
        source (str): Source text.
        index (int): Position right after the tag name.

    Returns:
        tuple[dict[str, Any], int, bool] | None: Attributes, index after the tag end, and
        whether the element is self-closing; None when the tag cannot be read.
    """
    attributes: dict[str, Any] = {}
    i = index
    n = len(source)
    while i < n:
        char = source[i]
        if char.isspace():
            i += 1
            continue
        if source.startswith("/>", i):
            return attributes, i + 2, True
        if char == ">":
            return attributes, i + 1, False
        if source.startswith(("//", "/*"), i):
            i = skip_comment(source, i)
            continue
        if char == "{":
            end = find_matching(source, i)
            if end is None:
                return None
            i = end + 1
            continue
        match = _ATTRIBUTE_NAME_RE.match(source, i)
        if match is None:
            return None
        name = match.group(0)
        i = _skip_whitespace(source, match.end())
        if i >= n or source[i] != "=":
            attributes[name] = True
            continue
        i = _skip_whitespace(source, i + 1)
        if i >= n:
            return None
        if source[i] in "\"'":
            end = source.find(source[i], i + 1)
            if end == -1:
                return None
            attributes[name] = source[i + 1 : end]
            i = end + 1
        elif source[i] == "{":
            end = find_matching(source, i)
            if end is None:
                return None
            attributes[name] = evaluate_literal(source[i + 1 : end])
            i = end + 1
        else:
            return None
    return None


def _skip_whitespace(source: str, index: int) -> int:
    while index < len(source) and source[index].isspace():
        index += 1
    return index
