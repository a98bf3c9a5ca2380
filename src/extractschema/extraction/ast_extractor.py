"""Syntax-tree extractor backed by tree-sitter's TSX grammar."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from extractschema.dependencies import ensure_backend_dependencies
from extractschema.exceptions import ComponentParseError
from extractschema.extraction.base import (
    BaseSchemaExtractor,
    ScannedElement,
    ScannedRegistration,
    ScannedRequest,
    to_plain_value,
)
from extractschema.extraction.js_literals import Expression, RegexLiteral, parse_number, parse_string_literal
from extractschema.logging import get_logger
from extractschema.patterns import (
    FETCH_CALLEE,
    NAMESPACED_REQUEST_METHODS,
    REGISTER_CALLEE,
    REQUEST_CLIENT_NAMES,
)
from extractschema.typing.enums import ExtractorBackendType
from extractschema.typing.models import FieldOption

if TYPE_CHECKING:
    from tree_sitter import Language, Node

logger = get_logger(__name__)

# tree-sitter positions are 0-based
_POSITION_OFFSET = 1

_ELEMENT_TYPES = frozenset({"jsx_self_closing_element", "jsx_opening_element"})
_WRAPPER_TYPES = frozenset(
    {"parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"},
)
_REQUEST_BODY_KEYS = ("body", "requestBody")
_JSON_SERIALIZER = "JSON.stringify"


@lru_cache(maxsize=1)
def _tsx_language() -> Language:
    """Return the TSX grammar, which parses plain JSX and TypeScript alike.

    Returns:
        Language: tree-sitter language binding.
    """
    import tree_sitter_typescript as tsts  # noqa: PLC0415
    from tree_sitter import Language  # noqa: PLC0415

    return Language(tsts.language_tsx())


def _text(node: Node) -> str:
    return (node.text or b"").decode("utf-8")


def _iter_nodes(root: Node) -> Iterator[Node]:
    """Walk a tree in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _named_children(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != "comment"]


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(reversed([child for child in node.children if child.has_error or child.is_missing]))
    return None


def evaluate_node(node: Node) -> Any:  # noqa: ANN401, PLR0911
    """Evaluate a literal expression node into a Python value.

    Args:
        node (Node): Expression node.

    Returns:
        Any: Literal value, or an `Expression` holding the source text.
    """
    kind = node.type
    text = _text(node)
    if kind in {"string", "template_string"}:
        value = parse_string_literal(text)
        return Expression(text=text) if value is None else value
    if kind in {"number", "unary_expression"}:
        number = parse_number(text.replace(" ", ""))
        return Expression(text=text) if number is None else number
    if kind in {"true", "false"}:
        return kind == "true"
    if kind in {"null", "undefined"}:
        return None
    if kind == "regex":
        pattern = node.child_by_field_name("pattern")
        flags = node.child_by_field_name("flags")
        return RegexLiteral(
            pattern=_text(pattern) if pattern is not None else "",
            flags=_text(flags) if flags is not None else "",
        )
    if kind == "object":
        return _evaluate_object(node)
    if kind == "array":
        return [evaluate_node(child) for child in _named_children(node)]
    if kind in _WRAPPER_TYPES:
        children = _named_children(node)
        return evaluate_node(children[0]) if children else Expression(text=text)
    return Expression(text=text)


def _property_key(node: Node) -> str | None:
    if node.type in {"property_identifier", "number"}:
        return _text(node)
    if node.type == "string":
        return parse_string_literal(_text(node))
    return None


def _object_entries(node: Node) -> Iterator[tuple[str, Node]]:
    for child in _named_children(node):
        if child.type == "shorthand_property_identifier":
            yield _text(child), child
            continue
        if child.type != "pair":
            continue
        key_node = child.child_by_field_name("key")
        value_node = child.child_by_field_name("value")
        key = _property_key(key_node) if key_node is not None else None
        if key is not None and value_node is not None:
            yield key, value_node


def _evaluate_object(node: Node) -> dict[str, Any]:
    return {key: evaluate_node(value_node) for key, value_node in _object_entries(node)}


def _attribute_value(node: Node) -> Any:  # noqa: ANN401
    if node.type == "string":
        return _text(node)[1:-1]
    if node.type == "jsx_expression":
        children = _named_children(node)
        if not children:
            return Expression(text=_text(node))
        return evaluate_node(children[0])
    return Expression(text=_text(node))


def _jsx_attributes(element: Node) -> dict[str, Any]:
    attributes: dict[str, Any] = {}
    for child in element.named_children:
        if child.type != "jsx_attribute":
            continue
        parts = _named_children(child)
        if not parts:
            continue
        attributes[_text(parts[0])] = _attribute_value(parts[1]) if len(parts) > 1 else True
    return attributes


def _element_name(element: Node) -> str | None:
    name = element.child_by_field_name("name")
    return _text(name) if name is not None else None


def _select_options(opening: Node) -> list[FieldOption]:
    """Collect static options below a `<select>` opening tag."""
    parent = opening.parent
    if parent is None or parent.type != "jsx_element":
        return []
    options: list[FieldOption] = []
    for node in _iter_nodes(parent):
        if node.type not in _ELEMENT_TYPES or _element_name(node) != "option":
            continue
        value = _jsx_attributes(node).get("value")
        label = _option_label(node)
        if value is None:
            value = label
        if value is None or value == "" or not isinstance(value, str | int | float):
            continue
        options.append(FieldOption(label=label or str(value), value=value))
    return options


def _option_label(opening: Node) -> str | None:
    if opening.type != "jsx_opening_element" or opening.parent is None:
        return None
    children = [
        child
        for child in opening.parent.named_children
        if child.type not in {"jsx_opening_element", "jsx_closing_element"}
    ]
    if any(child.type != "jsx_text" for child in children):
        return None
    return " ".join(" ".join(_text(child).split()) for child in children).strip() or None


def _call_arguments(call: Node) -> list[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return []
    return _named_children(arguments)


def _iter_calls(root: Node) -> Iterator[tuple[Node, list[Node]]]:
    for node in _iter_nodes(root):
        if node.type != "call_expression":
            continue
        function = node.child_by_field_name("function")
        if function is not None:
            yield function, _call_arguments(node)


def _request_body_placeholder(options: Node) -> Any:  # noqa: ANN401
    """Build the shallow body placeholder of a fetch options object.

    Args:
        options (Node): Object literal passed as fetch options.

    Returns:
        Any: Dict of literal values (non-literals as None), `{}` when the body is
        not an object literal, or None when there is no body.
    """
    for key, value_node in _object_entries(options):
        if key not in _REQUEST_BODY_KEYS:
            continue
        target = value_node
        if target.type == "call_expression":
            function = target.child_by_field_name("function")
            arguments = _call_arguments(target)
            if function is not None and _text(function) == _JSON_SERIALIZER and arguments:
                target = arguments[0]
        if target.type == "object":
            return to_plain_value(_evaluate_object(target))
        return {}
    return None


class TreeSitterSchemaExtractor(BaseSchemaExtractor["Node"]):
    """Extractor walking a tree-sitter syntax tree.

    Source that does not parse cleanly is rejected with `ComponentParseError`.
    Fetch calls with an object-literal body get a placeholder request body.
    """

    def __init__(self) -> None:
        """Initialize the extractor.

        Raises:
            DependencyError: If tree-sitter or its TypeScript grammar is not installed.
        """
        ensure_backend_dependencies(ExtractorBackendType.AST)

    def _parse(self, source: str, component_name: str) -> Node:
        """Parse component source.

        Args:
            source (str): Component source text.
            component_name (str): Name used in parse error reports.

        Raises:
            ComponentParseError: If the source contains syntax errors.

        Returns:
            Node: Root node of the syntax tree.
        """
        from tree_sitter import Parser  # noqa: PLC0415

        parser = Parser()
        parser.language = _tsx_language()
        tree = parser.parse(source.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            error = _first_error(root) or root
            row, column = error.start_point
            logger.warning(
                "Component source failed to parse",
                extra={"component": component_name, "line": row + _POSITION_OFFSET},
            )
            raise ComponentParseError(
                message="Syntax error in component source",
                component_name=component_name,
                line=row + _POSITION_OFFSET,
                column=column + _POSITION_OFFSET,
            )
        return root

    def _iter_elements(self, document: Node, tags: tuple[str, ...]) -> Iterable[ScannedElement]:
        for node in _iter_nodes(document):
            if node.type not in _ELEMENT_TYPES:
                continue
            tag = _element_name(node)
            if tag not in tags:
                continue
            options = None
            if tag == "select" and node.type == "jsx_opening_element":
                options = _select_options(node)
            yield ScannedElement(tag=tag, attributes=_jsx_attributes(node), options=options)

    def _iter_registrations(self, document: Node) -> Iterable[ScannedRegistration]:
        for function, arguments in _iter_calls(document):
            if not arguments or not _is_register_callee(function):
                continue
            rules = evaluate_node(arguments[1]) if len(arguments) > 1 else {}
            yield ScannedRegistration(
                name=evaluate_node(arguments[0]),
                rules=rules if isinstance(rules, dict) else {},
            )

    def _iter_fetch_calls(self, document: Node) -> Iterable[ScannedRequest]:
        for function, arguments in _iter_calls(document):
            if not arguments or function.type != "identifier" or _text(function) != FETCH_CALLEE:
                continue
            options: dict[str, Any] | None = None
            request_body = None
            if len(arguments) > 1 and arguments[1].type == "object":
                options = _evaluate_object(arguments[1])
                request_body = _request_body_placeholder(arguments[1])
            yield ScannedRequest(endpoint=evaluate_node(arguments[0]), options=options, request_body=request_body)

    def _iter_namespaced_calls(self, document: Node) -> Iterable[ScannedRequest]:
        for function, arguments in _iter_calls(document):
            if not arguments or function.type != "member_expression":
                continue
            client = function.child_by_field_name("object")
            method = function.child_by_field_name("property")
            if client is None or method is None or _text(client) not in REQUEST_CLIENT_NAMES:
                continue
            http_method = NAMESPACED_REQUEST_METHODS.get(_text(method))
            if http_method is None:
                continue
            yield ScannedRequest(endpoint=evaluate_node(arguments[0]), method=http_method)


def _is_register_callee(function: Node) -> bool:
    if function.type == "identifier":
        return _text(function) == REGISTER_CALLEE
    if function.type == "member_expression":
        prop = function.child_by_field_name("property")
        return prop is not None and _text(prop) == REGISTER_CALLEE
    return False
