from decimal import Decimal
from typing import Any, List, Optional, Tuple
import math
import re

from .errors import InvalidAttributeIdentifier, UnsupportedValueKind
from .expressions import check_expression
from .formatting import FormatOptions, DEFAULT_FORMAT
from .value_nodes import (
    ValueNode, ValueVisitor, LiteralNode, ListNode, ObjectNode,
    VariableReference, RawExpression, TemplateNode, to_value_node,
)

IDENTIFIER_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_-]*')

# Values that always render on a single line
INLINE_NODES = (LiteralNode, VariableReference, RawExpression, TemplateNode)

_SIMPLE_ESCAPES = {
    '"': '\\"',
    '\\': '\\\\',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
}


def is_valid_hcl_identifier(key: Any) -> bool:
    """Check if a key is a valid HCL identifier."""
    return isinstance(key, str) and IDENTIFIER_RE.fullmatch(key) is not None

def escape_string(text: str) -> str:
    """Escape literal text for use inside an HCL quoted string.

    ``${`` and ``%{`` are doubled so literal text never starts a template
    sequence.
    """
    out = []
    for ch in text:
        if ch in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7f:
            out.append(f'\\u{ord(ch):04x}')
        else:
            out.append(ch)
    return ''.join(out).replace('${', '$${').replace('%{', '%%{')

def quote_string(text: str) -> str:
    return f'"{escape_string(text)}"'

def format_number(value) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"{value!r} has no HCL literal")
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if 'e' in text or 'E' in text:
        text = format(Decimal(text), 'f')
    return text


class ValueEncoder(ValueVisitor):
    """Renders value nodes as HCL expression text."""

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or DEFAULT_FORMAT

    def encode(self, value: Any, indent_level: int = 0, path: Tuple[Any, ...] = ()) -> str:
        return to_value_node(value, path).accept(self, indent_level, path)

    def visit_literal(self, node: LiteralNode, indent_level: int, path: Tuple[Any, ...]) -> str:
        value = node.value
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            try:
                return format_number(value)
            except ValueError as e:
                raise UnsupportedValueKind(str(e), path) from e
        if isinstance(value, str):
            return quote_string(value)
        raise UnsupportedValueKind(type(value).__name__, path)

    def visit_list(self, node: ListNode, indent_level: int, path: Tuple[Any, ...]) -> str:
        if not node.elements:
            return "[]"

        elements = [self._child(element, path + (idx,)) for idx, element in enumerate(node.elements)]
        items = [
            element.accept(self, indent_level + 1, path + (idx,))
            for idx, element in enumerate(elements)
        ]

        limit = self.options.inline_list_max
        if all(isinstance(e, INLINE_NODES) for e in elements) and (limit is None or len(items) <= limit):
            return f"[{', '.join(items)}]"

        pad = self.options.indent(indent_level + 1)
        body = ",\n".join(pad + item for item in items)
        return f"[\n{body}\n{self.options.indent(indent_level)}]"

    def visit_object(self, node: ObjectNode, indent_level: int, path: Tuple[Any, ...]) -> str:
        if not node.attributes:
            return "{}"

        pairs = []
        for key, value in node.attributes.items():
            if not isinstance(key, str) or not key:
                raise InvalidAttributeIdentifier(f"object key {key!r} must be a non-empty string", path + (key,))
            key_str = key if is_valid_hcl_identifier(key) else quote_string(key)
            pairs.append((key_str, key, value))

        lines = self.render_assignments(pairs, indent_level + 1, path)
        return "{\n" + "\n".join(lines) + "\n" + self.options.indent(indent_level) + "}"

    def visit_variable_reference(self, node: VariableReference, indent_level: int, path: Tuple[Any, ...]) -> str:
        return self._reference_expression(node, path)

    def visit_raw_expression(self, node: RawExpression, indent_level: int, path: Tuple[Any, ...]) -> str:
        if not isinstance(node.expression, str):
            raise UnsupportedValueKind("raw expression must be a string", path)
        if self.options.validate_expressions:
            check_expression(node.expression, path)
        return node.expression

    def visit_template(self, node: TemplateNode, indent_level: int, path: Tuple[Any, ...]) -> str:
        parts = []
        for segment in node.segments:
            if isinstance(segment, VariableReference):
                # A literal "$" right before a splice would read as the "$${" escape
                if parts and parts[-1].endswith("$"):
                    parts[-1] = parts[-1][:-1] + '${"$"}'
                # Splices are not escaped
                parts.append("${" + self._reference_expression(segment, path) + "}")
            elif isinstance(segment, str):
                parts.append(escape_string(segment))
            else:
                raise UnsupportedValueKind(f"template segment {type(segment).__name__}", path)
        return '"' + "".join(parts) + '"'

    def render_assignments(self, pairs: List[Tuple[str, Any, Any]], indent_level: int, path: Tuple[Any, ...]) -> List[str]:
        """Render ``key = value`` lines.

        ``pairs`` holds (rendered key, path key, value). With ``align_equals``
        the ``=`` signs of consecutive single-line assignments line up.
        """
        pad = self.options.indent(indent_level)
        rendered = []
        for key_str, path_key, value in pairs:
            value_path = path + (path_key,)
            value_str = self._child(value, value_path).accept(self, indent_level, value_path)
            rendered.append((key_str, value_str))

        if not self.options.align_equals:
            return [f"{pad}{key} = {value}" for key, value in rendered]

        lines = []
        group: List[Tuple[str, str]] = []

        def flush():
            width = max(len(k) for k, _ in group)
            lines.extend(f"{pad}{k.ljust(width)} = {v}" for k, v in group)
            group.clear()

        for key, value in rendered:
            if "\n" in value:
                if group:
                    flush()
                lines.append(f"{pad}{key} = {value}")
            else:
                group.append((key, value))
        if group:
            flush()
        return lines

    def _child(self, value: Any, path: Tuple[Any, ...]) -> ValueNode:
        return to_value_node(value, path)

    def _reference_expression(self, node: VariableReference, path: Tuple[Any, ...]) -> str:
        if not isinstance(node.name, str) or not node.name:
            raise UnsupportedValueKind("variable reference needs a non-empty name", path)
        return node.expression


def encode(value: Any, indent_level: int = 0, options: Optional[FormatOptions] = None, path: Tuple[Any, ...] = ()) -> str:
    """Encode a single attribute value as HCL text."""
    return ValueEncoder(options).encode(value, indent_level, path)
