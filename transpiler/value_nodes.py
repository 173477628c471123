from dataclasses import dataclass, field
from typing import List, Dict, Any, Union, Tuple
from abc import ABC, abstractmethod
import math

from .errors import UnsupportedValueKind

VAR_MARKER = "$var"
FUNC_MARKER = "$func"
TEMPLATE_MARKER = "$template"

class ValueNode(ABC):
    @abstractmethod
    def accept(self, visitor: 'ValueVisitor', indent_level: int, path: Tuple[Any, ...]) -> str:
        pass

@dataclass
class LiteralNode(ValueNode):
    value: Union[str, int, float, bool, None]

    def accept(self, visitor: 'ValueVisitor', indent_level: int, path: Tuple[Any, ...]) -> str:
        return visitor.visit_literal(self, indent_level, path)

@dataclass
class ListNode(ValueNode):
    elements: List[ValueNode]

    def accept(self, visitor: 'ValueVisitor', indent_level: int, path: Tuple[Any, ...]) -> str:
        return visitor.visit_list(self, indent_level, path)

@dataclass
class ObjectNode(ValueNode):
    attributes: Dict[str, ValueNode]

    def accept(self, visitor: 'ValueVisitor', indent_level: int, path: Tuple[Any, ...]) -> str:
        return visitor.visit_object(self, indent_level, path)

@dataclass
class VariableReference(ValueNode):
    """A Terraform variable to splice into the output (``{"$var": "env"}``).

    Bare names resolve to ``var.<name>``; names that already contain a
    traversal (``local.prefix``, ``module.vpc.id``) are used verbatim.
    """
    name: str

    @property
    def expression(self) -> str:
        if "." in self.name:
            return self.name
        return f"var.{self.name}"

    def accept(self, visitor: 'ValueVisitor', indent_level: int, path: Tuple[Any, ...]) -> str:
        return visitor.visit_variable_reference(self, indent_level, path)

    def __add__(self, other):
        return TemplateNode.from_parts(self, other)

    def __radd__(self, other):
        return TemplateNode.from_parts(other, self)

@dataclass
class RawExpression(ValueNode):
    """Terraform expression text emitted unquoted (``{"$func": "tomap(...)"}``)."""
    expression: str

    def accept(self, visitor: 'ValueVisitor', indent_level: int, path: Tuple[Any, ...]) -> str:
        return visitor.visit_raw_expression(self, indent_level, path)

@dataclass
class TemplateNode(ValueNode):
    """A quoted string built from literal text and variable references."""
    segments: List[Union[str, VariableReference]] = field(default_factory=list)

    @classmethod
    def from_parts(cls, *parts) -> 'TemplateNode':
        segments: List[Union[str, VariableReference]] = []
        for part in parts:
            if isinstance(part, TemplateNode):
                items = part.segments
            elif isinstance(part, (str, VariableReference)):
                items = [part]
            else:
                raise UnsupportedValueKind(f"cannot concatenate {type(part).__name__} into a template")
            for item in items:
                # Adjacent literal text collapses so equal templates compare equal
                if isinstance(item, str) and segments and isinstance(segments[-1], str):
                    segments[-1] = segments[-1] + item
                elif item != "":
                    segments.append(item)
        return cls(segments)

    def accept(self, visitor: 'ValueVisitor', indent_level: int, path: Tuple[Any, ...]) -> str:
        return visitor.visit_template(self, indent_level, path)

    def __add__(self, other):
        return TemplateNode.from_parts(self, other)

    def __radd__(self, other):
        return TemplateNode.from_parts(other, self)


def var(name: str) -> VariableReference:
    return VariableReference(name)

def func(expression: str) -> RawExpression:
    return RawExpression(expression)

def template(*parts) -> TemplateNode:
    return TemplateNode.from_parts(*parts)


def _marker_to_node(value: Dict[str, Any], path: Tuple[Any, ...]) -> ValueNode:
    marker, payload = next(iter(value.items()))
    if marker == VAR_MARKER:
        if not isinstance(payload, str) or not payload:
            raise UnsupportedValueKind(f"{VAR_MARKER} expects a non-empty string", path)
        return VariableReference(payload)
    if marker == FUNC_MARKER:
        if not isinstance(payload, str):
            raise UnsupportedValueKind(f"{FUNC_MARKER} expects a string", path)
        return RawExpression(payload)
    # $template: a list of text and $var markers
    if not isinstance(payload, (list, tuple)):
        raise UnsupportedValueKind(f"{TEMPLATE_MARKER} expects a list of segments", path)
    parts = []
    for idx, item in enumerate(payload):
        if isinstance(item, dict) and is_marker(item):
            item = _marker_to_node(item, path + (idx,))
        if not isinstance(item, (str, VariableReference)):
            raise UnsupportedValueKind(
                f"template segment must be text or {VAR_MARKER}, got {type(item).__name__}",
                path + (idx,),
            )
        parts.append(item)
    return TemplateNode.from_parts(*parts)

def is_marker(value: Dict[Any, Any]) -> bool:
    return len(value) == 1 and next(iter(value)) in (VAR_MARKER, FUNC_MARKER, TEMPLATE_MARKER)

def to_value_node(value: Any, path: Tuple[Any, ...] = ()) -> ValueNode:
    """Convert a plain Python value tree into value nodes.

    Supported shapes are str, int, float, bool, None, list/tuple, dict and
    the marker dicts. Anything else is rejected rather than stringified.
    """
    if isinstance(value, ValueNode):
        return value
    if value is None or isinstance(value, (str, bool, int)):
        return LiteralNode(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise UnsupportedValueKind(f"{value!r} has no HCL literal", path)
        return LiteralNode(value)
    if isinstance(value, (list, tuple)):
        return ListNode([to_value_node(v, path + (idx,)) for idx, v in enumerate(value)])
    if isinstance(value, dict):
        if is_marker(value):
            return _marker_to_node(value, path)
        return ObjectNode({k: to_value_node(v, path + (k,)) for k, v in value.items()})
    raise UnsupportedValueKind(type(value).__name__, path)


class ValueVisitor(ABC):
    @abstractmethod
    def visit_literal(self, node: LiteralNode, indent_level: int, path: Tuple[Any, ...]) -> str:
        pass

    @abstractmethod
    def visit_list(self, node: ListNode, indent_level: int, path: Tuple[Any, ...]) -> str:
        pass

    @abstractmethod
    def visit_object(self, node: ObjectNode, indent_level: int, path: Tuple[Any, ...]) -> str:
        pass

    @abstractmethod
    def visit_variable_reference(self, node: VariableReference, indent_level: int, path: Tuple[Any, ...]) -> str:
        pass

    @abstractmethod
    def visit_raw_expression(self, node: RawExpression, indent_level: int, path: Tuple[Any, ...]) -> str:
        pass

    @abstractmethod
    def visit_template(self, node: TemplateNode, indent_level: int, path: Tuple[Any, ...]) -> str:
        pass
