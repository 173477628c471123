from .config_node import ConfigNode, walk_nodes
from .value_nodes import (
    ValueNode, LiteralNode, ListNode, ObjectNode, VariableReference,
    RawExpression, TemplateNode, to_value_node, var, func, template,
)
from .errors import (
    ErrorKind, EncodingError, InvalidBlockPath, InvalidAttributeIdentifier,
    UnsupportedValueKind, MalformedExpression,
)
from .formatting import FormatOptions, DEFAULT_FORMAT
from .encoder import ValueEncoder, encode
from .emitter import emit_attributes
from .expressions import check_expression
from .compiler import HCLCompiler, compile_node, compile_document
