from collections.abc import Iterable, Mapping
from typing import Any, Optional, Tuple, Union
import logging

from .config_node import ConfigNode
from .emitter import emit_attributes
from .encoder import ValueEncoder, is_valid_hcl_identifier, quote_string
from .errors import InvalidBlockPath, UnsupportedValueKind
from .formatting import FormatOptions, DEFAULT_FORMAT

logger = logging.getLogger(__name__)

# ------------------------------
# Compiler
# ------------------------------

class HCLCompiler:
    """Compiles ConfigNode trees into HCL text.

    The instance only holds immutable formatting options, so one compiler
    can be shared between threads. Any error aborts the whole call; partial
    output is never returned.
    """

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or DEFAULT_FORMAT
        self.encoder = ValueEncoder(self.options)

    def compile_document(self, nodes: Union[ConfigNode, Iterable[ConfigNode]]) -> str:
        """Compile top-level nodes, one blank line between blocks and a trailing newline."""
        if isinstance(nodes, ConfigNode):
            nodes = [nodes]
        blocks = [self.compile_node(node, 0) for node in nodes]
        logger.debug("Compiled %d top-level block(s)", len(blocks))
        if not blocks:
            return ""
        return "\n\n".join(blocks) + "\n"

    def compile_node(self, node: ConfigNode, indent_level: int = 0, path: Tuple[Any, ...] = ()) -> str:
        if not isinstance(node, ConfigNode):
            raise InvalidBlockPath(f"expected a config node, got {type(node).__name__}", path)

        header = self._header(node, path)
        node_path = path + (node.address,)
        pad = self.options.indent(indent_level)

        attributes = node.attributes if node.attributes is not None else {}
        if not isinstance(attributes, Mapping):
            raise UnsupportedValueKind(f"attributes must be a mapping, got {type(attributes).__name__}", node_path)
        children = node.children if node.children is not None else []
        if isinstance(children, (str, bytes, Mapping)) or not isinstance(children, Iterable):
            raise InvalidBlockPath(f"children must be a sequence of nodes, got {type(children).__name__}", node_path)

        lines = [f"{pad}{header} {{"]
        attribute_lines = emit_attributes(attributes, indent_level + 1, path=node_path, encoder=self.encoder)
        lines.extend(attribute_lines)

        for idx, child in enumerate(children):
            if self.options.blank_line_between_children and (idx > 0 or attribute_lines):
                lines.append("")
            lines.append(self.compile_node(child, indent_level + 1, node_path))

        lines.append(f"{pad}}}")
        return "\n".join(lines)

    def _header(self, node: ConfigNode, path: Tuple[Any, ...]) -> str:
        block_path = node.block_path
        if isinstance(block_path, (str, bytes)) or not isinstance(block_path, (list, tuple)):
            raise InvalidBlockPath(f"block path must be a sequence of strings, got {type(block_path).__name__}", path)
        if not block_path:
            raise InvalidBlockPath("block path is empty", path)

        for idx, part in enumerate(block_path):
            if not isinstance(part, str) or not part:
                raise InvalidBlockPath(f"element {idx} of {list(block_path)!r} must be a non-empty string", path)

        keyword, labels = block_path[0], block_path[1:]
        if not is_valid_hcl_identifier(keyword):
            raise InvalidBlockPath(f"block keyword {keyword!r} is not a valid HCL identifier", path)

        return " ".join([keyword] + [quote_string(label) for label in labels])

# ------------------------------
# Conversion Functions
# ------------------------------

def compile_node(node: ConfigNode, indent_level: int = 0, options: Optional[FormatOptions] = None) -> str:
    return HCLCompiler(options).compile_node(node, indent_level)

def compile_document(nodes: Union[ConfigNode, Iterable[ConfigNode]], options: Optional[FormatOptions] = None) -> str:
    """
    Compiles a forest of config nodes into an HCL document.

    Args:
        nodes: Top-level ConfigNodes, in emission order.
        options: Formatting options; defaults to two-space indentation.

    Returns:
        str: The HCL document, ending in a single newline ("" for no nodes).

    Raises:
        EncodingError: If any node or value cannot be encoded.
    """
    return HCLCompiler(options).compile_document(nodes)
