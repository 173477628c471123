import json
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from transpiler.config_node import ConfigNode
from transpiler.errors import InvalidBlockPath, UnsupportedValueKind

logger = logging.getLogger(__name__)

NODE_KEYS = {"block", "attributes", "child"}
SUPPORTED_SUFFIXES = {".json", ".yaml", ".yml"}


class LoaderError(ValueError):
    """Raised when a source file cannot be read as a node document."""


def node_from_dict(data: Dict[str, Any], path: Tuple[Any, ...] = ()) -> ConfigNode:
    """Build a ConfigNode from its plain-data form.

    ``{"block": ["resource", "aws_instance", "web"], "attributes": {...}, "child": [...]}``

    ``block`` may also be a space separated string and ``child`` a single
    node. Attribute values are kept as plain data; the ``$var``, ``$func``
    and ``$template`` markers are interpreted at compile time.
    """
    if not isinstance(data, dict):
        raise InvalidBlockPath(f"node must be a mapping, got {type(data).__name__}", path)

    unknown = sorted(set(data) - NODE_KEYS)
    if unknown:
        raise InvalidBlockPath(f"unknown key(s) in node definition: {', '.join(map(str, unknown))}", path)
    if "block" not in data:
        raise InvalidBlockPath("node definition has no 'block'", path)

    block = data["block"]
    if isinstance(block, str):
        block_path = block.split()
    elif isinstance(block, (list, tuple)):
        block_path = list(block)
    else:
        raise InvalidBlockPath(f"'block' must be a list or a string, got {type(block).__name__}", path)

    node_path = path + (".".join(str(p) for p in block_path) or "<empty block>",)

    attributes = data.get("attributes")
    if attributes is None:
        attributes = {}
    elif not isinstance(attributes, dict):
        raise UnsupportedValueKind(f"'attributes' must be a mapping, got {type(attributes).__name__}", node_path)

    children = data.get("child")
    if children is None:
        children = []
    elif isinstance(children, dict):
        children = [children]
    elif not isinstance(children, list):
        raise InvalidBlockPath(f"'child' must be a node or a list of nodes, got {type(children).__name__}", node_path)

    return ConfigNode(
        block_path=block_path,
        attributes=dict(attributes),
        children=[node_from_dict(child, node_path) for child in children],
    )


def nodes_from_data(document: Any, source: str = "<data>") -> List[ConfigNode]:
    """Accept a single node, a list of nodes, or ``{"nodes": [...]}``."""
    if document is None:
        return []
    if isinstance(document, dict):
        if set(document) == {"nodes"}:
            document = document["nodes"] or []
        else:
            document = [document]
    if not isinstance(document, list):
        raise LoaderError(f"{source}: expected a node, a list of nodes or a 'nodes' mapping, got {type(document).__name__}")
    return [node_from_dict(item) for item in document]


def load_nodes(file_path: Union[str, Path]) -> List[ConfigNode]:
    """Load ConfigNodes from a JSON or YAML file (multi-document YAML is concatenated)."""
    file_path = Path(file_path)
    suffix = file_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise LoaderError(f"Unsupported source file type '{suffix}' for {file_path}; expected one of {', '.join(sorted(SUPPORTED_SUFFIXES))}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if suffix == ".json":
                documents = [json.load(f)]
            else:
                documents = list(yaml.safe_load_all(f))
    except FileNotFoundError as e:
        raise LoaderError(f"The file at {file_path} was not found.") from e
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise LoaderError(f"Could not parse {file_path}: {e}") from e

    nodes: List[ConfigNode] = []
    for document in documents:
        nodes.extend(nodes_from_data(document, str(file_path)))
    logger.debug("Loaded %d top-level node(s) from %s", len(nodes), file_path)
    return nodes
