from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence, Tuple


@dataclass
class ConfigNode:
    """One HCL block: ``block_path`` is the keyword followed by its labels.

    Nodes are plain data. The compiler only reads them, so validators can
    inspect the same tree (see ``walk``) before compilation.
    """
    block_path: Sequence[str]
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: List['ConfigNode'] = field(default_factory=list)

    @property
    def keyword(self) -> str:
        return self.block_path[0]

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(self.block_path[1:])

    @property
    def address(self) -> str:
        """Dotted form of the block path, e.g. ``resource.aws_instance.web``."""
        return ".".join(str(p) for p in self.block_path)

    def walk(self, path: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], 'ConfigNode']]:
        """Yield ``(path, node)`` for this node and every descendant, depth first."""
        node_path = path + (self.address,)
        yield node_path, self
        for child in self.children:
            yield from child.walk(node_path)


def walk_nodes(nodes: Sequence[ConfigNode]) -> Iterator[Tuple[Tuple[str, ...], ConfigNode]]:
    for node in nodes:
        yield from node.walk()
