from typing import Any, Dict, List, Optional, Tuple

from .encoder import ValueEncoder, is_valid_hcl_identifier
from .errors import InvalidAttributeIdentifier
from .formatting import FormatOptions


def emit_attributes(attributes: Dict[str, Any], indent_level: int = 0,
                    options: Optional[FormatOptions] = None, path: Tuple[Any, ...] = (),
                    encoder: Optional[ValueEncoder] = None) -> List[str]:
    """Turn an attributes mapping into ``key = value`` lines, in insertion order.

    Block attribute names are not quoted by HCL, so every key has to be a
    valid identifier. An empty mapping yields no lines.
    """
    if not attributes:
        return []
    encoder = encoder or ValueEncoder(options)

    pairs = []
    for key, value in attributes.items():
        if not is_valid_hcl_identifier(key):
            raise InvalidAttributeIdentifier(f"{key!r} is not a valid HCL identifier", path + (key,))
        pairs.append((key, key, value))
    return encoder.render_assignments(pairs, indent_level, path)
