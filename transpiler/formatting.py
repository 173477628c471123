from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml


@dataclass(frozen=True)
class FormatOptions:
    """Formatting knobs shared by the encoder, emitter and compiler."""
    indent_width: int = 2
    blank_line_between_children: bool = True
    align_equals: bool = False
    inline_list_max: Optional[int] = None  # None: scalar lists always stay on one line
    validate_expressions: bool = False

    def __post_init__(self):
        if not isinstance(self.indent_width, int) or isinstance(self.indent_width, bool) or self.indent_width < 1:
            raise ValueError(f"indent_width must be a positive integer, got {self.indent_width!r}")
        if self.inline_list_max is not None and (not isinstance(self.inline_list_max, int) or self.inline_list_max < 0):
            raise ValueError(f"inline_list_max must be a non-negative integer or null, got {self.inline_list_max!r}")

    def indent(self, level: int) -> str:
        return " " * (self.indent_width * level)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'FormatOptions':
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown format option(s): {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> 'FormatOptions':
        """Load options from the ``format`` section of a YAML config file."""
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")
        return cls.from_dict(data.get('format'))


DEFAULT_FORMAT = FormatOptions()
