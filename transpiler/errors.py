from enum import Enum
from typing import Any, Iterable, Tuple


class ErrorKind(Enum):
    INVALID_BLOCK_PATH = "invalid block path"
    INVALID_ATTRIBUTE_IDENTIFIER = "invalid attribute identifier"
    UNSUPPORTED_VALUE_KIND = "unsupported attribute value kind"
    MALFORMED_EXPRESSION = "malformed expression"


def format_path(path: Iterable[Any]) -> str:
    """Render an error path the way a user would point at it: ``resource.aws_instance.web > tags > Name``"""
    parts = [str(p) for p in path]
    return " > ".join(parts) if parts else "<document>"


class EncodingError(Exception):
    """Raised when a config tree cannot be compiled to HCL.

    Every error carries the path from the document root to the failing
    node so callers can report where authoring went wrong.
    """

    kind: ErrorKind = None

    def __init__(self, detail: str = "", path: Iterable[Any] = ()):
        self.path: Tuple[Any, ...] = tuple(path)
        self.detail = detail
        label = self.kind.value if self.kind else "encoding failed"
        message = f"EncodingError: {label} at {format_path(self.path)}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class InvalidBlockPath(EncodingError):
    kind = ErrorKind.INVALID_BLOCK_PATH


class InvalidAttributeIdentifier(EncodingError):
    kind = ErrorKind.INVALID_ATTRIBUTE_IDENTIFIER


class UnsupportedValueKind(EncodingError):
    kind = ErrorKind.UNSUPPORTED_VALUE_KIND


class MalformedExpression(EncodingError):
    kind = ErrorKind.MALFORMED_EXPRESSION
