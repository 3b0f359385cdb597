"""
Exception taxonomy shared by the injector, graph builder and patch engine.
"""
from typing import Optional


class JsxGraphError(Exception):
    """Base class for all jsxgraph errors."""


class ParseError(JsxGraphError):
    """Source text could not be parsed into a clean syntax tree."""

    def __init__(self, file_path: str, line: Optional[int] = None, column: Optional[int] = None,
                 message: str = "syntax error"):
        self.file_path = file_path
        self.line = line
        self.column = column
        location = f"{file_path}:{line}:{column}" if line is not None else file_path
        super().__init__(f"{message} at {location}")


class NotFoundError(JsxGraphError):
    """A file, fingerprint or graph node does not exist."""


class PatchMismatchError(JsxGraphError):
    """An `old` snippet was not found verbatim in the current file text."""


class FormatError(JsxGraphError):
    """The canonical formatter rejected the source or could not be run."""


class InvalidPlanError(JsxGraphError):
    """A change plan does not have the expected shape."""
