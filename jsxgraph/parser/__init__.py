"""
Parsing layer: tree-sitter grammars and the syntax variants built on top.
"""

from .jsx_parser import ParsedSource, parse_source, parse_file, language_for
from .syntax import (
    Attribute,
    CallExpr,
    Element,
    ExpressionValue,
    FunctionDecl,
    IdentifierValue,
    StringValue,
    classify,
    iter_elements,
)

__all__ = [
    'ParsedSource',
    'parse_source',
    'parse_file',
    'language_for',
    'Attribute',
    'CallExpr',
    'Element',
    'ExpressionValue',
    'FunctionDecl',
    'IdentifierValue',
    'StringValue',
    'classify',
    'iter_elements',
]
