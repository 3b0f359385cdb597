"""
Graph module for building and storing the element graph of a JSX source tree.
"""

from .graph_builder import GraphBuilder, TraversalContext, build_graph
from .graph_store import GraphStore
from .models import Node, Edge, SourceRange, SourcePosition

__all__ = [
    'GraphBuilder',
    'TraversalContext',
    'build_graph',
    'GraphStore',
    'Node',
    'Edge',
    'SourceRange',
    'SourcePosition',
]
