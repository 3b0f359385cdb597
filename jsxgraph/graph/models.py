"""
Data models for the element graph.
"""
from typing import List, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..types import NodeKind, EdgeKind


class GraphModel(BaseModel):
    """Base model serialising with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourcePosition(GraphModel):
    line: int
    column: int


class SourceRange(GraphModel):
    start: SourcePosition
    end: SourcePosition


class NodeEdges(GraphModel):
    incoming: List[str] = Field(default_factory=list)
    outgoing: List[str] = Field(default_factory=list)


class Node(GraphModel):
    """A function/component declaration or a concrete element instance."""
    id: str
    name: str
    kind: NodeKind = NodeKind.VARIABLE
    file_path: Optional[str] = None
    range: Optional[SourceRange] = None
    source_snippet: Optional[str] = None
    props: Optional[Dict[str, str]] = None
    edges: NodeEdges = Field(default_factory=NodeEdges)

    @property
    def is_placeholder(self) -> bool:
        """True for nodes only created as an edge endpoint."""
        return self.file_path is None and self.source_snippet is None


class Edge(GraphModel):
    """A directed, typed relationship between two node ids."""
    id: str
    kind: EdgeKind
    source: str
    target: str

    @staticmethod
    def make_id(kind: EdgeKind, source: str, target: str) -> str:
        return f"{source}-{EdgeKind(kind).value}-{target}"
