from typing import List, Dict, Any, Optional
import json
from pathlib import Path

from .models import Node, Edge, SourceRange
from ..errors import NotFoundError
from ..types import NodeKind, EdgeKind
from ..utils.logger import app_logger

class GraphStore:
    """In-memory index of graph nodes and edges with JSON persistence.

    The store is owned by whoever builds into it; nothing here is process-wide.
    `add_node` is first-writer-wins: a later call for an existing id never
    changes the stored record, including placeholders created by `add_edge`.
    """

    def __init__(self):
        self.logger = app_logger.bind(component="graph_store")
        self.nodes: Dict[str, Node] = {}
        self.edges: Dict[str, Edge] = {}

    def add_node(self, node_id: str, name: Optional[str] = None, kind: Optional[NodeKind] = None,
                 file_path: Optional[str] = None, range: Optional[SourceRange] = None,
                 source_snippet: Optional[str] = None, props: Optional[Dict[str, str]] = None) -> Node:
        """Create a node unless one with ``node_id`` already exists."""
        existing = self.nodes.get(node_id)
        if existing is not None:
            return existing

        node = Node(
            id=node_id,
            name=name or node_id,
            kind=kind or NodeKind.VARIABLE,
            file_path=file_path,
            range=range,
            source_snippet=source_snippet,
            props=props,
        )
        self.nodes[node_id] = node
        return node

    def add_edge(self, kind: EdgeKind, source: str, target: str) -> Edge:
        """Create an edge; adding the same (source, kind, target) again is a no-op."""
        edge_id = Edge.make_id(kind, source, target)
        existing = self.edges.get(edge_id)
        if existing is not None:
            return existing

        edge = Edge(id=edge_id, kind=kind, source=source, target=target)
        self.edges[edge_id] = edge

        self.add_node(source).edges.outgoing.append(edge_id)
        self.add_node(target).edges.incoming.append(edge_id)
        return edge

    def clear(self):
        """Remove all nodes and edges."""
        self.nodes = {}
        self.edges = {}

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def require_node(self, node_id: str) -> Node:
        node = self.nodes.get(node_id)
        if node is None:
            raise NotFoundError(f"Node not found in graph: {node_id}")
        return node

    def edges_of(self, node_id: str, kind: Optional[EdgeKind] = None, direction: str = "outgoing") -> List[Edge]:
        """Edges incident on a node, in insertion order, optionally filtered by kind."""
        node = self.nodes.get(node_id)
        if node is None:
            return []

        edge_ids = node.edges.incoming if direction == "incoming" else node.edges.outgoing
        edges = [self.edges[edge_id] for edge_id in edge_ids if edge_id in self.edges]
        if kind is not None:
            edges = [edge for edge in edges if edge.kind == kind]
        return edges

    def find_by_name(self, name: str, kind: Optional[NodeKind] = None) -> List[Node]:
        return [
            node for node in self.nodes.values()
            if node.name == name and not node.is_placeholder and (kind is None or node.kind == kind)
        ]

    def resolve(self, node_id: str, prefer_file: Optional[str] = None) -> Optional[Node]:
        """Find a node with real source behind ``node_id``.

        Call targets are recorded by name while function nodes are keyed by
        position, so a placeholder is resolved to a function of the same name,
        preferring one from ``prefer_file``.
        """
        node = self.nodes.get(node_id)
        if node is not None and not node.is_placeholder:
            return node

        candidates = self.find_by_name(node_id, NodeKind.FUNCTION)
        for candidate in candidates:
            if prefer_file is not None and candidate.file_path == prefer_file:
                return candidate
        return candidates[0] if candidates else None

    def serialize(self) -> bytes:
        """Serialize to the `{nodes: [[id, record]], edges: [[id, record]]}` JSON form."""
        data = {
            "nodes": [[node_id, node.model_dump(mode="json", by_alias=True)] for node_id, node in self.nodes.items()],
            "edges": [[edge_id, edge.model_dump(mode="json", by_alias=True)] for edge_id, edge in self.edges.items()],
        }
        return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")

    def deserialize(self, data: bytes):
        """Replace the store contents with a serialized graph."""
        payload = json.loads(data.decode("utf-8") if isinstance(data, bytes) else data)
        self.nodes = {node_id: Node.model_validate(record) for node_id, record in payload.get("nodes", [])}
        self.edges = {edge_id: Edge.model_validate(record) for edge_id, record in payload.get("edges", [])}

    @classmethod
    def from_bytes(cls, data: bytes) -> "GraphStore":
        store = cls()
        store.deserialize(data)
        return store

    def save(self, storage_path: str):
        """Save the graph to a JSON file."""
        path = Path(storage_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(self.serialize())
        self.logger.info(f"Saved graph to {path} ({len(self.nodes)} nodes, {len(self.edges)} edges)")

    def load(self, storage_path: str):
        """Load the graph from a JSON file."""
        path = Path(storage_path)
        if not path.exists():
            raise NotFoundError(f"Graph file not found: {storage_path}")

        with open(path, "rb") as f:
            self.deserialize(f.read())
        self.logger.info(f"Loaded graph from {path}")

    def stats(self) -> Dict[str, Any]:
        """Get graph statistics."""
        node_counts: Dict[str, int] = {}
        for node in self.nodes.values():
            node_counts[node.kind.value] = node_counts.get(node.kind.value, 0) + 1

        edge_counts: Dict[str, int] = {}
        for edge in self.edges.values():
            edge_counts[edge.kind.value] = edge_counts.get(edge.kind.value, 0) + 1

        return {
            "total_nodes": len(self.nodes),
            "total_edges": len(self.edges),
            "nodes": node_counts,
            "edges": edge_counts,
        }

    def describe(self) -> str:
        """Render every node with its outgoing edges as plain text."""
        lines = []
        for node in self.nodes.values():
            lines.append(f"Node: {node.name} (id: {node.id})")
            outgoing = self.edges_of(node.id)
            if not outgoing:
                lines.append("   (no outgoing edges)")
            for edge in outgoing:
                target = self.nodes.get(edge.target)
                target_name = target.name if target is not None else "Unknown"
                lines.append(f"   {edge.kind.value:<12} -> {target_name} (id: {edge.target})")
            lines.append("")
        return "\n".join(lines)
