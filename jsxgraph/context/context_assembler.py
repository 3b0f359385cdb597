"""
Builds the plain-text context bundle handed to an external reasoning agent.
"""
from typing import List, Optional

from ..graph.graph_store import GraphStore
from ..graph.models import Node
from ..types import EdgeKind
from ..utils.logger import app_logger

MAX_ANCESTOR_DEPTH = 20


class ContextAssembler:
    """Walks the neighbourhood of one node and renders it as text."""

    def __init__(self, store: GraphStore, max_depth: int = MAX_ANCESTOR_DEPTH):
        self.store = store
        self.max_depth = max_depth
        self.logger = app_logger.bind(component="context_assembler")

    @staticmethod
    def _section(label: str, body: str, node_id: str, file_path: Optional[str]) -> str:
        lines = [f"{label}: {body}", f"id: {node_id}"]
        if file_path is not None:
            lines.append(f"File: {file_path}")
        return "\n".join(lines)

    def _node_section(self, label: str, node: Node) -> str:
        return self._section(label, node.source_snippet or node.name, node.id, node.file_path or "unknown")

    def ancestors(self, node: Node) -> List[Node]:
        """Follow the first incoming `contains` edge upward, at most ``max_depth`` times."""
        chain = []
        current = node
        for _ in range(self.max_depth):
            parents = self.store.edges_of(current.id, EdgeKind.CONTAINS, direction="incoming")
            if not parents:
                break
            parent = self.store.get_node(parents[0].source)
            if parent is None:
                break
            chain.append(parent)
            current = parent
        return chain

    def assemble(self, node_id: str, user_intent: str) -> str:
        """Render intent, target, ancestors, callees and referenced resources.

        Raises NotFoundError if ``node_id`` is not in the store.
        """
        node = self.store.require_node(node_id)
        sections = [f"User intent: {user_intent}", self._node_section("Main element", node)]

        for depth, parent in enumerate(self.ancestors(node)):
            label = "Parent element" if depth == 0 else f"Parent (level {depth + 1}) element"
            sections.append(self._node_section(label, parent))

        for edge in self.store.edges_of(node.id, EdgeKind.CALLS):
            callee = self.store.resolve(edge.target, prefer_file=node.file_path)
            if callee is not None:
                sections.append(self._node_section("Calls", callee))

        for edge in self.store.edges_of(node.id, EdgeKind.REFERENCES):
            resource = self.store.resolve(edge.target, prefer_file=node.file_path)
            if resource is not None:
                sections.append(self._node_section("Uses", resource))
            else:
                sections.append(self._section("Uses", edge.target, edge.target, None))

        context = "\n\n".join(sections).strip()
        self.logger.debug(f"Assembled context for {node_id} ({len(sections)} sections)")
        return context


def assemble_context(store: GraphStore, node_id: str, user_intent: str) -> str:
    return ContextAssembler(store).assemble(node_id, user_intent)
