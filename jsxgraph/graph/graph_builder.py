"""
Builds the element graph from marked JSX/TSX sources using Tree-sitter.
"""
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .graph_store import GraphStore
from .models import SourcePosition, SourceRange
from ..config import settings
from ..fingerprint import positional_fingerprint
from ..parser import (
    CallExpr,
    Element,
    ExpressionValue,
    FunctionDecl,
    IdentifierValue,
    ParsedSource,
    StringValue,
    classify,
    parse_file,
)
from ..scanner import SourceScanner
from ..types import BuildSummary, EdgeKind, FileError, NodeKind
from ..utils.logger import app_logger

RESOURCE_ATTRIBUTES = {"src", "href", "poster", "data"}


@dataclass
class Frame:
    kind: NodeKind
    id: str


@dataclass
class TraversalContext:
    """Stack of enclosing function and element ids for the current subtree."""
    frames: List[Frame] = field(default_factory=list)

    def innermost(self, kind: Optional[NodeKind] = None) -> Optional[str]:
        for frame in reversed(self.frames):
            if kind is None or frame.kind == kind:
                return frame.id
        return None

    @contextmanager
    def enter(self, kind: NodeKind, node_id: str):
        self.frames.append(Frame(kind, node_id))
        try:
            yield
        finally:
            self.frames.pop()


class GraphBuilder:
    """Parses marked sources and records functions, elements and their edges."""

    def __init__(self, store: GraphStore, attribute_name: Optional[str] = None):
        self.store = store
        self.attribute_name = attribute_name or settings.marker_attribute
        self.logger = app_logger.bind(component="graph_builder")

    def build(self, file_path: Union[str, Path]):
        """Add one file's nodes and edges to the store.

        Raises ParseError or OSError; nothing is recorded for a file that
        fails to parse.
        """
        path = Path(file_path).as_posix()
        parsed = parse_file(path)
        self._visit(parsed.root, parsed, TraversalContext())

    def build_all(self, files: Iterable[Union[str, Path]]) -> BuildSummary:
        """Build every file in order, isolating failures per file."""
        files = list(files)
        summary = BuildSummary(total_files=len(files))

        for file in files:
            file_path = Path(file).as_posix()
            try:
                self.build(file_path)
            except Exception as e:
                summary.failed_files += 1
                summary.errors.append(FileError(file=file_path, error=str(e)))
                self.logger.error(f"Error processing {file_path}: {e}")
                continue
            summary.processed_files += 1

        summary.nodes = len(self.store.nodes)
        summary.edges = len(self.store.edges)
        self.logger.info(
            f"Graph built from {summary.processed_files}/{summary.total_files} files: "
            f"{summary.nodes} nodes, {summary.edges} edges"
        )
        return summary

    def build_directory(self, root_dir: str, extensions: Optional[Iterable[str]] = None,
                        exclude_dirs: Optional[Iterable[str]] = None, clear: bool = True) -> BuildSummary:
        """Rebuild the store from every source file under ``root_dir``."""
        if extensions is None:
            extensions = settings.graph_extensions_list
        files = SourceScanner(root_dir, extensions, exclude_dirs).scan()
        if clear:
            self.store.clear()
        return self.build_all(files)

    def _visit(self, node, parsed: ParsedSource, ctx: TraversalContext):
        item = classify(node, parsed)

        if isinstance(item, FunctionDecl):
            function_id = self._add_function(item, parsed)
            with ctx.enter(NodeKind.FUNCTION, function_id):
                self._visit_children(node, parsed, ctx)
            return

        if isinstance(item, Element):
            element_id = self._add_element(item, parsed, ctx)
            with ctx.enter(NodeKind.ELEMENT, element_id):
                self._visit_children(node, parsed, ctx)
            return

        if isinstance(item, CallExpr):
            caller = ctx.innermost()
            if caller is not None:
                self.store.add_edge(EdgeKind.CALLS, caller, item.callee)

        self._visit_children(node, parsed, ctx)

    def _visit_children(self, node, parsed: ParsedSource, ctx: TraversalContext):
        for child in node.children:
            self._visit(child, parsed, ctx)

    def _range(self, node, parsed: ParsedSource) -> SourceRange:
        start_line, start_column = parsed.start(node)
        end_line, end_column = parsed.end(node)
        return SourceRange(
            start=SourcePosition(line=start_line, column=start_column),
            end=SourcePosition(line=end_line, column=end_column),
        )

    def _add_function(self, decl: FunctionDecl, parsed: ParsedSource) -> str:
        line, column = parsed.start(decl.node)
        function_id = positional_fingerprint(parsed.file_path, line, column)
        self.store.add_node(
            function_id,
            name=decl.name,
            kind=NodeKind.FUNCTION,
            file_path=parsed.file_path,
            range=self._range(decl.node, parsed),
            source_snippet=parsed.text(decl.node),
        )
        return function_id

    def _element_id(self, element: Element, parsed: ParsedSource) -> str:
        marker = element.marker(self.attribute_name)
        if marker:
            return marker
        line, column = parsed.start(element.tag_node)
        return positional_fingerprint(parsed.file_path, line, column)

    @staticmethod
    def _props(element: Element) -> Dict[str, str]:
        props = {}
        for attr in element.attributes:
            if isinstance(attr.value, StringValue):
                props[attr.name] = attr.value.value
            elif isinstance(attr.value, IdentifierValue):
                props[attr.name] = f"{{{attr.value.name}}}"
            elif isinstance(attr.value, ExpressionValue):
                props[attr.name] = attr.value.text
        return props

    def _add_element(self, element: Element, parsed: ParsedSource, ctx: TraversalContext) -> str:
        element_id = self._element_id(element, parsed)
        self.store.add_node(
            element_id,
            name=element.tag_name,
            kind=NodeKind.ELEMENT,
            file_path=parsed.file_path,
            range=self._range(element.node, parsed),
            source_snippet=parsed.text(element.node),
            props=self._props(element),
        )

        parent_element = ctx.innermost(NodeKind.ELEMENT)
        enclosing_function = ctx.innermost(NodeKind.FUNCTION)
        if parent_element is not None:
            self.store.add_edge(EdgeKind.CONTAINS, parent_element, element_id)
        elif enclosing_function is not None:
            self.store.add_edge(EdgeKind.CONTAINS, enclosing_function, element_id)

        if enclosing_function is not None and element.tag_name[:1].isupper():
            self.store.add_edge(EdgeKind.RENDERS, enclosing_function, element.tag_name)

        for attr in element.attributes:
            if attr.name.startswith("on"):
                if isinstance(attr.value, IdentifierValue):
                    self.store.add_edge(EdgeKind.BINDS_EVENT, element_id, attr.value.name)
            elif attr.name in RESOURCE_ATTRIBUTES:
                if isinstance(attr.value, StringValue):
                    self.store.add_edge(EdgeKind.REFERENCES, element_id, attr.value.value)
                elif isinstance(attr.value, IdentifierValue):
                    self.store.add_edge(EdgeKind.REFERENCES, element_id, attr.value.name)

        return element_id


def build_graph(root_dir: str, store: Optional[GraphStore] = None) -> GraphStore:
    """Build a fresh graph for every source file under ``root_dir``."""
    store = store if store is not None else GraphStore()
    GraphBuilder(store).build_directory(root_dir)
    return store
