"""
Tree-sitter parsing for TSX/JSX/TypeScript sources.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple
from tree_sitter import Language, Parser, Node, Tree

from ..errors import ParseError
from ..utils.logger import app_logger

logger = app_logger.bind(component="jsx_parser")


def _load_tree_sitter_languages():
    """Load tree-sitter languages with proper error handling."""
    import tree_sitter_typescript as tsts

    try:
        tsx_language = Language(tsts.language_tsx())
        ts_language = Language(tsts.language_typescript())
        logger.debug("Loaded tree-sitter TSX and TypeScript grammars")
        return tsx_language, ts_language
    except Exception as e:
        logger.error(f"Failed to load tree-sitter languages: {e}")
        raise RuntimeError("Tree-sitter languages not available. Please install the tree-sitter-typescript package.")


TSX_LANGUAGE, TS_LANGUAGE = _load_tree_sitter_languages()


def language_for(file_path: str) -> Language:
    """Pick the grammar dialect from the file extension.

    Plain `.ts` cannot contain markup and allows `<T>expr` casts, so it gets the
    TypeScript dialect; everything else is parsed as TSX.
    """
    if Path(file_path).suffix.lower() == ".ts":
        return TS_LANGUAGE
    return TSX_LANGUAGE


@dataclass
class ParsedSource:
    """A parsed file: the tree plus the exact bytes it was parsed from."""
    file_path: str
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        """Verbatim source text covered by ``node``."""
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    def _char_column(self, byte_offset: int, byte_column: int) -> int:
        # UTF-16 code units
        line_start = byte_offset - byte_column
        prefix = self.source[line_start:byte_offset].decode("utf-8", errors="replace")
        return len(prefix.encode("utf-16-le")) // 2

    def start(self, node: Node) -> Tuple[int, int]:
        """1-based line and 0-based UTF-16 column of the node start."""
        row, column = node.start_point
        return row + 1, self._char_column(node.start_byte, column)

    def end(self, node: Node) -> Tuple[int, int]:
        """1-based line and 0-based UTF-16 column of the node end."""
        row, column = node.end_point
        return row + 1, self._char_column(node.end_byte, column)


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse_source(text: str, file_path: str) -> ParsedSource:
    """Parse ``text`` and raise :class:`ParseError` if the tree has syntax errors."""
    source = text.encode("utf-8")
    parser = Parser(language_for(file_path))
    tree = parser.parse(source)
    parsed = ParsedSource(file_path=file_path, source=source, tree=tree)

    if tree.root_node.has_error:
        error_node = _first_error(tree.root_node)
        if error_node is not None:
            line, column = parsed.start(error_node)
            raise ParseError(file_path, line, column)
        raise ParseError(file_path)

    return parsed


def parse_file(file_path: str) -> ParsedSource:
    """Read and parse a file from disk."""
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        text = f.read()
    return parse_source(text, file_path)
