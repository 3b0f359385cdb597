"""
Refresh pipeline: re-mark a source tree and rebuild its graph from scratch.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import settings
from .graph import GraphBuilder, GraphStore
from .injector import MarkerInjector, write_fingerprint_index
from .patch import PrettierFormatter
from .types import BuildSummary, MarkerSummary
from .utils.logger import app_logger

logger = app_logger.bind(component="pipeline")


@dataclass
class RefreshReport:
    removed: MarkerSummary
    added: MarkerSummary
    build: BuildSummary

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "removed": self.removed.markers_removed,
            "added": self.added.markers_added,
            "strip": self.removed.to_dict(),
            "inject": self.added.to_dict(),
            "build": self.build.to_dict(),
        }


def refresh(root_dir: str, store: GraphStore, graph_path: Optional[str] = None,
            index_path: Optional[str] = None, formatter: Optional[PrettierFormatter] = None) -> RefreshReport:
    """Strip and re-add markers, rebuild the graph, and persist graph and index.

    Stripping first makes every marker reflect the current element positions.
    Pass an empty string for ``graph_path`` or ``index_path`` to skip writing it.
    """
    graph_path = settings.graph_storage_path if graph_path is None else graph_path
    index_path = settings.fingerprint_index_path if index_path is None else index_path

    injector = MarkerInjector(formatter=formatter)
    logger.info(f"Refreshing markers under {root_dir}")
    removed = injector.strip_markers(root_dir)
    added = injector.inject_markers(root_dir)

    builder = GraphBuilder(store, attribute_name=injector.attribute_name)
    build = builder.build_directory(root_dir)

    if graph_path:
        store.save(graph_path)
    if index_path:
        write_fingerprint_index(added.fingerprints, index_path)

    return RefreshReport(removed=removed, added=added, build=build)
