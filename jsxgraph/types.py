from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    """Graph node kind enumeration."""
    FUNCTION = "function"
    ELEMENT = "element"
    VARIABLE = "variable"
    PROP = "prop"
    FILE = "file"
    API = "api"


class EdgeKind(str, Enum):
    """Graph edge kind enumeration."""
    CONTAINS = "contains"
    RENDERS = "renders"
    CALLS = "calls"
    REFERENCES = "references"
    BINDS_EVENT = "binds_event"


@dataclass
class FingerprintRecord:
    """Index entry resolving a marker id to its source location."""
    id: str
    file: str
    element_name: str
    line: int
    column: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "file": self.file,
            "elementName": self.element_name,
            "line": self.line,
            "column": self.column,
        }


@dataclass
class FileError:
    """A failure isolated to one file."""
    file: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"file": self.file, "error": self.error}


@dataclass
class MarkerSummary:
    """Outcome of injecting or stripping markers over a tree."""
    total_files: int = 0
    processed_files: int = 0
    failed_files: int = 0
    markers_added: int = 0
    markers_removed: int = 0
    fingerprints: List[FingerprintRecord] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_files": self.total_files,
            "processed_files": self.processed_files,
            "failed_files": self.failed_files,
            "markers_added": self.markers_added,
            "markers_removed": self.markers_removed,
            "fingerprints": [record.to_dict() for record in self.fingerprints],
            "errors": [error.to_dict() for error in self.errors],
        }


@dataclass
class BuildSummary:
    """Outcome of a graph build over a set of files."""
    total_files: int = 0
    processed_files: int = 0
    failed_files: int = 0
    nodes: int = 0
    edges: int = 0
    errors: List[FileError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_files": self.total_files,
            "processed_files": self.processed_files,
            "failed_files": self.failed_files,
            "nodes": self.nodes,
            "edges": self.edges,
            "errors": [error.to_dict() for error in self.errors],
        }


class StepStatus(str, Enum):
    """Outcome of one plan step."""
    APPLIED = "applied"
    PARTIAL = "partial"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepReport:
    """Per-step result of applying a change plan."""
    file: str
    status: StepStatus
    applied_changes: int = 0
    missed_changes: int = 0
    formatted: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "file": self.file,
            "status": self.status.value,
            "applied_changes": self.applied_changes,
            "missed_changes": self.missed_changes,
            "formatted": self.formatted,
            "error": self.error,
        }


@dataclass
class PlanReport:
    """Result of applying a whole change plan."""
    steps: List[StepReport] = field(default_factory=list)
    dry_run: bool = False

    @property
    def applied_steps(self) -> int:
        return sum(1 for step in self.steps if step.status in (StepStatus.APPLIED, StepStatus.PARTIAL))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "dry_run": self.dry_run,
            "applied_steps": self.applied_steps,
            "steps": [step.to_dict() for step in self.steps],
        }
