"""
Adds and strips marker attributes on every JSX opening tag.

Markers are spliced into the original text at byte offsets taken from the parse
tree, so untouched code keeps its exact formatting and every line keeps its
number. Stripping removes each marker together with the whitespace before it,
which undoes an injection byte for byte.
"""
import json
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..config import settings
from ..errors import NotFoundError
from ..fingerprint import positional_fingerprint
from ..parser import parse_source, iter_elements
from ..patch.formatter import PrettierFormatter
from ..scanner import SourceScanner
from ..types import FingerprintRecord, FileError, MarkerSummary
from ..utils.logger import app_logger

logger = app_logger.bind(component="marker_injector")

Splice = Tuple[int, int, bytes]


def _apply_splices(source: bytes, splices: List[Splice]) -> bytes:
    for start, end, replacement in sorted(splices, key=lambda s: s[0], reverse=True):
        source = source[:start] + replacement + source[end:]
    return source


def add_markers(text: str, file_path: str,
                attribute_name: str = "data-fingerprint") -> Tuple[str, List[FingerprintRecord]]:
    """Return ``text`` with a marker on every unmarked element, plus index records."""
    parsed = parse_source(text, file_path)
    splices: List[Splice] = []
    records: List[FingerprintRecord] = []

    for element in iter_elements(parsed.root, parsed):
        if element.attribute(attribute_name) is not None:
            continue

        line, column = parsed.start(element.tag_node)
        marker_id = positional_fingerprint(file_path, line, column)
        last = [child for child in element.tag_node.named_children if child.type != "comment"][-1]
        splices.append((last.end_byte, last.end_byte, f' {attribute_name}="{marker_id}"'.encode("utf-8")))
        records.append(FingerprintRecord(
            id=marker_id,
            file=file_path,
            element_name=element.tag_name,
            line=line,
            column=column,
        ))

    if not splices:
        return text, records
    return _apply_splices(parsed.source, splices).decode("utf-8"), records


def remove_markers(text: str, file_path: str, attribute_name: str = "data-fingerprint") -> Tuple[str, int]:
    """Return ``text`` without any ``attribute_name`` attribute, plus the count removed."""
    parsed = parse_source(text, file_path)
    splices: List[Splice] = []

    for element in iter_elements(parsed.root, parsed):
        for attr in element.attributes:
            if attr.name != attribute_name:
                continue
            previous = attr.node.prev_sibling
            start = previous.end_byte if previous is not None else attr.node.start_byte
            splices.append((start, attr.node.end_byte, b""))

    if not splices:
        return text, 0
    return _apply_splices(parsed.source, splices).decode("utf-8"), len(splices)


class MarkerInjector:
    """Runs marker injection and stripping over a source tree."""

    def __init__(self, attribute_name: Optional[str] = None, extensions: Optional[Iterable[str]] = None,
                 exclude_dirs: Optional[Iterable[str]] = None, formatter: Optional[PrettierFormatter] = None):
        self.attribute_name = attribute_name or settings.marker_attribute
        self.extensions = list(extensions) if extensions is not None else settings.marker_extensions_list
        self.exclude_dirs = list(exclude_dirs) if exclude_dirs is not None else settings.exclude_dirs_list
        self.formatter = formatter or PrettierFormatter()
        self.logger = logger

    def _files(self, root_dir: str) -> List[Path]:
        return SourceScanner(root_dir, self.extensions, self.exclude_dirs).scan()

    def inject_file(self, file_path: str) -> List[FingerprintRecord]:
        """Mark one file in place; returns the records of markers added."""
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            code = f.read()

        updated, records = add_markers(code, file_path, self.attribute_name)
        if records:
            with open(file_path, "w", encoding="utf-8", newline="") as f:
                f.write(updated)
        return records

    def strip_file(self, file_path: str) -> int:
        """Remove markers from one file in place; returns how many were removed."""
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            code = f.read()

        updated, removed = remove_markers(code, file_path, self.attribute_name)
        if removed:
            updated, _ = self.formatter.format_or_original(updated, file_path)
            with open(file_path, "w", encoding="utf-8", newline="") as f:
                f.write(updated)
        return removed

    def inject_markers(self, root_dir: str) -> MarkerSummary:
        """Add markers to every matching file under ``root_dir``."""
        self.logger.info(f"Adding markers to project: {root_dir} (attribute: {self.attribute_name})")
        files = self._files(root_dir)
        summary = MarkerSummary(total_files=len(files))

        for file in files:
            file_path = file.as_posix()
            try:
                records = self.inject_file(file_path)
            except Exception as e:
                summary.failed_files += 1
                summary.errors.append(FileError(file=file_path, error=str(e)))
                self.logger.error(f"Failed to process {file_path}: {e}")
                continue

            summary.processed_files += 1
            summary.markers_added += len(records)
            summary.fingerprints.extend(records)

        self.logger.info(
            f"Processed {summary.processed_files}/{summary.total_files} files, "
            f"{summary.failed_files} failed, {summary.markers_added} markers added"
        )
        return summary

    def strip_markers(self, root_dir: str) -> MarkerSummary:
        """Remove markers from every matching file under ``root_dir``."""
        self.logger.info(f"Removing markers from project: {root_dir} (attribute: {self.attribute_name})")
        files = self._files(root_dir)
        summary = MarkerSummary(total_files=len(files))

        for file in files:
            file_path = file.as_posix()
            try:
                removed = self.strip_file(file_path)
            except Exception as e:
                summary.failed_files += 1
                summary.errors.append(FileError(file=file_path, error=str(e)))
                self.logger.error(f"Failed to process {file_path}: {e}")
                continue

            summary.processed_files += 1
            summary.markers_removed += removed

        self.logger.info(
            f"Processed {summary.processed_files}/{summary.total_files} files, "
            f"{summary.failed_files} failed, {summary.markers_removed} markers removed"
        )
        return summary


def inject_markers(root_dir: str, attribute_name: Optional[str] = None, extensions: Optional[Iterable[str]] = None,
                   exclude_dirs: Optional[Iterable[str]] = None) -> MarkerSummary:
    return MarkerInjector(attribute_name, extensions, exclude_dirs).inject_markers(root_dir)


def strip_markers(root_dir: str, attribute_name: Optional[str] = None, extensions: Optional[Iterable[str]] = None,
                  exclude_dirs: Optional[Iterable[str]] = None,
                  formatter: Optional[PrettierFormatter] = None) -> MarkerSummary:
    return MarkerInjector(attribute_name, extensions, exclude_dirs, formatter).strip_markers(root_dir)


def write_fingerprint_index(records: Iterable[FingerprintRecord], index_path: str) -> int:
    """Write the id -> location index consumed by lookup clients."""
    index = {record.id: record.to_dict() for record in records}
    path = Path(index_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(index, f, indent=2, ensure_ascii=False)
    logger.info(f"Wrote {len(index)} fingerprints to {path}")
    return len(index)


def lookup_fingerprint(fingerprint_id: str, index_path: str) -> dict:
    """Resolve a marker id to its source location record."""
    path = Path(index_path)
    if not path.exists():
        raise NotFoundError(f"Fingerprint index not found: {index_path}")

    with open(path, "r", encoding="utf-8") as f:
        index = json.load(f)

    if fingerprint_id not in index:
        raise NotFoundError(f"Fingerprint not found: {fingerprint_id}")
    return index[fingerprint_id]
