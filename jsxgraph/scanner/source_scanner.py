import os
from pathlib import Path
from typing import List, Optional, Iterable, Iterator

from ..config import settings
from ..utils.logger import app_logger


class SourceScanner:
    """Enumerates source files under a root directory."""

    def __init__(self, root_path: Optional[str] = None, extensions: Optional[Iterable[str]] = None,
                 exclude_dirs: Optional[Iterable[str]] = None, max_file_size: Optional[int] = None):
        if root_path is None:
            self.root_path = Path.cwd()
        else:
            self.root_path = Path(root_path)

        if extensions is None:
            extensions = settings.marker_extensions_list
        if exclude_dirs is None:
            exclude_dirs = settings.exclude_dirs_list

        self.extensions = {ext.lower() for ext in extensions}
        self.exclude_dirs = set(exclude_dirs)
        self.max_file_size = max_file_size if max_file_size is not None else settings.max_file_size
        self.logger = app_logger.bind(component="scanner")

    def scan(self) -> List[Path]:
        """Return matching files in a stable (sorted) order."""
        if not self.root_path.is_dir():
            self.logger.warning(f"Directory does not exist: {self.root_path}")
            return []

        files = sorted(self._walk_directory(), key=lambda path: path.as_posix())
        self.logger.info(f"Found {len(files)} files under {self.root_path}")
        return files

    def _walk_directory(self) -> Iterator[Path]:
        """Walk through directory and yield matching files."""
        for root, dirs, files in os.walk(self.root_path):
            # Remove excluded directories
            dirs[:] = [d for d in dirs if d not in self.exclude_dirs]

            for file_name in files:
                file_path = Path(root) / file_name
                if self._should_include_file(file_path):
                    yield file_path

    def _should_include_file(self, file_path: Path) -> bool:
        """Check if file should be included in scan."""
        if file_path.suffix.lower() not in self.extensions:
            return False

        try:
            if file_path.stat().st_size > self.max_file_size:
                self.logger.warning(f"Skipping large file: {file_path}")
                return False
        except OSError:
            return False

        return True


def get_files(root_path: str, extensions: Optional[Iterable[str]] = None,
              exclude_dirs: Optional[Iterable[str]] = None) -> List[Path]:
    """Convenience wrapper around :class:`SourceScanner`."""
    return SourceScanner(root_path, extensions, exclude_dirs).scan()
