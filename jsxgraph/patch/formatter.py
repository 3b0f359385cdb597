"""
Canonical source formatting through Prettier.
"""
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Tuple

from ..config import settings
from ..errors import FormatError
from ..utils.logger import app_logger

PARSERS_BY_EXTENSION = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "babel",
    ".jsx": "babel",
    ".css": "css",
    ".json": "json",
    ".html": "html",
}
DEFAULT_PARSER = "typescript"


class PrettierFormatter:
    """Runs Prettier over stdin with a parser picked by file extension."""

    def __init__(self, command: Optional[str] = None, timeout: Optional[float] = None,
                 enabled: Optional[bool] = None):
        self.command = shlex.split(command if command is not None else settings.formatter_command)
        self.timeout = timeout if timeout is not None else settings.formatter_timeout
        self.enabled = enabled if enabled is not None else settings.formatter_enabled
        self.logger = app_logger.bind(component="formatter")

    @staticmethod
    def parser_for(file_path: str) -> str:
        return PARSERS_BY_EXTENSION.get(Path(file_path).suffix.lower(), DEFAULT_PARSER)

    def format(self, text: str, file_path: str) -> str:
        """Return formatted text or raise :class:`FormatError`."""
        if not self.enabled:
            return text

        cmd = self.command + ["--parser", self.parser_for(file_path)]
        try:
            proc = subprocess.run(cmd, input=text, capture_output=True, text=True, timeout=self.timeout)
        except FileNotFoundError:
            raise FormatError(f"Formatter not found: {self.command[0]}")
        except subprocess.TimeoutExpired:
            raise FormatError(f"Formatter timed out after {self.timeout}s on {file_path}")

        if proc.returncode != 0:
            raise FormatError(proc.stderr.strip() or f"Formatter exited with code {proc.returncode}")
        return proc.stdout

    def format_or_original(self, text: str, file_path: str) -> Tuple[str, bool]:
        """Format ``text``; on failure return it unchanged and ``False``."""
        try:
            return self.format(text, file_path), True
        except FormatError as e:
            self.logger.warning(f"Formatting failed for {file_path}, keeping unformatted text: {e}")
            return text, False
