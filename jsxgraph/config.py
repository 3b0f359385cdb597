from pathlib import Path
from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Marker Configuration
    marker_attribute: str = Field(default="data-fingerprint")
    marker_extensions: str = Field(default=".tsx,.jsx")
    graph_extensions: str = Field(default=".tsx,.ts,.jsx,.js")
    exclude_dirs: str = Field(default="node_modules,dist,build,.git")
    max_file_size: int = Field(default=10 * 1024 * 1024)

    # Project Configuration
    project_root: str = Field(default=".")
    graph_storage_path: str = Field(default="graph.json")
    fingerprint_index_path: str = Field(default="fingerprints.json")

    # Formatter Configuration
    formatter_enabled: bool = Field(default=True)
    formatter_command: str = Field(default="prettier")
    formatter_timeout: float = Field(default=30.0)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default="logs/app.log")

    @staticmethod
    def _split(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def marker_extensions_list(self) -> List[str]:
        """Get marker extensions as a list."""
        return self._split(self.marker_extensions)

    @property
    def graph_extensions_list(self) -> List[str]:
        """Get graph extensions as a list."""
        return self._split(self.graph_extensions)

    @property
    def exclude_dirs_list(self) -> List[str]:
        """Get excluded directory names as a list."""
        return self._split(self.exclude_dirs)

    @property
    def log_dir(self) -> Optional[Path]:
        """Get log directory path."""
        return Path(self.log_file).parent if self.log_file else None

    def ensure_directories(self):
        """Ensure necessary directories exist."""
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)


settings = Settings()
settings.ensure_directories()
