"""Watch configuration loaded from environment variables."""
import os
from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Watch configuration loaded from environment variables.

    Attributes:
        pattern: Glob pattern selecting the files to report on.
        root: Directory to watch, empty for the current directory.
        recursive: Watch subdirectories.
        threshold_ms: Window after creation in which a file counts as new.
        modify_threshold_ms: Window after modification in which a file
            counts as modified, defaults to threshold_ms.
        strict_delete_dedup: Report a delete only once per absence.
        json_logs: Render logs as JSON lines instead of console output.
        debug: Enable debug-level logging.
    """

    model_config = SettingsConfigDict(
        env_prefix="GLOBWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    pattern: str = "**/*"
    root: str = ""
    recursive: bool = True
    threshold_ms: float = 150.0
    modify_threshold_ms: float | None = None
    strict_delete_dedup: bool = False
    json_logs: bool = True
    debug: bool = False

    @computed_field
    @property
    def root_path(self) -> Path:
        """Resolve the watch root.

        Returns:
            Absolute directory to watch.
        """
        return Path(self.root.strip() or os.getcwd()).absolute()
