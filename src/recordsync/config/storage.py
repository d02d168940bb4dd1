"""Where the local record database lives."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "recordsync"
DEFAULT_DB_FILENAME: Final[str] = "recordsync.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory holding the SQLite database file."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def database_path(self, *, ensure: bool = True) -> Path:
        directory = self.data_dir.expanduser().resolve()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / self.database_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def platform_data_dir() -> Path:
    """Per-user data directory: ``%LOCALAPPDATA%`` on Windows, XDG elsewhere."""

    if os.name == "nt":
        root = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        root = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(root) / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    override = os.getenv("RECORDSYNC_DATA_DIR")
    return StorageConfig(data_dir=Path(override) if override else platform_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file inside the data directory."""

    uri = os.getenv("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri)
    path = (storage or get_storage_config()).database_path()
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{path}")
