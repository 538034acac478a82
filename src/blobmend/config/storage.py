"""Work directory layout and database configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "blobmend"
DEFAULT_DB_FILENAME: Final[str] = "blobmend.db"
RECONCILIATION_LOG_DIR: Final[tuple[str, ...]] = ("log", "blobstore")
BLOBS_DIR: Final[str] = "blobs"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    work_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_work_dir(self) -> Path:
        return self.work_dir.expanduser().resolve()

    def ensure_work_dir(self) -> Path:
        work_dir = self.resolve_work_dir()
        work_dir.mkdir(parents=True, exist_ok=True)
        return work_dir

    def reconciliation_log_root(self) -> Path:
        """``<work dir>/log/blobstore``; one sub-directory per blob store."""

        return self.resolve_work_dir().joinpath(*RECONCILIATION_LOG_DIR)

    def blobs_root(self) -> Path:
        return self.resolve_work_dir() / BLOBS_DIR

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_work_dir() if ensure else self.resolve_work_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _default_work_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("BLOBMEND_WORK_DIR")
    work_dir = Path(env_dir) if env_dir else _default_work_dir()
    return StorageConfig(work_dir=work_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=storage_config.database_uri())
