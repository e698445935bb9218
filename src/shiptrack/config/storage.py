"""Where the shipment store and the HTTP response cache live."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "shiptrack"
DEFAULT_DB_FILENAME: Final[str] = "shiptrack.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def _data_file(self, filename: str) -> Path:
        directory = self.data_dir.expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def database_path(self) -> Path:
        return self._data_file(DEFAULT_DB_FILENAME)

    def http_cache_path(self) -> Path:
        return self._data_file(HTTP_CACHE_FILENAME)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _xdg_data_home() -> Path:
    base = (os.getenv("XDG_DATA_HOME") or "").strip()
    return Path(base) if base else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    """Data directory from ``SHIPTRACK_DATA_DIR``, else ``$XDG_DATA_HOME/shiptrack``."""

    override = (os.getenv("SHIPTRACK_DATA_DIR") or "").strip()
    return StorageConfig(data_dir=Path(override) if override else _xdg_data_home() / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` if set, else a SQLite file in the data directory."""

    uri = (os.getenv("DATABASE_URI") or "").strip()
    if uri:
        return DatabaseConfig(uri=uri)
    database_path = (storage or get_storage_config()).database_path()
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{database_path}")
