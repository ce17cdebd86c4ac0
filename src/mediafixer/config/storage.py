"""Database and local data directory configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import require_env_var

APP_DIR_NAME: Final[str] = "mediafixer"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
DEFAULT_TABLE_PREFIX: Final[str] = "wp_"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    http_cache_filename: str = HTTP_CACHE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.http_cache_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Connection to a WordPress database."""

    uri: str
    table_prefix: str = DEFAULT_TABLE_PREFIX


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("MEDIAFIXER_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config() -> DatabaseConfig:
    uri = require_env_var("DATABASE_URI")
    prefix = os.getenv("WP_TABLE_PREFIX", "").strip() or DEFAULT_TABLE_PREFIX
    return DatabaseConfig(uri=uri, table_prefix=prefix)
