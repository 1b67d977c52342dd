"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, falling back on bad input."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Study Habit Tracker"
    DB_FILENAME = "studyhabits.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("STUDYHABITS_DEV_MODE", default=True)
        self.POLL_SECONDS = _env_float("STUDYHABITS_POLL_SECONDS", default=2.0)
        self.DATABASE_URL = os.getenv("STUDYHABITS_DATABASE_URL", self._build_sqlite_url())

    def _resolve_data_dir(self, data_dir: Path | str | None) -> Path:
        """Return the directory where the shared SQLite file and logs live."""

        data_root = data_dir if data_dir is not None else os.getenv("STUDYHABITS_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = Path(self.DATA_DIR) / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.is_sqlite():
            # The poller reads from the scheduler thread.
            engine_options["connect_args"] = {"check_same_thread": False, "timeout": 30}
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration pointed at a throwaway data directory."""

    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Path | str) -> None:
        super().__init__(data_dir)
        # Never inherit a shared database URL from the environment.
        self.DATABASE_URL = self._build_sqlite_url()
        self.DEV_MODE = False
