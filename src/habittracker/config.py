"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitTracker"
    DB_FILENAME = "habittracker.db"
    ENV_PREFIX = "HABITTRACKER_"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("HABITTRACKER_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITTRACKER_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITTRACKER_DATABASE_URL", self._build_sqlite_url())
        self.TIMEZONE = os.getenv("HABITTRACKER_TIMEZONE") or None
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HABITTRACKER_SECRET_KEY must be set in non-dev mode.")
        self._zone = self._resolve_zone(self.TIMEZONE)

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITTRACKER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _resolve_zone(name: str | None) -> ZoneInfo | None:
        if name is None:
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"HABITTRACKER_TIMEZONE is not a known timezone: {name!r}") from exc

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.is_sqlite:
            engine_options["connect_args"] = {"check_same_thread": False}
        else:
            engine_options["pool_pre_ping"] = True
        return engine_options

    def local_now(self) -> datetime:
        """Current wall-clock time under the configured timezone policy.

        With ``HABITTRACKER_TIMEZONE`` unset the server's local time is used.
        """

        if self._zone is None:
            return datetime.now()
        return datetime.now(self._zone).replace(tzinfo=None)

    def local_today(self) -> date:
        return self.local_now().date()


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False

