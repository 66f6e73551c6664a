"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .constants.currencies import DEFAULT_CURRENCY

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Track.it"
    DB_FILENAME = "trackit.db"
    LOG_FILENAME = "trackit.log"
    DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("TRACKIT_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("TRACKIT_DATABASE_URL", self._build_sqlite_url())
        self.DEFAULT_CURRENCY = os.getenv("TRACKIT_DEFAULT_CURRENCY", DEFAULT_CURRENCY)
        self.EXPORT_DIR = Path(
            os.getenv("TRACKIT_EXPORT_DIR", str(self.DATA_DIR / "exports"))
        ).expanduser()
        self.OPENAI_MODEL = os.getenv("TRACKIT_OPENAI_MODEL", self.DEFAULT_OPENAI_MODEL)
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

    def _resolve_data_dir(self, override: str | Path | None) -> Path:
        """Return the directory where the SQLite file, logs and exports live."""

        data_root = override if override is not None else os.getenv("TRACKIT_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        return {"connect_args": connect_args}

