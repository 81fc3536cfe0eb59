# src/daybook/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read from the environment at import time; get_settings() builds lazily.
- Components receive settings by injection (see cli/bootstrap.py).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAYBOOK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    # Formats contain "/" and "-" but never spaces or commas.
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path

    # ---- Storage ----
    data_dir: Path

    # ---- Dates ----
    date_formats: list[str]
    display_date_format: str

    # ---- Console ----
    confirm_delete: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "daybook").strip() or "daybook"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        data_dir = _env_path(_k("DATA_DIR"), Path("data"))
        log_dir = _env_path(_k("LOG_DIR"), Path(".local/daybook"))

        date_formats = _env_list(_k("DATE_FORMATS"), ["%Y-%m-%d", "%d/%m/%Y"])
        display_date_format = _env(_k("DISPLAY_DATE_FORMAT"), "%d/%m/%Y").strip() or "%d/%m/%Y"

        confirm_delete = _env_bool(_k("CONFIRM_DELETE"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            data_dir=data_dir,
            date_formats=date_formats,
            display_date_format=display_date_format,
            confirm_delete=confirm_delete,
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Cached settings; loads .env (without overriding real env vars) on first use."""
    global _settings
    if _settings is None:
        load_dotenv(override=False)
        _settings = Settings.from_env()
    return _settings


def reload_settings() -> Settings:
    global _settings
    _settings = None
    return get_settings()
