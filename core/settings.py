"""MeuDia configuration: data locations, planner rules and logging."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import logging
import os
import sys


APP_NAME = "MeuDia"
DATA_DIR_ENV = "MEUDIA_DATA_DIR"


def _platform_data_root(platform_id: str, environ: Mapping[str, str], home_dir: Path) -> Path:
    if platform_id.startswith("win"):
        return Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    if platform_id == "darwin":
        return home_dir / "Library" / "Application Support"
    return Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")


def get_default_data_dir(
    app_name: str = APP_NAME,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Folder holding ``planner.db`` and ``logs/``.

    ``MEUDIA_DATA_DIR`` wins; otherwise the per-user data folder of the platform.
    """

    environ = os.environ if env is None else env
    override = environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    folder = app_name.strip().replace("/", "-").replace("\\", "-") or APP_NAME
    root = _platform_data_root((platform or sys.platform).lower(), environ, Path(home or Path.home()))
    return root.expanduser() / folder


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

DB_PATH = DATA_DIR / "planner.db"
LOG_PATH = LOG_DIR / "planner.log"


@dataclass(frozen=True)
class PlannerSettings:
    # Civil day boundary: fixed UTC-3, no daylight saving.
    utc_offset_hours: int = -3
    tasks_prefix: str = "planner/tasks/"
    notes_prefix: str = "planner/notes/"
    items_key: str = "planner/items"
    default_snooze_days: int = 1
    window_days: int = 7
    max_title_length: int = 120
    # 0 keeps every day bucket forever.
    retention_days: int = 0
    recent_days_back: int = 3


PLANNER = PlannerSettings()


@dataclass(frozen=True)
class LogSettings:
    level: int = logging.INFO
    max_bytes: int = 1_000_000
    backup_count: int = 3
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


LOGGING = LogSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR_ENV",
    "DATA_DIR",
    "LOG_DIR",
    "DB_PATH",
    "LOG_PATH",
    "PLANNER",
    "LOGGING",
    "PlannerSettings",
    "LogSettings",
    "get_default_data_dir",
]
