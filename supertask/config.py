from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    automation_log_level: str = "INFO"
    app_name: str = "Task conGenius"
    automation_interval_sec: int = 60
    completion_window_sec: int = 60
    export_path: str | None = None


load_env()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip() or f"sqlite:///{PROJECT_ROOT / 'supertask.sqlite3'}"

SETTINGS = Settings(
    database_url=DATABASE_URL,
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    automation_log_level=os.getenv("AUTOMATION_LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO")),
    app_name=os.getenv("APP_NAME", "Task conGenius"),
    automation_interval_sec=int(os.getenv("AUTOMATION_INTERVAL_SEC", "60")),
    completion_window_sec=int(os.getenv("COMPLETION_WINDOW_SEC", "60")),
    export_path=os.getenv("EXPORT_PATH", "").strip() or None,
)
