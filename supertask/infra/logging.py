from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from supertask.config import SETTINGS, PROJECT_ROOT, Settings

AUTOMATION_LOGGERS = (
    "supertask.services.automation_engine",
    "supertask.services.automation_timer",
)


def setup_logging(settings: Settings = SETTINGS) -> Path:
    log_dir = PROJECT_ROOT / settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "supertask.log"

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logging.basicConfig(
        level=settings.log_level.upper(),
        handlers=[file_handler, console_handler],
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    # rule evaluator and its timer follow AUTOMATION_LOG_LEVEL
    for name in AUTOMATION_LOGGERS:
        logging.getLogger(name).setLevel(settings.automation_log_level.upper())
    return log_file
