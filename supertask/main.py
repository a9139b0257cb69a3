from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMessageBox
from sqlalchemy.orm import sessionmaker

from supertask.config import SETTINGS
from supertask.infra.db import SessionLocal, init_db
from supertask.infra.logging import setup_logging
from supertask.infra.repository import KeyValueRepository
from supertask.services.automation_engine import RuleEvaluator
from supertask.services.automation_timer import AutomationTimer
from supertask.services.notifications import LoggingNotifier, NotificationDispatcher
from supertask.services.rule_service import RuleService
from supertask.services.settings_service import SettingsService
from supertask.services.task_service import TaskService
from supertask.ui.tray import TrayNotifier, create_tray_icon

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FILE = "supertask-export.json"


@dataclass
class Services:
    repo: KeyValueRepository
    tasks: TaskService
    rules: RuleService
    evaluator: RuleEvaluator
    settings: SettingsService


def build_services(
    session_factory: sessionmaker = SessionLocal,
    notifier: NotificationDispatcher | None = None,
) -> Services:
    notifier = notifier or LoggingNotifier()
    repo = KeyValueRepository(session_factory)
    tasks = TaskService(repo)
    rules = RuleService(repo)
    evaluator = RuleEvaluator(tasks, rules, notifier)
    settings = SettingsService(repo, tasks, rules, notifier)
    return Services(repo=repo, tasks=tasks, rules=rules, evaluator=evaluator, settings=settings)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="supertask")
    parser.add_argument(
        "--export",
        metavar="PATH",
        nargs="?",
        const=SETTINGS.export_path or DEFAULT_EXPORT_FILE,
        default=None,
        help="write a JSON export of all stored data and exit (default path: EXPORT_PATH)",
    )
    return parser.parse_args(argv)


def export_to(services: Services, path: str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(services.settings.export_data(), encoding="utf-8")
    logger.info("Exported data to %s", target)
    return target


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging()
    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Database initialisation failed")
        if args.export is not None:
            sys.exit(1)
        app = QApplication(sys.argv)
        QMessageBox.critical(None, "DB error", str(exc))
        return

    if args.export is not None:
        export_to(build_services(), args.export)
        return

    app = QApplication(sys.argv)
    app.setApplicationName(SETTINGS.app_name)
    app.setQuitOnLastWindowClosed(False)

    notifier = TrayNotifier(create_tray_icon(app))
    services = build_services(notifier=notifier)

    if services.settings.profile.preferences.notifications_enabled:
        notifier.request_permission()

    timer = AutomationTimer(services.evaluator)
    timer.start()
    app.aboutToQuit.connect(timer.stop)
    app.aboutToQuit.connect(services.evaluator.close)

    logger.info(
        "%s running: %s tasks, %s rules (%s active)",
        SETTINGS.app_name,
        len(services.tasks.tasks),
        len(services.rules.rules),
        len(services.rules.active_rules()),
    )
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
