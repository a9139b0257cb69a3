from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer

from supertask.config import SETTINGS

from .automation_engine import RuleEvaluator

logger = logging.getLogger(__name__)


class AutomationTimer(QObject):
    def __init__(self, evaluator: RuleEvaluator, interval_sec: int = SETTINGS.automation_interval_sec, parent=None):
        super().__init__(parent)
        self.evaluator = evaluator

        self.timer = QTimer(self)
        self.timer.setInterval(max(1, int(interval_sec)) * 1000)
        self.timer.timeout.connect(self._tick)

    def start(self) -> None:
        if not self.timer.isActive():
            self.timer.start()

    def stop(self) -> None:
        self.timer.stop()

    def is_active(self) -> bool:
        return self.timer.isActive()

    def _tick(self) -> None:
        fired = self.evaluator.on_timer_tick()
        logger.debug("Automation tick fired %s rules", len(fired))
