from __future__ import annotations

from PySide6.QtWidgets import QApplication

from supertask.services.automation_timer import AutomationTimer


class FakeEvaluator:
    def __init__(self) -> None:
        self.ticks = 0

    def on_timer_tick(self, now=None) -> list:
        self.ticks += 1
        return []


def test_timer_interval_and_lifecycle(qt_app: QApplication) -> None:
    timer = AutomationTimer(FakeEvaluator(), interval_sec=60)

    assert timer.timer.interval() == 60_000
    assert timer.is_active() is False
    timer.start()
    timer.start()
    assert timer.is_active() is True
    timer.stop()
    assert timer.is_active() is False


def test_timeout_runs_evaluator(qt_app: QApplication) -> None:
    evaluator = FakeEvaluator()
    timer = AutomationTimer(evaluator)

    timer._tick()

    assert evaluator.ticks == 1
