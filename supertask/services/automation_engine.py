"""Automation rule evaluation.

The evaluator is driven from two places: the task store's change channel
(data-driven triggers) and the automation timer (clock-driven triggers). It
keeps no firing history, so a rule whose condition keeps holding fires again
on every pass.

Actions may change the task store. Changes made during a pass are not
evaluated re-entrantly; instead a follow-up data-trigger pass runs on the new
snapshot once the pass ends, up to MAX_CASCADE_PASSES times.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable

from supertask.config import SETTINGS
from supertask.domain.entities import AutomationRule, Task
from supertask.domain.enums import TaskCategory, TaskPriority
from supertask.domain.rules import (
    Action,
    CategoryTrigger,
    ChangeCategoryAction,
    CreateTaskAction,
    DayOfWeekTrigger,
    MarkCompleteAction,
    SendNotificationAction,
    TaskCompletionTrigger,
    TimeOfDayTrigger,
    Trigger,
    parse_action,
    parse_trigger,
)

from .notifications import NotificationDispatcher
from .rule_service import RuleService
from .task_service import TaskService

logger = logging.getLogger(__name__)

MAX_CASCADE_PASSES = 5


class RuleEvaluator:
    def __init__(
        self,
        task_service: TaskService,
        rule_service: RuleService,
        notifier: NotificationDispatcher,
        *,
        app_name: str = SETTINGS.app_name,
        completion_window_sec: float = SETTINGS.completion_window_sec,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._tasks = task_service
        self._rules = rule_service
        self._notifier = notifier
        self._app_name = app_name
        self._completion_window = float(completion_window_sec)
        self._clock = clock
        self._evaluating = False
        self._changed_during_pass = False
        self._unsubscribe = task_service.subscribe(self.on_tasks_changed)

    def close(self) -> None:
        self._unsubscribe()

    def on_tasks_changed(self, tasks: tuple[Task, ...]) -> list[AutomationRule]:
        if self._evaluating:
            logger.debug("Task change raised by an automation action; queueing a follow-up pass")
            self._changed_during_pass = True
            return []
        return self._run(self._clock(), tasks, time_based=False)

    def on_timer_tick(self, now: datetime | None = None) -> list[AutomationRule]:
        if self._evaluating:
            return []
        return self._run(now or self._clock(), self._tasks.tasks, time_based=True)

    def evaluate(
        self, now: datetime | None = None, tasks: tuple[Task, ...] | None = None
    ) -> list[AutomationRule]:
        if self._evaluating:
            return []
        snapshot = self._tasks.tasks if tasks is None else tasks
        return self._run(now or self._clock(), snapshot, time_based=None)

    def rule_matches(self, rule: AutomationRule, now: datetime, tasks: tuple[Task, ...]) -> bool:
        trigger = parse_trigger(rule, completion_window=self._completion_window)
        if trigger is None:
            logger.debug("Rule %r has unusable trigger conditions %s", rule.name, dict(rule.conditions))
            return False
        return _trigger_holds(trigger, now, tasks)

    def execute(self, rule: AutomationRule) -> None:
        action = parse_action(rule, app_name=self._app_name)
        if action is None:
            logger.debug("Rule %r has unusable action conditions %s", rule.name, dict(rule.conditions))
            return
        self._apply(rule, action)

    def _run(
        self, now: datetime, tasks: tuple[Task, ...], *, time_based: bool | None
    ) -> list[AutomationRule]:
        fired = self._pass(now, tasks, time_based)
        cascades = 0
        while self._changed_during_pass:
            if cascades >= MAX_CASCADE_PASSES:
                logger.warning(
                    "Automation cascade stopped after %s follow-up passes; rules keep changing tasks",
                    cascades,
                )
                self._changed_during_pass = False
                break
            cascades += 1
            fired.extend(self._pass(now, self._tasks.tasks, time_based=False))
        return fired

    def _pass(
        self, now: datetime, tasks: tuple[Task, ...], time_based: bool | None
    ) -> list[AutomationRule]:
        fired: list[AutomationRule] = []
        self._changed_during_pass = False
        self._evaluating = True
        try:
            for rule in _select(self._rules.active_rules(), time_based):
                if not self.rule_matches(rule, now, tasks):
                    continue
                logger.info("Automation rule %r fired (%s)", rule.name, rule.trigger_type)
                fired.append(rule)
                try:
                    self.execute(rule)
                except Exception:  # noqa: BLE001
                    logger.exception("Automation rule %r failed", rule.name)
        finally:
            self._evaluating = False
        return fired

    def _apply(self, rule: AutomationRule, action: Action) -> None:
        if isinstance(action, CreateTaskAction):
            self._tasks.add_task(
                Task(
                    title=action.title,
                    description=action.description,
                    priority=TaskPriority.MEDIUM,
                    category=TaskCategory.PERSONAL,
                    automation_rule_id=rule.id,
                    created_at=self._clock(),
                )
            )
        elif isinstance(action, SendNotificationAction):
            self._notifier.notify(str(rule.id), action.title, action.body)
        elif isinstance(action, MarkCompleteAction):
            targets = [
                t for t in self._tasks.tasks if t.category == action.category and not t.is_completed
            ]
            for task in targets:
                self._tasks.toggle_task_completion(task, now=self._clock())
        elif isinstance(action, ChangeCategoryAction):
            targets = [t for t in self._tasks.tasks if t.category == action.from_category]
            for task in targets:
                self._tasks.update_task(replace(task, category=action.to_category))


def _select(rules: Iterable[AutomationRule], time_based: bool | None) -> list[AutomationRule]:
    if time_based is None:
        return list(rules)
    return [r for r in rules if r.trigger_type.is_time_based == time_based]


def _trigger_holds(trigger: Trigger, now: datetime, tasks: tuple[Task, ...]) -> bool:
    if isinstance(trigger, (TimeOfDayTrigger, DayOfWeekTrigger)):
        return trigger.matches(now)
    if isinstance(trigger, TaskCompletionTrigger):
        return trigger.matches(now, tasks)
    if isinstance(trigger, CategoryTrigger):
        return trigger.matches(tasks)
    return False
