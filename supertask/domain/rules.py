"""Typed views over the string conditions stored on an automation rule.

Rules persist their parameters as a flat ``str -> str`` mapping. The parsers
here turn that mapping into one small value object per trigger/action kind.
A parser returns ``None`` when a required parameter is missing or cannot be
parsed; callers treat that as "nothing to do".
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Union

from .entities import AutomationRule, Task
from .enums import ActionType, TaskCategory, TriggerType

TIME = "time"
DAY = "day"
CATEGORY = "category"
TASK_TITLE = "taskTitle"
TASK_DESCRIPTION = "taskDescription"
NOTIFICATION_TITLE = "notificationTitle"
NOTIFICATION_BODY = "notificationBody"
TARGET_CATEGORY = "targetCategory"
FROM_CATEGORY = "fromCategory"
TO_CATEGORY = "toCategory"

DEFAULT_TASK_TITLE = "Automated Task"


@dataclass(frozen=True)
class TimeOfDayTrigger:
    hour: int
    minute: int

    def matches(self, now: datetime) -> bool:
        return now.hour == self.hour and now.minute == self.minute


@dataclass(frozen=True)
class DayOfWeekTrigger:
    weekday: int  # 1=Sunday .. 7=Saturday

    def matches(self, now: datetime) -> bool:
        return calendar_weekday(now) == self.weekday


@dataclass(frozen=True)
class TaskCompletionTrigger:
    window_seconds: float = 60.0

    def matches(self, now: datetime, tasks: tuple[Task, ...]) -> bool:
        for task in tasks:
            if task.completed_at is None:
                continue
            if (now - task.completed_at).total_seconds() < self.window_seconds:
                return True
        return False


@dataclass(frozen=True)
class CategoryTrigger:
    category: TaskCategory

    def matches(self, tasks: tuple[Task, ...]) -> bool:
        return any(t.category == self.category and not t.is_completed for t in tasks)


@dataclass(frozen=True)
class CreateTaskAction:
    title: str
    description: str


@dataclass(frozen=True)
class SendNotificationAction:
    title: str
    body: str


@dataclass(frozen=True)
class MarkCompleteAction:
    category: TaskCategory


@dataclass(frozen=True)
class ChangeCategoryAction:
    from_category: TaskCategory
    to_category: TaskCategory


Trigger = Union[TimeOfDayTrigger, DayOfWeekTrigger, TaskCompletionTrigger, CategoryTrigger]
Action = Union[CreateTaskAction, SendNotificationAction, MarkCompleteAction, ChangeCategoryAction]


def calendar_weekday(moment: datetime) -> int:
    return moment.isoweekday() % 7 + 1


def parse_time(raw: str | None) -> tuple[int, int] | None:
    if not raw:
        return None
    parts = raw.split(":")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def parse_category(raw: str | None) -> TaskCategory | None:
    if raw is None:
        return None
    try:
        return TaskCategory(raw)
    except ValueError:
        return None


def parse_trigger(rule: AutomationRule, completion_window: float = 60.0) -> Trigger | None:
    conditions: Mapping[str, str] = rule.conditions or {}
    if rule.trigger_type == TriggerType.TIME_OF_DAY:
        parsed = parse_time(conditions.get(TIME))
        return TimeOfDayTrigger(*parsed) if parsed else None
    if rule.trigger_type == TriggerType.DAY_OF_WEEK:
        weekday = parse_int(conditions.get(DAY))
        return DayOfWeekTrigger(weekday) if weekday is not None else None
    if rule.trigger_type == TriggerType.TASK_COMPLETION:
        return TaskCompletionTrigger(window_seconds=completion_window)
    if rule.trigger_type == TriggerType.CATEGORY_BASED:
        category = parse_category(conditions.get(CATEGORY))
        return CategoryTrigger(category) if category else None
    return None


def parse_action(rule: AutomationRule, app_name: str = "Task conGenius") -> Action | None:
    conditions: Mapping[str, str] = rule.conditions or {}
    if rule.action_type == ActionType.CREATE_TASK:
        return CreateTaskAction(
            title=conditions.get(TASK_TITLE, DEFAULT_TASK_TITLE),
            description=conditions.get(
                TASK_DESCRIPTION, f"Created by automation rule: {rule.name}"
            ),
        )
    if rule.action_type == ActionType.SEND_NOTIFICATION:
        return SendNotificationAction(
            title=conditions.get(NOTIFICATION_TITLE, app_name),
            body=conditions.get(NOTIFICATION_BODY, f"Automation rule triggered: {rule.name}"),
        )
    if rule.action_type == ActionType.MARK_COMPLETE:
        category = parse_category(conditions.get(TARGET_CATEGORY))
        return MarkCompleteAction(category) if category else None
    if rule.action_type == ActionType.CHANGE_CATEGORY:
        source = parse_category(conditions.get(FROM_CATEGORY))
        target = parse_category(conditions.get(TO_CATEGORY))
        if source is None or target is None:
            return None
        return ChangeCategoryAction(from_category=source, to_category=target)
    return None
