from __future__ import annotations

from datetime import datetime

from supertask.domain.entities import AutomationRule
from supertask.domain.enums import ActionType, TaskCategory, TriggerType
from supertask.domain.rules import (
    CategoryTrigger,
    ChangeCategoryAction,
    DayOfWeekTrigger,
    MarkCompleteAction,
    SendNotificationAction,
    TaskCompletionTrigger,
    TimeOfDayTrigger,
    calendar_weekday,
    parse_action,
    parse_time,
    parse_trigger,
)


def _rule(trigger: TriggerType, action: ActionType, **conditions: str) -> AutomationRule:
    return AutomationRule(name="r", trigger_type=trigger, action_type=action, conditions=conditions)


def test_parse_time() -> None:
    assert parse_time("09:00") == (9, 0)
    assert parse_time("23:59") == (23, 59)
    assert parse_time("9") is None
    assert parse_time("09:00:00") is None
    assert parse_time("nine:00") is None
    assert parse_time(None) is None


def test_calendar_weekday_starts_on_sunday() -> None:
    assert calendar_weekday(datetime(2026, 10, 18)) == 1
    assert calendar_weekday(datetime(2026, 10, 19)) == 2
    assert calendar_weekday(datetime(2026, 10, 17)) == 7


def test_parse_triggers() -> None:
    assert parse_trigger(_rule(TriggerType.TIME_OF_DAY, ActionType.SEND_NOTIFICATION, time="07:45")) == (
        TimeOfDayTrigger(7, 45)
    )
    assert parse_trigger(_rule(TriggerType.DAY_OF_WEEK, ActionType.SEND_NOTIFICATION, day="3")) == (
        DayOfWeekTrigger(3)
    )
    assert parse_trigger(
        _rule(TriggerType.TASK_COMPLETION, ActionType.SEND_NOTIFICATION), completion_window=30
    ) == TaskCompletionTrigger(30)
    assert parse_trigger(_rule(TriggerType.CATEGORY_BASED, ActionType.SEND_NOTIFICATION, category="Health")) == (
        CategoryTrigger(TaskCategory.HEALTH)
    )
    assert parse_trigger(_rule(TriggerType.CATEGORY_BASED, ActionType.SEND_NOTIFICATION, category="health")) is None


def test_parse_actions() -> None:
    notify = parse_action(_rule(TriggerType.TASK_COMPLETION, ActionType.SEND_NOTIFICATION), app_name="App")
    assert notify == SendNotificationAction(title="App", body="Automation rule triggered: r")

    assert parse_action(
        _rule(TriggerType.TASK_COMPLETION, ActionType.MARK_COMPLETE, targetCategory="Finance")
    ) == MarkCompleteAction(TaskCategory.FINANCE)
    assert parse_action(_rule(TriggerType.TASK_COMPLETION, ActionType.MARK_COMPLETE)) is None

    assert parse_action(
        _rule(TriggerType.TASK_COMPLETION, ActionType.CHANGE_CATEGORY, fromCategory="Work", toCategory="Other")
    ) == ChangeCategoryAction(TaskCategory.WORK, TaskCategory.OTHER)
    assert parse_action(
        _rule(TriggerType.TASK_COMPLETION, ActionType.CHANGE_CATEGORY, fromCategory="Work", toCategory="Later")
    ) is None
