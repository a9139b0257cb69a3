from __future__ import annotations

from enum import StrEnum


class TaskPriority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
    TaskPriority.URGENT: 4,
}


class TaskCategory(StrEnum):
    PERSONAL = "Personal"
    WORK = "Work"
    HEALTH = "Health"
    SHOPPING = "Shopping"
    FINANCE = "Finance"
    EDUCATION = "Education"
    OTHER = "Other"


class TriggerType(StrEnum):
    TIME_OF_DAY = "Time of Day"
    DAY_OF_WEEK = "Day of Week"
    TASK_COMPLETION = "Task Completion"
    CATEGORY_BASED = "Category Based"

    @property
    def is_time_based(self) -> bool:
        return self in (TriggerType.TIME_OF_DAY, TriggerType.DAY_OF_WEEK)


class ActionType(StrEnum):
    CREATE_TASK = "Create Task"
    SEND_NOTIFICATION = "Send Notification"
    MARK_COMPLETE = "Mark Complete"
    CHANGE_CATEGORY = "Change Category"


class RecurringInterval(StrEnum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


class AppTheme(StrEnum):
    LIGHT = "Light"
    DARK = "Dark"
    SYSTEM = "System"


class SortOrder(StrEnum):
    DUE_DATE = "Due Date"
    PRIORITY = "Priority"
    CATEGORY = "Category"
    CREATED_DATE = "Created Date"
    ALPHABETICAL = "Alphabetical"
