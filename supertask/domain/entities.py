from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional
from uuid import UUID, uuid4

from .enums import (
    ActionType,
    AppTheme,
    RecurringInterval,
    SortOrder,
    TaskCategory,
    TaskPriority,
    TriggerType,
)


@dataclass(frozen=True)
class Task:
    title: str
    description: str = ""
    is_completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.PERSONAL
    due_date: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    tags: tuple[str, ...] = ()
    automation_rule_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self.due_date is None or self.is_completed:
            return False
        return self.due_date < (now or datetime.now())


@dataclass(frozen=True)
class AutomationRule:
    name: str
    trigger_type: TriggerType
    action_type: ActionType
    conditions: Mapping[str, str] = field(default_factory=dict)
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", MappingProxyType(dict(self.conditions or {})))


@dataclass(frozen=True)
class TaskTemplate:
    name: str
    template_title: str
    template_description: str = ""
    default_priority: TaskPriority = TaskPriority.MEDIUM
    default_category: TaskCategory = TaskCategory.PERSONAL
    default_tags: tuple[str, ...] = ()
    is_recurring: bool = False
    recurring_interval: RecurringInterval | None = None
    id: UUID = field(default_factory=uuid4)

    def create_task(self, now: datetime | None = None) -> Task:
        return Task(
            title=self.template_title,
            description=self.template_description,
            priority=self.default_priority,
            category=self.default_category,
            tags=tuple(self.default_tags),
            created_at=now or datetime.now(),
        )


@dataclass(frozen=True)
class ProductivityStats:
    total_tasks_created: int = 0
    total_tasks_completed: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    completion_by_category: Mapping[str, int] = field(default_factory=dict)
    completion_by_priority: Mapping[str, int] = field(default_factory=dict)
    average_completion_time: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "completion_by_category", MappingProxyType(dict(self.completion_by_category)))
        object.__setattr__(self, "completion_by_priority", MappingProxyType(dict(self.completion_by_priority)))

    @property
    def completion_rate(self) -> float:
        if self.total_tasks_created <= 0:
            return 0.0
        return self.total_tasks_completed / self.total_tasks_created


@dataclass(frozen=True)
class UserPreferences:
    notifications_enabled: bool = True
    default_task_priority: TaskPriority = TaskPriority.MEDIUM
    default_task_category: TaskCategory = TaskCategory.PERSONAL
    theme: AppTheme = AppTheme.SYSTEM
    sound_enabled: bool = True
    show_completed_tasks: bool = True
    sort_order: SortOrder = SortOrder.DUE_DATE


@dataclass(frozen=True)
class UserProfile:
    username: str = "User"
    email: str | None = None
    profile_created_at: datetime = field(default_factory=datetime.now)
    preferences: UserPreferences = field(default_factory=UserPreferences)
    stats: ProductivityStats = field(default_factory=ProductivityStats)
    user_id: UUID = field(default_factory=uuid4)
