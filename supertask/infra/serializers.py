from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from supertask.domain.entities import (
    AutomationRule,
    ProductivityStats,
    Task,
    TaskTemplate,
    UserPreferences,
    UserProfile,
)
from supertask.domain.enums import (
    ActionType,
    AppTheme,
    RecurringInterval,
    SortOrder,
    TaskCategory,
    TaskPriority,
    TriggerType,
)

DECODE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def _dt_out(value: Optional[datetime]) -> str | None:
    return value.isoformat() if value else None


def _dt_in(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def _uuid_in(value: Any) -> UUID | None:
    if value is None:
        return None
    return UUID(str(value))


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": str(task.id),
        "title": task.title,
        "description": task.description,
        "isCompleted": task.is_completed,
        "priority": task.priority.value,
        "category": task.category.value,
        "dueDate": _dt_out(task.due_date),
        "createdAt": _dt_out(task.created_at),
        "completedAt": _dt_out(task.completed_at),
        "tags": list(task.tags),
        "automationRuleId": str(task.automation_rule_id) if task.automation_rule_id else None,
    }


def task_from_dict(data: dict[str, Any]) -> Task:
    return Task(
        id=UUID(str(data["id"])),
        title=str(data["title"]),
        description=str(data.get("description", "")),
        is_completed=bool(data.get("isCompleted", False)),
        priority=TaskPriority(data.get("priority", TaskPriority.MEDIUM.value)),
        category=TaskCategory(data.get("category", TaskCategory.PERSONAL.value)),
        due_date=_dt_in(data.get("dueDate")),
        created_at=datetime.fromisoformat(data["createdAt"]),
        completed_at=_dt_in(data.get("completedAt")),
        tags=tuple(str(tag) for tag in data.get("tags") or ()),
        automation_rule_id=_uuid_in(data.get("automationRuleId")),
    )


def rule_to_dict(rule: AutomationRule) -> dict[str, Any]:
    return {
        "id": str(rule.id),
        "name": rule.name,
        "isActive": rule.is_active,
        "triggerType": rule.trigger_type.value,
        "actionType": rule.action_type.value,
        "conditions": dict(rule.conditions),
        "createdAt": _dt_out(rule.created_at),
    }


def rule_from_dict(data: dict[str, Any]) -> AutomationRule:
    conditions = data.get("conditions") or {}
    return AutomationRule(
        id=UUID(str(data["id"])),
        name=str(data["name"]),
        is_active=bool(data.get("isActive", True)),
        trigger_type=TriggerType(data["triggerType"]),
        action_type=ActionType(data["actionType"]),
        conditions={str(k): str(v) for k, v in conditions.items()},
        created_at=datetime.fromisoformat(data["createdAt"]),
    )


def template_to_dict(template: TaskTemplate) -> dict[str, Any]:
    return {
        "id": str(template.id),
        "name": template.name,
        "templateTitle": template.template_title,
        "templateDescription": template.template_description,
        "defaultPriority": template.default_priority.value,
        "defaultCategory": template.default_category.value,
        "defaultTags": list(template.default_tags),
        "isRecurring": template.is_recurring,
        "recurringInterval": template.recurring_interval.value if template.recurring_interval else None,
    }


def template_from_dict(data: dict[str, Any]) -> TaskTemplate:
    interval = data.get("recurringInterval")
    return TaskTemplate(
        id=UUID(str(data["id"])),
        name=str(data["name"]),
        template_title=str(data["templateTitle"]),
        template_description=str(data.get("templateDescription", "")),
        default_priority=TaskPriority(data["defaultPriority"]),
        default_category=TaskCategory(data["defaultCategory"]),
        default_tags=tuple(str(tag) for tag in data.get("defaultTags") or ()),
        is_recurring=bool(data.get("isRecurring", False)),
        recurring_interval=RecurringInterval(interval) if interval else None,
    )


def stats_to_dict(stats: ProductivityStats) -> dict[str, Any]:
    return {
        "totalTasksCreated": stats.total_tasks_created,
        "totalTasksCompleted": stats.total_tasks_completed,
        "currentStreak": stats.current_streak,
        "longestStreak": stats.longest_streak,
        "completionByCategory": dict(stats.completion_by_category),
        "completionByPriority": dict(stats.completion_by_priority),
        "averageCompletionTime": stats.average_completion_time,
    }


def stats_from_dict(data: dict[str, Any]) -> ProductivityStats:
    return ProductivityStats(
        total_tasks_created=int(data.get("totalTasksCreated", 0)),
        total_tasks_completed=int(data.get("totalTasksCompleted", 0)),
        current_streak=int(data.get("currentStreak", 0)),
        longest_streak=int(data.get("longestStreak", 0)),
        completion_by_category={str(k): int(v) for k, v in (data.get("completionByCategory") or {}).items()},
        completion_by_priority={str(k): int(v) for k, v in (data.get("completionByPriority") or {}).items()},
        average_completion_time=float(data.get("averageCompletionTime", 0.0)),
    )


def preferences_to_dict(prefs: UserPreferences) -> dict[str, Any]:
    return {
        "notificationsEnabled": prefs.notifications_enabled,
        "defaultTaskPriority": prefs.default_task_priority.value,
        "defaultTaskCategory": prefs.default_task_category.value,
        "theme": prefs.theme.value,
        "soundEnabled": prefs.sound_enabled,
        "showCompletedTasks": prefs.show_completed_tasks,
        "sortOrder": prefs.sort_order.value,
    }


def preferences_from_dict(data: dict[str, Any]) -> UserPreferences:
    defaults = UserPreferences()
    return UserPreferences(
        notifications_enabled=bool(data.get("notificationsEnabled", defaults.notifications_enabled)),
        default_task_priority=TaskPriority(data.get("defaultTaskPriority", defaults.default_task_priority)),
        default_task_category=TaskCategory(data.get("defaultTaskCategory", defaults.default_task_category)),
        theme=AppTheme(data.get("theme", defaults.theme)),
        sound_enabled=bool(data.get("soundEnabled", defaults.sound_enabled)),
        show_completed_tasks=bool(data.get("showCompletedTasks", defaults.show_completed_tasks)),
        sort_order=SortOrder(data.get("sortOrder", defaults.sort_order)),
    )


def profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    return {
        "userId": str(profile.user_id),
        "username": profile.username,
        "email": profile.email,
        "profileCreatedAt": _dt_out(profile.profile_created_at),
        "preferences": preferences_to_dict(profile.preferences),
        "stats": stats_to_dict(profile.stats),
    }


def profile_from_dict(data: dict[str, Any]) -> UserProfile:
    return UserProfile(
        user_id=UUID(str(data["userId"])),
        username=str(data.get("username", "User")),
        email=data.get("email"),
        profile_created_at=datetime.fromisoformat(data["profileCreatedAt"]),
        preferences=preferences_from_dict(data.get("preferences") or {}),
        stats=stats_from_dict(data.get("stats") or {}),
    )
