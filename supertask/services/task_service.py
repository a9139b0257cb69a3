from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from supertask.domain.entities import Task, TaskTemplate
from supertask.domain.enums import RecurringInterval, SortOrder, TaskCategory, TaskPriority
from supertask.domain.filters import TaskFilters
from supertask.infra.repository import TASKS_KEY, TEMPLATES_KEY, KeyValueRepository
from supertask.infra.serializers import (
    DECODE_ERRORS,
    task_from_dict,
    task_to_dict,
    template_from_dict,
    template_to_dict,
)

from .observable import Observable

logger = logging.getLogger(__name__)

TaskSnapshot = tuple[Task, ...]
TemplateSnapshot = tuple[TaskTemplate, ...]


class TaskService:
    def __init__(self, repo: KeyValueRepository) -> None:
        self._repo = repo
        self._tasks: TaskSnapshot = ()
        self._templates: TemplateSnapshot = ()
        self._task_changes: Observable[TaskSnapshot] = Observable()
        self._template_changes: Observable[TemplateSnapshot] = Observable()
        self._load_tasks()
        self._load_templates()

    @property
    def tasks(self) -> TaskSnapshot:
        return self._tasks

    @property
    def templates(self) -> TemplateSnapshot:
        return self._templates

    def subscribe(self, listener: Callable[[TaskSnapshot], None]) -> Callable[[], None]:
        return self._task_changes.subscribe(listener)

    def subscribe_templates(self, listener: Callable[[TemplateSnapshot], None]) -> Callable[[], None]:
        return self._template_changes.subscribe(listener)

    def get_task(self, task_id) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def add_task(self, task: Task) -> Task:
        self._set_tasks(self._tasks + (task,))
        return task

    def update_task(self, task: Task) -> Task | None:
        if self.get_task(task.id) is None:
            return None
        self._set_tasks(tuple(task if t.id == task.id else t for t in self._tasks))
        return task

    def delete_task(self, task: Task) -> None:
        remaining = tuple(t for t in self._tasks if t.id != task.id)
        self._set_tasks(remaining)

    def toggle_task_completion(self, task: Task, now: datetime | None = None) -> Task | None:
        current = self.get_task(task.id)
        if current is None:
            return None
        completed = not current.is_completed
        toggled = replace(
            current,
            is_completed=completed,
            completed_at=(now or datetime.now()) if completed else None,
        )
        self._set_tasks(tuple(toggled if t.id == task.id else t for t in self._tasks))
        return toggled

    def delete_completed_tasks(self) -> int:
        remaining = tuple(t for t in self._tasks if not t.is_completed)
        removed = len(self._tasks) - len(remaining)
        self._set_tasks(remaining)
        if removed:
            logger.info("Deleted %s completed tasks", removed)
        return removed

    def add_template(self, template: TaskTemplate) -> TaskTemplate:
        self._set_templates(self._templates + (template,))
        return template

    def delete_template(self, template: TaskTemplate) -> None:
        self._set_templates(tuple(t for t in self._templates if t.id != template.id))

    def create_task_from_template(self, template: TaskTemplate) -> Task:
        return self.add_task(template.create_task())

    def filtered_tasks(
        self, category: Optional[TaskCategory] = None, show_completed: bool = True
    ) -> list[Task]:
        filtered = list(self._tasks)
        if category is not None:
            filtered = [t for t in filtered if t.category == category]
        if not show_completed:
            filtered = [t for t in filtered if not t.is_completed]
        return filtered

    def query(self, filters: TaskFilters, sort_order: SortOrder = SortOrder.DUE_DATE) -> list[Task]:
        result = self.filtered_tasks(filters.category, filters.show_completed)
        if filters.search:
            result = [t for t in result if _matches_search(t, filters.search)]
        return self.sorted_tasks(result, sort_order)

    @staticmethod
    def sorted_tasks(tasks: Iterable[Task], sort_order: SortOrder) -> list[Task]:
        items = list(tasks)
        if sort_order == SortOrder.DUE_DATE:
            return sorted(items, key=lambda t: (t.due_date is None, t.due_date or datetime.min))
        if sort_order == SortOrder.PRIORITY:
            return sorted(items, key=lambda t: -t.priority.rank)
        if sort_order == SortOrder.CATEGORY:
            return sorted(items, key=lambda t: t.category.value)
        if sort_order == SortOrder.CREATED_DATE:
            return sorted(items, key=lambda t: t.created_at, reverse=True)
        if sort_order == SortOrder.ALPHABETICAL:
            return sorted(items, key=lambda t: t.title.lower())
        return items

    def active_tasks(self) -> list[Task]:
        return [t for t in self._tasks if not t.is_completed]

    def completed_tasks(self) -> list[Task]:
        return [t for t in self._tasks if t.is_completed]

    def overdue_tasks(self, now: datetime | None = None) -> list[Task]:
        now = now or datetime.now()
        return [t for t in self._tasks if t.is_overdue(now)]

    def today_tasks(self, today: date | None = None) -> list[Task]:
        today = today or date.today()
        return [t for t in self._tasks if t.due_date and t.due_date.date() == today]

    def upcoming_tasks(self, now: datetime | None = None) -> list[Task]:
        now = now or datetime.now()
        return [
            t
            for t in self._tasks
            if t.due_date and t.due_date > now and t.due_date.date() != now.date()
        ]

    def tasks_by_category(self, category: TaskCategory) -> list[Task]:
        return [t for t in self._tasks if t.category == category and not t.is_completed]

    def _set_tasks(self, tasks: TaskSnapshot) -> None:
        self._tasks = tasks
        self._save_tasks()
        self._task_changes.publish(self._tasks)

    def _set_templates(self, templates: TemplateSnapshot) -> None:
        self._templates = templates
        self._save_templates()
        self._template_changes.publish(self._templates)

    def _save_tasks(self) -> None:
        self._repo.save_json(TASKS_KEY, [task_to_dict(t) for t in self._tasks])

    def _save_templates(self) -> None:
        self._repo.save_json(TEMPLATES_KEY, [template_to_dict(t) for t in self._templates])

    def _load_tasks(self) -> None:
        document = self._repo.load_json(TASKS_KEY)
        if document is None:
            return
        try:
            self._tasks = tuple(task_from_dict(item) for item in document)
        except DECODE_ERRORS:
            logger.warning("Could not decode %s; starting with no tasks", TASKS_KEY)
            self._tasks = ()

    def _load_templates(self) -> None:
        document = self._repo.load_json(TEMPLATES_KEY)
        if document is not None:
            try:
                self._templates = tuple(template_from_dict(item) for item in document)
                return
            except DECODE_ERRORS:
                logger.warning("Could not decode %s; restoring default templates", TEMPLATES_KEY)
        self._templates = default_templates()
        self._save_templates()
        logger.info("Seeded %s default templates", len(self._templates))


def default_templates() -> TemplateSnapshot:
    return (
        TaskTemplate(
            name="Morning Routine",
            template_title="Complete Morning Routine",
            template_description="Exercise, breakfast, and planning",
            default_priority=TaskPriority.HIGH,
            default_category=TaskCategory.HEALTH,
            default_tags=("routine", "morning"),
            is_recurring=True,
            recurring_interval=RecurringInterval.DAILY,
        ),
        TaskTemplate(
            name="Weekly Review",
            template_title="Weekly Review & Planning",
            template_description="Review completed tasks and plan for next week",
            default_priority=TaskPriority.MEDIUM,
            default_category=TaskCategory.PERSONAL,
            default_tags=("planning", "review"),
            is_recurring=True,
            recurring_interval=RecurringInterval.WEEKLY,
        ),
        TaskTemplate(
            name="Shopping List",
            template_title="Grocery Shopping",
            template_description="Buy weekly groceries",
            default_priority=TaskPriority.MEDIUM,
            default_category=TaskCategory.SHOPPING,
            default_tags=("groceries", "shopping"),
            is_recurring=True,
            recurring_interval=RecurringInterval.WEEKLY,
        ),
    )


def _matches_search(task: Task, search: str) -> bool:
    needle = search.lower()
    if needle in task.title.lower() or needle in task.description.lower():
        return True
    return any(needle in tag.lower() for tag in task.tags)
