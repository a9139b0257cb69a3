from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from supertask.domain.entities import ProductivityStats, Task
from supertask.domain.enums import TaskCategory, TaskPriority


def calculate_stats(tasks: Iterable[Task], now: datetime | None = None) -> ProductivityStats:
    now = now or datetime.now()
    items = list(tasks)
    completed = [t for t in items if t.is_completed]

    by_category = {}
    for category in TaskCategory:
        count = sum(1 for t in completed if t.category == category)
        if count > 0:
            by_category[category.value] = count

    by_priority = {}
    for priority in TaskPriority:
        count = sum(1 for t in completed if t.priority == priority)
        if count > 0:
            by_priority[priority.value] = count

    return ProductivityStats(
        total_tasks_created=len(items),
        total_tasks_completed=len(completed),
        current_streak=current_streak(items, now.date()),
        longest_streak=longest_streak(items),
        completion_by_category=by_category,
        completion_by_priority=by_priority,
        average_completion_time=average_completion_time(items),
    )


def average_completion_time(tasks: Iterable[Task]) -> float:
    durations = [
        (t.completed_at - t.created_at).total_seconds()
        for t in tasks
        if t.is_completed and t.completed_at is not None
    ]
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def completion_days(tasks: Iterable[Task]) -> list[date]:
    return sorted({t.completed_at.date() for t in tasks if t.is_completed and t.completed_at})


def current_streak(tasks: Iterable[Task], today: date | None = None) -> int:
    cursor = today or date.today()
    streak = 0
    for day in reversed(completion_days(tasks)):
        if day > cursor:
            continue
        if day == cursor or day == cursor - timedelta(days=1):
            streak += 1
            cursor = day
        else:
            break
    return streak


def longest_streak(tasks: Iterable[Task]) -> int:
    days = completion_days(tasks)
    if not days:
        return 0
    best = 0
    running = 1
    for previous, day in zip(days, days[1:]):
        if (day - previous).days == 1:
            running += 1
        else:
            best = max(best, running)
            running = 1
    return max(best, running)
