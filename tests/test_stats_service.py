from __future__ import annotations

from datetime import datetime, timedelta

from supertask.domain.entities import ProductivityStats, Task
from supertask.domain.enums import TaskCategory, TaskPriority
from supertask.services.stats_service import (
    average_completion_time,
    calculate_stats,
    current_streak,
    longest_streak,
)

NOW = datetime(2026, 10, 17, 18, 0)


def _done(days_ago: int, **kwargs) -> Task:
    completed_at = NOW - timedelta(days=days_ago)
    return Task(
        title=kwargs.pop("title", f"done {days_ago}d ago"),
        is_completed=True,
        created_at=kwargs.pop("created_at", completed_at - timedelta(hours=1)),
        completed_at=completed_at,
        **kwargs,
    )


def test_completion_rate_is_zero_without_tasks() -> None:
    stats = calculate_stats([], NOW)

    assert stats.total_tasks_created == 0
    assert stats.completion_rate == 0
    assert stats.average_completion_time == 0
    assert stats.current_streak == 0
    assert stats.longest_streak == 0


def test_counts_and_rate() -> None:
    tasks = [
        _done(0, category=TaskCategory.WORK, priority=TaskPriority.HIGH),
        _done(0, category=TaskCategory.WORK, priority=TaskPriority.LOW),
        _done(1, category=TaskCategory.HEALTH, priority=TaskPriority.HIGH),
        Task(title="open", category=TaskCategory.FINANCE, priority=TaskPriority.URGENT),
    ]

    stats = calculate_stats(tasks, NOW)

    assert stats.total_tasks_created == 4
    assert stats.total_tasks_completed == 3
    assert stats.completion_rate == 0.75
    assert 0 <= stats.completion_rate <= 1
    assert stats.completion_by_category == {"Work": 2, "Health": 1}
    assert stats.completion_by_priority == {"Low": 1, "High": 2}


def test_average_completion_time_in_seconds() -> None:
    tasks = [
        _done(0, created_at=NOW - timedelta(hours=2)),
        _done(3, created_at=NOW - timedelta(days=3, hours=4)),
        Task(title="open"),
    ]

    assert average_completion_time(tasks) == 3 * 3600


def test_current_streak_today_and_yesterday() -> None:
    assert current_streak([_done(0), _done(1)], NOW.date()) == 2


def test_current_streak_stops_at_gap() -> None:
    tasks = [_done(0), _done(1), _done(3), _done(4)]

    assert current_streak(tasks, NOW.date()) == 2


def test_current_streak_counts_days_not_tasks() -> None:
    tasks = [_done(0), _done(0, title="second today"), _done(1), _done(2)]

    assert current_streak(tasks, NOW.date()) == 3


def test_current_streak_can_start_yesterday() -> None:
    assert current_streak([_done(1), _done(2)], NOW.date()) == 2
    assert current_streak([_done(2)], NOW.date()) == 0


def test_longest_streak_picks_best_run() -> None:
    base = NOW - timedelta(days=30)
    tasks = [
        Task(title=f"day {d}", is_completed=True, created_at=base, completed_at=base + timedelta(days=d))
        for d in (1, 2, 3, 10)
    ]

    assert longest_streak(tasks) == 3


def test_longest_streak_counts_trailing_run() -> None:
    tasks = [_done(9), _done(5), _done(2), _done(1), _done(1), _done(0)]

    assert longest_streak(tasks) == 3
    assert longest_streak([_done(4)]) == 1
    assert longest_streak([Task(title="open")]) == 0


def test_stats_is_plain_value() -> None:
    stats = ProductivityStats(total_tasks_created=4, total_tasks_completed=1)

    assert stats.completion_rate == 0.25
