from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import TaskCategory


@dataclass(frozen=True)
class TaskFilters:
    category: Optional[TaskCategory] = None
    show_completed: bool = True
    search: str | None = None
