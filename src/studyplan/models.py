"""Value types: tasks, planner configuration and derived plan entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

ALL_WEEKDAYS: tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6)
DAY_NAMES: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"


def status_label(status: TaskStatus | str) -> str:
    value = status.value if isinstance(status, TaskStatus) else str(status)
    if value == TaskStatus.DONE.value:
        return "Done"
    if value == TaskStatus.IN_PROGRESS.value:
        return "In progress"
    return "Not started"


@dataclass(frozen=True, slots=True)
class Task:
    """One academic task as read from the task store."""

    task_id: str
    title: str
    due_date: date | None = None
    weight: float = 0.0
    difficulty: float = 3.0
    status: TaskStatus = TaskStatus.NOT_STARTED
    course_id: str = ""
    course_name: str = ""

    @property
    def is_active(self) -> bool:
        return self.status is not TaskStatus.DONE


@dataclass(frozen=True, slots=True)
class PlannerConfig:
    """Weekly planning settings.

    ``study_days=None`` enables every weekday. An explicitly empty collection
    leaves the day ring empty, so nothing gets placed.
    """

    hours_per_week: float = 10
    study_days: tuple[int, ...] | None = ALL_WEEKDAYS
    cap_overdue: bool = True


@dataclass(frozen=True, slots=True)
class ScoredTask:
    task: Task
    score: float
    hours_needed: int
    overdue: bool


@dataclass(slots=True)
class PlanEntry:
    task_id: str
    hours: int
    score: float
    overdue: bool
    due_date: date | None
    status: TaskStatus
    title: str = ""
    course_id: str = ""
    course_name: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "title": self.title,
            "course_id": self.course_id,
            "course_name": self.course_name,
            "hours": self.hours,
            "score": float(self.score),
            "overdue": self.overdue,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "status": self.status.value,
        }


@dataclass(slots=True)
class PlanDay:
    weekday: int
    date: date
    entries: list[PlanEntry] = field(default_factory=list)
    total_hours: int = 0

    @property
    def label(self) -> str:
        return f"{DAY_NAMES[self.weekday]} ({self.date.isoformat()})"

    def as_dict(self) -> dict[str, Any]:
        return {
            "weekday": self.weekday,
            "date": self.date.isoformat(),
            "label": self.label,
            "total_hours": self.total_hours,
            "entries": [entry.as_dict() for entry in self.entries],
        }
