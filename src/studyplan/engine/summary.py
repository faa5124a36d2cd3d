"""Dashboard summary built on top of a computed weekly plan."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from studyplan.models import PlanDay, Task, TaskStatus, status_label

from .day_ring import start_of_week, to_date
from .scoring import compute_score, is_overdue

FOCUS_LIMIT = 5
OVERDUE_LIMIT = 5
DUE_SOON_LIMIT = 6
DUE_SOON_WINDOW_DAYS = 7


def _due_in(task: Task, today: date) -> int | None:
    if task.due_date is None:
        return None
    return (task.due_date - today).days


def _task_card(task: Task, today: date) -> dict[str, Any]:
    return {
        "task_id": task.task_id,
        "title": task.title,
        "course_id": task.course_id,
        "course_name": task.course_name,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "due_in": _due_in(task, today),
        "weight": float(task.weight),
        "difficulty": float(task.difficulty),
        "status": task.status.value,
        "status_label": status_label(task.status),
        "score": compute_score(task, today),
        "overdue": is_overdue(task, today),
    }


def planned_hours(plan: list[PlanDay]) -> int:
    return sum(day.total_hours for day in plan)


def build_week_summary(
    *,
    tasks: list[Task],
    plan: list[PlanDay],
    today: str | date,
    hours_per_week: float | None = None,
) -> dict[str, Any]:
    """Summarize focus, overdue and due-soon tasks for the reference week.

    ``planned_hours`` is read from the plan itself, never re-derived.
    """

    reference_day = to_date(today)
    week_start = start_of_week(reference_day)
    week_end = week_start + timedelta(days=6)
    active = [task for task in tasks if task.is_active]

    focus = sorted(active, key=lambda task: -compute_score(task, reference_day))[:FOCUS_LIMIT]
    overdue = sorted(
        (task for task in active if is_overdue(task, reference_day)),
        key=lambda task: task.due_date or date.max,
    )[:OVERDUE_LIMIT]
    due_soon = sorted(
        (
            task
            for task in active
            if task.due_date is not None and 0 <= (task.due_date - reference_day).days <= DUE_SOON_WINDOW_DAYS
        ),
        key=lambda task: (task.due_date - reference_day).days,
    )[:DUE_SOON_LIMIT]

    return {
        "week_start": week_start.isoformat(),
        "week_end": week_end.isoformat(),
        "week_range_label": f"{week_start.isoformat()} -> {week_end.isoformat()}",
        "active_count": len(active),
        "done_count": sum(1 for task in tasks if task.status is TaskStatus.DONE),
        "planned_hours": planned_hours(plan),
        "hours_per_week": hours_per_week,
        "focus_tasks": [_task_card(task, reference_day) for task in focus],
        "overdue_tasks": [_task_card(task, reference_day) for task in overdue],
        "due_soon_tasks": [_task_card(task, reference_day) for task in due_soon],
    }
