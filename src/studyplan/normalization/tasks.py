"""Convert raw task records into engine ``Task`` values."""

from __future__ import annotations

from datetime import date
from typing import Any

from studyplan.models import Task, TaskStatus

_STATUS_BY_VALUE = {status.value: status for status in TaskStatus}


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _parse_due_date(raw: Any) -> date | None:
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


def normalize_task(raw: dict[str, Any]) -> Task | None:
    """Return a clamped ``Task`` or ``None`` when the record has no title.

    - weight: [0,100], unknown -> 0,
    - difficulty: [1,5], missing or zero -> 3,
    - status: unknown values -> not_started.
    """

    title = str(raw.get("title") or "").strip()
    if not title:
        return None

    weight = min(100.0, max(0.0, _as_float(raw.get("weight"), 0.0)))
    difficulty = _as_float(raw.get("difficulty"), 3.0) or 3.0
    difficulty = min(5.0, max(1.0, difficulty))

    return Task(
        task_id=str(raw.get("task_id", "")),
        title=title,
        due_date=_parse_due_date(raw.get("due_date")),
        weight=weight,
        difficulty=difficulty,
        status=_STATUS_BY_VALUE.get(str(raw.get("status", "")), TaskStatus.NOT_STARTED),
        course_id=str(raw.get("course_id") or ""),
        course_name=str(raw.get("course_name") or ""),
    )


def normalize_tasks(payload: Any) -> list[Task]:
    """Normalize a ``{"tasks": [...]}`` payload, preserving input order."""
    items = payload.get("tasks", []) if isinstance(payload, dict) else []
    tasks: list[Task] = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict):
            continue
        task = normalize_task(item)
        if task is not None:
            tasks.append(task)
    return tasks
