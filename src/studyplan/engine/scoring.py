"""Priority scoring and effort estimation for active tasks."""

from __future__ import annotations

import math
from datetime import date

from studyplan.models import ScoredTask, Task

UNDATED_HORIZON_DAYS = 14
DUE_NOW_HORIZON_DAYS = 3
MAX_HORIZON_DAYS = 365

DEFAULT_DIFFICULTY = 3.0
MIN_ESTIMATE_HOURS = 1
MAX_ESTIMATE_HOURS = 10


def clamp(low: float, value: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round .5 upward (2.5 -> 3, -2.5 -> -2), unlike the builtin ``round``."""
    return int(math.floor(value + 0.5))


def _number(value: float | None, default: float) -> float:
    if value is None:
        return default
    number = float(value)
    return default if math.isnan(number) else number


def _clamped_weight(weight: float | None) -> float:
    return clamp(0.0, _number(weight, 0.0), 100.0)


def _clamped_difficulty(difficulty: float | None) -> float:
    return clamp(1.0, _number(difficulty, DEFAULT_DIFFICULTY), 5.0)


def _scoring_difficulty(difficulty: float | None) -> float:
    # Zero difficulty counts as the default rating when scoring.
    return _clamped_difficulty(_number(difficulty, DEFAULT_DIFFICULTY) or DEFAULT_DIFFICULTY)


def days_until_due(task: Task, today: date) -> int:
    """Return the urgency horizon in days.

    - no due date: 14,
    - due today or overdue: 3,
    - otherwise the calendar-day difference clamped to [1, 365].
    """

    if task.due_date is None:
        return UNDATED_HORIZON_DAYS
    diff = (task.due_date - today).days
    if diff <= 0:
        return DUE_NOW_HORIZON_DAYS
    return int(clamp(1, diff, MAX_HORIZON_DAYS))


def compute_score(task: Task, today: date) -> float:
    """weight x difficulty x (1 / days_until_due)."""

    urgency = 1.0 / days_until_due(task, today)
    return _clamped_weight(task.weight) * _scoring_difficulty(task.difficulty) * urgency


def is_overdue(task: Task, today: date) -> bool:
    return task.due_date is not None and task.due_date < today


def estimate_hours(weight: float | None, difficulty: float | None) -> int:
    raw = _clamped_weight(weight) * _clamped_difficulty(difficulty) / 10.0
    return int(clamp(MIN_ESTIMATE_HOURS, round_half_up(raw), MAX_ESTIMATE_HOURS))


def score_task(task: Task, today: date) -> ScoredTask:
    return ScoredTask(
        task=task,
        score=compute_score(task, today),
        hours_needed=estimate_hours(task.weight, task.difficulty),
        overdue=is_overdue(task, today),
    )


def rank_tasks(tasks: list[Task], today: date) -> list[ScoredTask]:
    """Score active tasks and sort by descending score.

    The sort is stable: tasks with equal scores keep the caller's order.
    """

    scored = [score_task(task, today) for task in tasks if task.is_active]
    return sorted(scored, key=lambda item: -item.score)
