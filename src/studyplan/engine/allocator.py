"""Deterministic weekly hour allocation.

Passes:
1) reservation: the three highest-scored tasks get a first hour,
2) fill: every task is topped up to its estimated hours while budget lasts.

Hours are placed one at a time and the day cursor advances after every hour,
so a task's hours rotate across the enabled days instead of piling onto one.
Rule preserved: with the overdue cap enabled, overdue work never exceeds
floor(budget * 0.6) hours.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Any

from studyplan.models import PlanDay, PlanEntry, PlannerConfig, ScoredTask, Task
from studyplan.reporting.decision_trace import DecisionTraceCollector

from .day_ring import build_plan_days, resolve_study_days, start_of_week, to_date
from .scoring import clamp, rank_tasks, round_half_up

logger = logging.getLogger(__name__)

MIN_WEEKLY_HOURS = 1
MAX_WEEKLY_HOURS = 80
OVERDUE_CAP_RATIO = 0.6
RESERVATION_TOP_N = 3


def resolve_budget(hours_per_week: float | None) -> int:
    """Round half up and clamp into [1, 80]; NaN counts as the minimum budget."""
    hours = float(hours_per_week or 0)
    if math.isnan(hours):
        return MIN_WEEKLY_HOURS
    return int(clamp(MIN_WEEKLY_HOURS, round_half_up(clamp(MIN_WEEKLY_HOURS, hours, MAX_WEEKLY_HOURS)), MAX_WEEKLY_HOURS))


def resolve_overdue_cap(budget: int, cap_overdue: bool) -> float:
    return float(math.floor(budget * OVERDUE_CAP_RATIO)) if cap_overdue else math.inf


def allocate_plan(
    *,
    tasks: list[Task],
    config: PlannerConfig,
    today: str | date,
    week_start: str | date | None = None,
    decision_trace: DecisionTraceCollector | None = None,
) -> dict[str, Any]:
    """Allocate the weekly budget in 1-hour chunks and return plan plus counters."""

    reference_day = to_date(today)
    start = to_date(week_start) if week_start is not None else start_of_week(reference_day)
    scored = rank_tasks(tasks, reference_day)

    days = build_plan_days(week_start=start, study_days=config.study_days)
    ring_size = len(days) if resolve_study_days(config.study_days) else 0
    index_by_day: list[dict[str, int]] = [{} for _ in days]

    budget = resolve_budget(config.hours_per_week)
    initial_budget = budget
    overdue_cap = resolve_overdue_cap(budget, bool(config.cap_overdue))
    overdue_allocated = 0
    allocated_by_task: dict[str, int] = {}
    day_cursor = 0

    def _can_allocate(item: ScoredTask) -> bool:
        return not item.overdue or overdue_allocated < overdue_cap

    def _add_or_merge(day_index: int, item: ScoredTask, hours: int) -> None:
        day = days[day_index]
        positions = index_by_day[day_index]
        task = item.task
        existing = positions.get(task.task_id)
        if existing is None:
            positions[task.task_id] = len(day.entries)
            day.entries.append(
                PlanEntry(
                    task_id=task.task_id,
                    hours=hours,
                    score=item.score,
                    overdue=item.overdue,
                    due_date=task.due_date,
                    status=task.status,
                    title=task.title,
                    course_id=task.course_id,
                    course_name=task.course_name,
                )
            )
        else:
            entry = day.entries[existing]
            entry.hours += hours
            entry.score = max(entry.score, item.score)
        day.total_hours += hours

    def _allocate_hours(item: ScoredTask, hours: int, pass_name: str) -> None:
        nonlocal budget, overdue_allocated, day_cursor
        remaining = hours
        while remaining > 0 and budget > 0 and ring_size > 0:
            if not _can_allocate(item):
                logger.debug("Overdue cap reached while placing %s", item.task.task_id)
                break
            chunk = min(1, remaining)
            _add_or_merge(day_cursor, item, chunk)
            if decision_trace is not None:
                rules = [f"RULE_{pass_name.upper()}_PASS", "RULE_DAY_RING_ROTATION"]
                if item.overdue and overdue_cap != math.inf:
                    rules.append("RULE_OVERDUE_CAP")
                decision_trace.record(
                    pass_name=pass_name,
                    day_label=days[day_cursor].label,
                    task_id=item.task.task_id,
                    score=item.score,
                    hours=chunk,
                    applied_rules=rules,
                    blocked_constraints=[],
                    note="Placed one hour on the current day of the ring.",
                )
            remaining -= chunk
            budget -= chunk
            if item.overdue:
                overdue_allocated += chunk
            allocated_by_task[item.task.task_id] = allocated_by_task.get(item.task.task_id, 0) + chunk
            day_cursor = (day_cursor + 1) % ring_size

    def _record_cap_skip(item: ScoredTask, pass_name: str) -> None:
        if decision_trace is None:
            return
        decision_trace.record(
            pass_name=pass_name,
            day_label=None,
            task_id=item.task.task_id,
            score=item.score,
            hours=0,
            applied_rules=["RULE_OVERDUE_CAP"],
            blocked_constraints=["OVERDUE_CAP_REACHED"],
            note="Skipped: overdue share of the weekly budget is exhausted.",
        )

    # Pass 1: reservation, one guaranteed hour for each of the top tasks.
    for item in scored[:RESERVATION_TOP_N]:
        if budget <= 0:
            break
        if not _can_allocate(item):
            _record_cap_skip(item, "reservation")
            continue
        if allocated_by_task.get(item.task.task_id, 0) >= 1:
            continue
        _allocate_hours(item, 1, "reservation")

    # Pass 2: fill each task up to its estimate, highest score first.
    for item in scored:
        if budget <= 0:
            break
        if not _can_allocate(item):
            _record_cap_skip(item, "fill")
            continue
        already = allocated_by_task.get(item.task.task_id, 0)
        remaining_for_task = max(0, item.hours_needed - already)
        if remaining_for_task <= 0:
            continue
        _allocate_hours(item, min(remaining_for_task, budget), "fill")

    for day in days:
        day.entries.sort(key=lambda entry: -entry.score)

    logger.debug(
        "Allocated %d/%d hours over %d days (%d active tasks, %d overdue hours)",
        initial_budget - budget,
        initial_budget,
        len(days),
        len(scored),
        overdue_allocated,
    )

    return {
        "days": days,
        "scored": scored,
        "week_start": start,
        "budget": initial_budget,
        "budget_remaining": budget,
        "overdue_cap": None if overdue_cap == math.inf else int(overdue_cap),
        "overdue_allocated": overdue_allocated,
        "allocated_by_task": allocated_by_task,
        "ring_size": ring_size,
    }


def compute_plan(
    tasks: list[Task],
    config: PlannerConfig,
    today: str | date,
    week_start: str | date | None = None,
    *,
    decision_trace: DecisionTraceCollector | None = None,
) -> list[PlanDay]:
    """Return the day-by-day plan for one week.

    Never raises on empty or degenerate input: no active tasks or no enabled
    study day yields days with no entries.
    """

    result = allocate_plan(
        tasks=tasks,
        config=config,
        today=today,
        week_start=week_start,
        decision_trace=decision_trace,
    )
    return result["days"]
