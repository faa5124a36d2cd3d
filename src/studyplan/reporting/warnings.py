"""Warning and suggestion generation for planning output."""

from __future__ import annotations

from typing import Any

from studyplan.models import ScoredTask


def build_warnings_and_suggestions(
    *,
    scored: list[ScoredTask],
    allocated_by_task: dict[str, int],
    budget: int,
    budget_remaining: int,
    overdue_cap: int | None,
    overdue_allocated: int,
    ring_size: int,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Explain where the weekly plan falls short of the active workload."""
    warnings: list[dict[str, Any]] = []
    suggestions: list[dict[str, Any]] = []

    if ring_size == 0 and scored:
        warnings.append(
            {
                "code": "WARN_NO_STUDY_DAYS",
                "severity": "warning",
                "message": "No study day is enabled, so no hours were placed.",
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_ENABLE_MORE_DAYS",
                "message": "Enable at least one weekday in the study settings.",
            }
        )
        return warnings, suggestions

    # (1) Overdue protection limited overdue work.
    overdue_demand = sum(
        max(0, item.hours_needed - allocated_by_task.get(item.task.task_id, 0)) for item in scored if item.overdue
    )
    if overdue_cap is not None and overdue_allocated >= overdue_cap and overdue_demand > 0:
        warnings.append(
            {
                "code": "WARN_OVERDUE_CAP_REACHED",
                "severity": "warning",
                "overdue_cap_hours": overdue_cap,
                "overdue_hours_missing": overdue_demand,
                "message": "Overdue tasks hit the 60% share of the weekly budget.",
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_CLEAR_OVERDUE",
                "message": "Finish or mark done the oldest overdue tasks to free the capped share.",
            }
        )
        if budget_remaining > 0:
            suggestions.append(
                {
                    "code": "SUGGEST_DISABLE_OVERDUE_CAP",
                    "message": "Disable the overdue cap to spend the unused hours on overdue work.",
                }
            )

    # (2) Budget left unspent while work is still pending.
    pending = sum(max(0, item.hours_needed - allocated_by_task.get(item.task.task_id, 0)) for item in scored)
    if budget_remaining > 0 and pending > 0:
        warnings.append(
            {
                "code": "WARN_BUDGET_UNUSED",
                "severity": "info",
                "unused_hours": budget_remaining,
                "message": "Part of the weekly budget is unused although tasks still need hours.",
            }
        )

    # (3) Active tasks that got no hour at all.
    unscheduled = [item.task.task_id for item in scored if allocated_by_task.get(item.task.task_id, 0) == 0]
    if unscheduled:
        warnings.append(
            {
                "code": "WARN_TASKS_UNSCHEDULED",
                "severity": "warning",
                "task_ids": unscheduled,
                "message": "Some active tasks received no study time this week.",
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_INCREASE_HOURS",
                "message": "Raise hours per week so every active task gets at least one hour.",
            }
        )

    # (4) Estimated demand above the weekly budget.
    demand = sum(item.hours_needed for item in scored)
    if demand > budget:
        warnings.append(
            {
                "code": "WARN_DEMAND_EXCEEDS_BUDGET",
                "severity": "warning",
                "demand_hours": demand,
                "budget_hours": budget,
                "message": "Estimated hours for active tasks exceed the weekly budget.",
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_INCREASE_HOURS",
                "message": "Raise hours per week or split large tasks across several weeks.",
            }
        )

    unique_suggestions: list[dict[str, Any]] = []
    seen: set[str] = set()
    for item in suggestions:
        code = str(item.get("code", ""))
        if code in seen:
            continue
        seen.add(code)
        unique_suggestions.append(item)

    return warnings, unique_suggestions
