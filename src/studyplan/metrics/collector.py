"""Weekly plan metrics collector."""

from __future__ import annotations

from statistics import mean, pstdev
from typing import Any


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _confidence_level(score: float) -> str:
    if score >= 0.75:
        return "high"
    if score >= 0.55:
        return "medium"
    return "low"


def collect_metrics(result: dict[str, Any]) -> dict[str, Any]:
    """Compute normalized metrics with clamp in [0,1]."""
    days = [item for item in result.get("daily_plan", []) if isinstance(item, dict)]
    scored = [item for item in result.get("scored_tasks", []) if isinstance(item, dict)]
    summary = result.get("plan_summary", {}) if isinstance(result.get("plan_summary"), dict) else {}

    budget = max(1, int(summary.get("budget_hours", 1) or 1))
    hours_by_day = [max(0, int(day.get("total_hours", 0) or 0)) for day in days]
    planned = sum(hours_by_day)

    overdue_hours = 0
    for day in days:
        for entry in day.get("entries", []):
            if isinstance(entry, dict) and entry.get("overdue"):
                overdue_hours += max(0, int(entry.get("hours", 0) or 0))

    demand = sum(max(0, int(item.get("hours_needed", 0) or 0)) for item in scored)
    covered = sum(
        min(max(0, int(item.get("hours_needed", 0) or 0)), max(0, int(item.get("allocated_hours", 0) or 0)))
        for item in scored
    )
    demand_coverage = _clamp01(covered / demand) if demand > 0 else 1.0

    top = scored[:3]
    top_coverage = (
        _clamp01(mean(1.0 if int(item.get("allocated_hours", 0) or 0) > 0 else 0.0 for item in top)) if top else 1.0
    )

    budget_utilization = _clamp01(planned / budget)
    overdue_share = _clamp01(overdue_hours / planned) if planned > 0 else 0.0

    days_used = sum(1 for hours in hours_by_day if hours > 0)
    avg_daily = mean(hours_by_day) if hours_by_day else 0.0
    cv = (pstdev(hours_by_day) / max(1.0, avg_daily)) if hours_by_day and planned > 0 else 0.0
    balance_score = _clamp01(1.0 - min(1.0, cv))

    tasks_scheduled = sum(1 for item in scored if int(item.get("allocated_hours", 0) or 0) > 0)
    task_reach = _clamp01(tasks_scheduled / len(scored)) if scored else 1.0

    confidence_score = _clamp01(
        (0.35 * demand_coverage)
        + (0.20 * top_coverage)
        + (0.20 * task_reach)
        + (0.15 * balance_score)
        + (0.10 * (1.0 - overdue_share))
    )

    return {
        "planned_hours": planned,
        "budget_hours": budget,
        "budget_utilization": budget_utilization,
        "overdue_hours": overdue_hours,
        "overdue_share": overdue_share,
        "demand_hours": demand,
        "demand_coverage": demand_coverage,
        "top_task_coverage": top_coverage,
        "tasks_active": len(scored),
        "tasks_scheduled": tasks_scheduled,
        "task_reach": task_reach,
        "days_used": days_used,
        "cv": _clamp01(cv),
        "balance_score": balance_score,
        "confidence_score": confidence_score,
        "confidence_level": _confidence_level(confidence_score),
    }
