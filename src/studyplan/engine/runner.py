"""Planning engine runner."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from studyplan.normalization import resolve_planner_config
from studyplan.normalization.tasks import normalize_tasks
from studyplan.reporting.decision_trace import DecisionTraceCollector
from studyplan.reporting.warnings import build_warnings_and_suggestions

from .allocator import allocate_plan
from .summary import build_week_summary, planned_hours

logger = logging.getLogger(__name__)


def _parse_date(raw: Any, fallback: date) -> date:
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw)
        except ValueError:
            return fallback
    return fallback


def _resolve_today(payload: dict[str, Any]) -> date:
    fallback = date.today()
    request = payload.get("plan_request", {}) if isinstance(payload.get("plan_request"), dict) else {}
    return _parse_date(payload.get("today", request.get("today")), fallback)


def _extract_settings(payload: dict[str, Any]) -> dict[str, Any]:
    effective_config = payload.get("effective_config", {}) if isinstance(payload.get("effective_config"), dict) else {}
    settings = effective_config.get("settings", payload.get("settings", {}))
    return settings if isinstance(settings, dict) else {}


def run_planner(payload: dict[str, Any]) -> dict[str, Any]:
    """Score, allocate and summarize one week for the loaded payload."""
    today = _resolve_today(payload)
    settings = _extract_settings(payload)
    config = resolve_planner_config(settings)
    tasks = normalize_tasks(payload.get("tasks", {}))

    decision_trace = DecisionTraceCollector(start_timestamp=datetime.combine(today, datetime.min.time(), timezone.utc))
    allocation = allocate_plan(tasks=tasks, config=config, today=today, decision_trace=decision_trace)
    days = allocation["days"]
    allocated_by_task = allocation["allocated_by_task"]

    warnings, suggestions = build_warnings_and_suggestions(
        scored=allocation["scored"],
        allocated_by_task=allocated_by_task,
        budget=allocation["budget"],
        budget_remaining=allocation["budget_remaining"],
        overdue_cap=allocation["overdue_cap"],
        overdue_allocated=allocation["overdue_allocated"],
        ring_size=allocation["ring_size"],
    )
    week_summary = build_week_summary(
        tasks=tasks,
        plan=days,
        today=today,
        hours_per_week=config.hours_per_week,
    )

    total = planned_hours(days)
    logger.info(
        "Planned %d/%d hours for %d active tasks (week of %s, %d warnings)",
        total,
        allocation["budget"],
        len(allocation["scored"]),
        allocation["week_start"].isoformat(),
        len(warnings),
    )

    return {
        "status": "ok",
        "daily_plan": [day.as_dict() for day in days],
        "plan_summary": {
            "today": today.isoformat(),
            "week_start": allocation["week_start"].isoformat(),
            "budget_hours": allocation["budget"],
            "planned_hours": total,
            "unused_hours": allocation["budget_remaining"],
            "overdue_cap_hours": allocation["overdue_cap"],
            "overdue_hours": allocation["overdue_allocated"],
            "active_tasks": len(allocation["scored"]),
            "study_days": [day.weekday for day in days] if allocation["ring_size"] else [],
        },
        "week_summary": week_summary,
        "scored_tasks": [
            {
                "task_id": item.task.task_id,
                "title": item.task.title,
                "score": float(item.score),
                "hours_needed": item.hours_needed,
                "overdue": item.overdue,
                "allocated_hours": allocated_by_task.get(item.task.task_id, 0),
            }
            for item in allocation["scored"]
        ],
        "warnings": warnings,
        "suggestions": suggestions,
        "decision_trace": decision_trace.as_list(),
        "effective_config": payload.get("effective_config", {"settings": settings}),
    }
