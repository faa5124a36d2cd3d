"""Planning engine."""

from .allocator import allocate_plan, compute_plan
from .day_ring import build_plan_days, resolve_study_days, start_of_week
from .runner import run_planner
from .scoring import compute_score, days_until_due, estimate_hours, is_overdue, rank_tasks, score_task
from .summary import build_week_summary

__all__ = [
    "allocate_plan",
    "build_plan_days",
    "build_week_summary",
    "compute_plan",
    "compute_score",
    "days_until_due",
    "estimate_hours",
    "is_overdue",
    "rank_tasks",
    "resolve_study_days",
    "run_planner",
    "score_task",
    "start_of_week",
]
