from __future__ import annotations

from datetime import date, timedelta

import pytest

from studyplan.engine.allocator import compute_plan, resolve_budget, resolve_overdue_cap
from studyplan.engine.day_ring import build_plan_days, resolve_study_days, start_of_week
from studyplan.engine.scoring import (
    compute_score,
    days_until_due,
    estimate_hours,
    is_overdue,
    rank_tasks,
    round_half_up,
)
from studyplan.models import PlanDay, PlannerConfig, Task, TaskStatus, status_label
from studyplan.normalization import normalize_task, normalize_tasks, resolve_effective_config, resolve_planner_config
from studyplan.validation import ValidationReport, validate_domain_inputs, validate_inputs_with_schema

TODAY = date(2026, 1, 7)


def _task(task_id: str, **overrides: object) -> Task:
    fields: dict = {"task_id": task_id, "title": task_id.upper()}
    fields.update(overrides)
    return Task(**fields)


def test_days_until_due_horizons() -> None:
    assert days_until_due(_task("a"), TODAY) == 14
    assert days_until_due(_task("a", due_date=TODAY), TODAY) == 3
    assert days_until_due(_task("a", due_date=TODAY - timedelta(days=9)), TODAY) == 3
    assert days_until_due(_task("a", due_date=TODAY + timedelta(days=1)), TODAY) == 1
    assert days_until_due(_task("a", due_date=TODAY + timedelta(days=10)), TODAY) == 10
    assert days_until_due(_task("a", due_date=TODAY + timedelta(days=400)), TODAY) == 365


def test_is_overdue_is_strictly_before_today() -> None:
    assert is_overdue(_task("a", due_date=TODAY - timedelta(days=1)), TODAY)
    assert not is_overdue(_task("a", due_date=TODAY), TODAY)
    assert not is_overdue(_task("a"), TODAY)


def test_score_formula_and_defensive_clamping() -> None:
    assert compute_score(_task("a", weight=40, difficulty=2, due_date=TODAY + timedelta(days=4)), TODAY) == 20.0
    assert compute_score(_task("a", weight=100, difficulty=5, due_date=TODAY), TODAY) == pytest.approx(500 / 3)
    # zero difficulty falls back to the default rating of 3
    assert compute_score(_task("a", weight=14, difficulty=0), TODAY) == pytest.approx(3.0)
    # out-of-range inputs are clamped, not rejected
    assert compute_score(_task("a", weight=250, difficulty=9, due_date=TODAY + timedelta(days=5)), TODAY) == pytest.approx(100.0)
    assert compute_score(_task("a", weight=-10, difficulty=4), TODAY) == 0.0


def test_round_half_up_matches_display_rounding() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2
    assert round_half_up(0.0) == 0


@pytest.mark.parametrize(
    ("weight", "difficulty", "expected"),
    [
        (0, 3, 1),
        (5, 5, 3),
        (10, 1, 1),
        (30, 3, 9),
        (20, 5, 10),
        (100, 5, 10),
        (15, 1, 2),
        (50, 0, 5),
        (50, None, 10),
    ],
)
def test_estimate_hours(weight: float, difficulty: float, expected: int) -> None:
    assert estimate_hours(weight, difficulty) == expected


def test_rank_tasks_drops_done_and_keeps_input_order_on_ties() -> None:
    tasks = [
        _task("tie-1", weight=10, difficulty=2),
        _task("done", weight=100, difficulty=5, status=TaskStatus.DONE),
        _task("top", weight=90, difficulty=5, due_date=TODAY + timedelta(days=2)),
        _task("tie-2", weight=10, difficulty=2),
    ]
    ranked = rank_tasks(tasks, TODAY)
    assert [item.task.task_id for item in ranked] == ["top", "tie-1", "tie-2"]
    assert ranked[0].hours_needed == 10
    assert ranked[1].hours_needed == 2


def test_budget_and_overdue_cap_resolution() -> None:
    assert resolve_budget(10) == 10
    assert resolve_budget(10.5) == 11
    assert resolve_budget(0) == 1
    assert resolve_budget(None) == 1
    assert resolve_budget(200) == 80
    assert resolve_overdue_cap(10, True) == 6
    assert resolve_overdue_cap(1, True) == 0
    assert resolve_overdue_cap(10, False) == float("inf")


def test_non_finite_numbers_are_clamped_not_raised() -> None:
    assert resolve_budget(float("inf")) == 80
    assert resolve_budget(float("-inf")) == 1
    assert resolve_budget(float("nan")) == 1

    heavy = [_task("a", weight=100, difficulty=5)]
    unbounded = compute_plan(heavy, PlannerConfig(hours_per_week=float("inf")), TODAY)
    assert sum(day.total_hours for day in unbounded) == 10
    undefined = compute_plan(heavy, PlannerConfig(hours_per_week=float("nan")), TODAY)
    assert sum(day.total_hours for day in undefined) == 1

    assert compute_score(_task("a", weight=float("nan"), difficulty=4), TODAY) == 0.0
    assert compute_score(_task("a", weight=14, difficulty=float("nan")), TODAY) == pytest.approx(3.0)
    assert estimate_hours(float("nan"), 4) == 1
    assert estimate_hours(float("inf"), 5) == 10


def test_week_start_and_day_layout() -> None:
    assert start_of_week(TODAY) == date(2026, 1, 5)
    assert start_of_week("2026-01-11") == date(2026, 1, 5)
    assert start_of_week("2026-01-12") == date(2026, 1, 12)

    assert resolve_study_days(None) == (0, 1, 2, 3, 4, 5, 6)
    assert resolve_study_days([4, 0, 4, 9, -1, True]) == (0, 4)
    assert resolve_study_days([]) == ()

    days = build_plan_days(week_start=date(2026, 1, 5), study_days=[5, 1])
    assert [(day.weekday, day.date.isoformat(), day.label) for day in days] == [
        (1, "2026-01-06", "Tue (2026-01-06)"),
        (5, "2026-01-10", "Sat (2026-01-10)"),
    ]
    assert len(build_plan_days(week_start=date(2026, 1, 5), study_days=[])) == 7


def test_plan_day_serialization_and_status_labels() -> None:
    day = PlanDay(weekday=0, date=date(2026, 1, 5))
    assert day.as_dict() == {
        "weekday": 0,
        "date": "2026-01-05",
        "label": "Mon (2026-01-05)",
        "total_hours": 0,
        "entries": [],
    }
    assert status_label(TaskStatus.DONE) == "Done"
    assert status_label("in_progress") == "In progress"
    assert status_label(TaskStatus.NOT_STARTED) == "Not started"


def test_normalize_task_clamps_and_defaults() -> None:
    task = normalize_task(
        {
            "task_id": "t1",
            "title": "  Essay draft ",
            "weight": 150,
            "difficulty": 0,
            "status": "archived",
            "due_date": "",
            "course_id": "c1",
            "course_name": "History",
        }
    )
    assert task is not None
    assert task.title == "Essay draft"
    assert task.weight == 100.0
    assert task.difficulty == 3.0
    assert task.status is TaskStatus.NOT_STARTED
    assert task.due_date is None
    assert task.course_name == "History"

    dated = normalize_task({"task_id": "t2", "title": "Quiz", "weight": "n/a", "difficulty": 9, "due_date": "2026-01-09"})
    assert dated is not None
    assert dated.weight == 0.0
    assert dated.difficulty == 5.0
    assert dated.due_date == date(2026, 1, 9)

    assert normalize_task({"task_id": "t3", "title": "   "}) is None


def test_normalize_tasks_preserves_order_and_skips_invalid_rows() -> None:
    tasks = normalize_tasks(
        {
            "tasks": [
                {"task_id": "b", "title": "B", "status": "done"},
                "garbage",
                {"task_id": "a", "title": "A", "status": "in_progress"},
                {"task_id": "x", "title": ""},
            ]
        }
    )
    assert [task.task_id for task in tasks] == ["b", "a"]
    assert tasks[0].status is TaskStatus.DONE
    assert tasks[1].status is TaskStatus.IN_PROGRESS
    assert normalize_tasks(None) == []


def test_settings_resolution_clamps_and_cleans_days() -> None:
    report = ValidationReport()
    effective = resolve_effective_config(
        {"settings": {"hours_per_week": 120, "study_days": [6, 2, 2, 9], "cap_overdue": False, "theme": "dark"}},
        report,
    )
    settings = effective["settings"]
    assert settings == {"hours_per_week": 80, "study_days": [2, 6], "cap_overdue": False}
    codes = {info.code for info in report.infos}
    assert codes == {"INFO_CLAMP_HOURS_APPLIED", "INFO_STUDY_DAYS_CLEANED"}

    config = resolve_planner_config(settings)
    assert config.hours_per_week == 80.0
    assert config.study_days == (2, 6)
    assert config.cap_overdue is False


def test_settings_defaults_when_missing_or_empty() -> None:
    report = ValidationReport()
    settings = resolve_effective_config({"settings": {"study_days": []}}, report)["settings"]
    assert settings == {"hours_per_week": 10, "study_days": [0, 1, 2, 3, 4, 5, 6], "cap_overdue": True}
    assert report.infos == []
    assert resolve_planner_config(None).study_days == (0, 1, 2, 3, 4, 5, 6)


def test_domain_validation_reports_errors_and_clamp_infos() -> None:
    report = validate_domain_inputs(
        {
            "tasks": {
                "tasks": [
                    {"task_id": "t1", "title": "A", "weight": 120, "difficulty": 3},
                    {"task_id": "t1", "title": "B", "due_date": "2026-13-40"},
                    {"task_id": "t2", "title": "", "difficulty": 0, "status": "paused"},
                ]
            }
        }
    )
    error_codes = [issue.code for issue in report.errors]
    info_codes = [issue.code for issue in report.infos]
    assert error_codes == ["DUPLICATE_TASK_ID", "INVALID_DATE_FORMAT"]
    assert "INFO_CLAMP_WEIGHT_APPLIED" in info_codes
    assert "INFO_CLAMP_DIFFICULTY_APPLIED" in info_codes
    assert "INFO_TASK_SKIPPED_EMPTY_TITLE" in info_codes
    assert "INFO_STATUS_DEFAULTED" in info_codes


def test_schema_validation_reports_multiple_errors() -> None:
    report = validate_inputs_with_schema(
        {
            "plan_request": {"tasks_path": "", "settings_path": "s.json", "today": "07/01/2026"},
            "settings": {"hours_per_week": "ten", "study_days": [1, "tue"], "extra": 1},
            "tasks": {"tasks": [{"title": "No id", "weight": "high"}]},
        }
    )
    by_path = {(issue.code, issue.field_path) for issue in report.errors}
    assert ("MISSING_REQUIRED_FIELD", "$.plan_request.tasks_path") in by_path
    assert ("INVALID_DATE_FORMAT", "$.plan_request.today") in by_path
    assert ("INVALID_TYPE", "$.settings.hours_per_week") in by_path
    assert ("INVALID_TYPE", "$.settings.study_days[1]") in by_path
    assert ("UNKNOWN_FIELD", "$.settings.extra") in by_path
    assert ("MISSING_REQUIRED_FIELD", "$.tasks.tasks[0].task_id") in by_path
    assert ("INVALID_TYPE", "$.tasks.tasks[0].weight") in by_path
