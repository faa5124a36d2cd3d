from __future__ import annotations

import random
from dataclasses import replace
from datetime import date, timedelta

import pytest

from studyplan.engine import allocate_plan, estimate_hours, rank_tasks, run_planner
from studyplan.engine.scoring import compute_score
from studyplan.metrics import collect_metrics
from studyplan.models import PlannerConfig, Task, TaskStatus

TODAY = date(2026, 3, 18)
SEEDS = list(range(12))


def _random_tasks(rng: random.Random, count: int) -> list[Task]:
    tasks = []
    for index in range(count):
        due = None if rng.random() < 0.25 else TODAY + timedelta(days=rng.randint(-10, 40))
        tasks.append(
            Task(
                task_id=f"t{index}",
                title=f"Task {index}",
                due_date=due,
                weight=float(rng.choice([0, 5, 10, 15, 20, 30, 40, 60, 100])),
                difficulty=float(rng.randint(1, 5)),
                status=rng.choice(list(TaskStatus)),
            )
        )
    return tasks


def _random_config(rng: random.Random) -> PlannerConfig:
    days = tuple(sorted(rng.sample(range(7), rng.randint(1, 7))))
    return PlannerConfig(hours_per_week=rng.randint(1, 40), study_days=days, cap_overdue=rng.random() < 0.7)


@pytest.mark.parametrize("seed", SEEDS)
def test_allocation_respects_budget_cap_and_estimates(seed: int) -> None:
    rng = random.Random(seed)
    tasks = _random_tasks(rng, rng.randint(0, 12))
    config = _random_config(rng)
    result = allocate_plan(tasks=tasks, config=config, today=TODAY)

    planned = sum(day.total_hours for day in result["days"])
    assert planned + result["budget_remaining"] == result["budget"]
    assert planned <= result["budget"]

    overdue_hours = sum(entry.hours for day in result["days"] for entry in day.entries if entry.overdue)
    assert overdue_hours == result["overdue_allocated"]
    if config.cap_overdue:
        assert overdue_hours <= result["overdue_cap"]

    needed = {item.task.task_id: item.hours_needed for item in result["scored"]}
    for task_id, hours in result["allocated_by_task"].items():
        assert 1 <= hours <= needed[task_id]

    done_ids = {task.task_id for task in tasks if task.status is TaskStatus.DONE}
    for day in result["days"]:
        ids = [entry.task_id for entry in day.entries]
        assert len(ids) == len(set(ids))
        assert not done_ids.intersection(ids)
        assert day.total_hours == sum(entry.hours for entry in day.entries)
        scores = [entry.score for entry in day.entries]
        assert scores == sorted(scores, reverse=True)


@pytest.mark.parametrize("seed", SEEDS)
def test_reservation_reaches_top_tasks_before_any_fill(seed: int) -> None:
    rng = random.Random(seed)
    tasks = [replace(task, status=TaskStatus.IN_PROGRESS) for task in _random_tasks(rng, 8)]
    config = PlannerConfig(hours_per_week=3, study_days=(0, 2, 4), cap_overdue=False)
    result = allocate_plan(tasks=tasks, config=config, today=TODAY)

    top_ids = [item.task.task_id for item in result["scored"][:3]]
    assert sorted(result["allocated_by_task"]) == sorted(top_ids)
    assert all(hours == 1 for hours in result["allocated_by_task"].values())


@pytest.mark.parametrize("seed", SEEDS)
def test_same_input_same_plan(seed: int) -> None:
    runs = []
    for _ in range(2):
        rng = random.Random(seed)
        tasks = _random_tasks(rng, 10)
        runs.append(allocate_plan(tasks=tasks, config=_random_config(rng), today=TODAY))
    first, second = runs
    assert [day.as_dict() for day in first["days"]] == [day.as_dict() for day in second["days"]]


@pytest.mark.parametrize("seed", SEEDS)
def test_ranking_is_sorted_and_estimates_in_range(seed: int) -> None:
    rng = random.Random(seed)
    ranked = rank_tasks(_random_tasks(rng, 15), TODAY)
    scores = [item.score for item in ranked]
    assert scores == sorted(scores, reverse=True)
    for item in ranked:
        assert 1 <= item.hours_needed <= 10
        assert item.score >= 0.0


def test_estimate_hours_grows_with_weight_and_difficulty() -> None:
    for difficulty in range(1, 6):
        previous = 0
        for weight in range(0, 101, 5):
            hours = estimate_hours(weight, difficulty)
            assert hours >= previous
            previous = hours


def test_score_grows_as_due_date_approaches() -> None:
    scores = [
        compute_score(Task(task_id="t", title="T", weight=50, difficulty=3, due_date=TODAY + timedelta(days=days)), TODAY)
        for days in (60, 30, 10, 5, 2, 1)
    ]
    assert scores == sorted(scores)


@pytest.mark.parametrize("seed", SEEDS[:6])
def test_metrics_are_clipped_in_0_1(seed: int) -> None:
    rng = random.Random(seed)
    payload = {
        "today": TODAY.isoformat(),
        "settings": {"hours_per_week": rng.randint(1, 30), "study_days": [0, 1, 3, 5], "cap_overdue": True},
        "tasks": {
            "tasks": [
                {
                    "task_id": task.task_id,
                    "title": task.title,
                    "due_date": task.due_date.isoformat() if task.due_date else None,
                    "weight": task.weight,
                    "difficulty": task.difficulty,
                    "status": task.status.value,
                }
                for task in _random_tasks(rng, 9)
            ]
        },
    }
    metrics = collect_metrics(run_planner(payload))
    for key, value in metrics.items():
        if isinstance(value, float):
            assert 0.0 <= value <= 1.0, key
    assert metrics["confidence_level"] in {"low", "medium", "high"}
