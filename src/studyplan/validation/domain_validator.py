"""Domain-level task rules that a JSON schema cannot express."""

from __future__ import annotations

from datetime import date
from typing import Any

from .errors import ValidationReport

KNOWN_STATUSES = ("not_started", "in_progress", "done")


def validate_domain_inputs(loaded_payload: dict[str, Any]) -> ValidationReport:
    """Validate task coherence; range problems are reported as clamp infos, not errors."""
    report = ValidationReport()

    tasks_payload = loaded_payload.get("tasks", {})
    tasks = tasks_payload.get("tasks", []) if isinstance(tasks_payload, dict) else []

    task_ids: set[str] = set()
    for idx, task in enumerate(tasks):
        if not isinstance(task, dict):
            continue
        path = f"$.tasks.tasks[{idx}]"

        task_id = task.get("task_id")
        if isinstance(task_id, str):
            if task_id in task_ids:
                report.add_error(
                    code="DUPLICATE_TASK_ID",
                    message=f"Duplicate task_id: {task_id}",
                    field_path=f"{path}.task_id",
                    suggested_fix="Task ids must be unique across courses.",
                )
            task_ids.add(task_id)

        title = task.get("title")
        if not isinstance(title, str) or not title.strip():
            report.add_info(
                code="INFO_TASK_SKIPPED_EMPTY_TITLE",
                message="Task without a title is not schedulable and was skipped",
                field_path=f"{path}.title",
            )

        due_date = task.get("due_date")
        if isinstance(due_date, str) and due_date.strip() and _parse_date(due_date.strip()) is None:
            report.add_error(
                code="INVALID_DATE_FORMAT",
                message=f"due_date must be YYYY-MM-DD, got {due_date!r}",
                field_path=f"{path}.due_date",
                suggested_fix="Use an ISO date or leave due_date empty for undated tasks.",
            )
        elif due_date is not None and not isinstance(due_date, str):
            report.add_error(
                code="INVALID_TYPE",
                message="due_date must be a string or null",
                field_path=f"{path}.due_date",
            )

        _report_clamp(task.get("weight"), 0.0, 100.0, "INFO_CLAMP_WEIGHT_APPLIED", f"{path}.weight", report)
        _report_clamp(task.get("difficulty"), 1.0, 5.0, "INFO_CLAMP_DIFFICULTY_APPLIED", f"{path}.difficulty", report)

        status = task.get("status")
        if status is not None and status not in KNOWN_STATUSES:
            report.add_info(
                code="INFO_STATUS_DEFAULTED",
                message=f"Unknown status {status!r} treated as not_started",
                field_path=f"{path}.status",
            )

    return report


def _report_clamp(
    value: Any,
    low: float,
    high: float,
    code: str,
    field_path: str,
    report: ValidationReport,
) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return
    clamped = min(high, max(low, float(value)))
    if clamped != value:
        report.add_info(
            code=code,
            message=f"Value was clamped into [{low:g},{high:g}]",
            field_path=field_path,
            extra={"applied_value": clamped},
        )


def _parse_date(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None
