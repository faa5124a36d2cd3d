"""Build CLI reports."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from studyplan.validation import ValidationError, ValidationReport

PLAN_OUTPUT_SCHEMA_VERSION = "1.0.0"


def build_error_report(errors: list[ValidationError], code: str = "validation_error") -> dict[str, Any]:
    """Return a JSON-serializable error report."""
    return {
        "status": "error",
        "error": {
            "code": code,
            "count": len(errors),
            "details": [err.as_dict() for err in errors],
        },
    }


def build_error_report_with_validation(
    errors: list[ValidationError],
    validation_report: ValidationReport,
    code: str = "validation_error",
) -> dict[str, Any]:
    payload = build_error_report(errors, code=code)
    payload["validation_report"] = validation_report.as_dict()
    return payload


def build_plan_output(
    result: dict[str, Any], metrics: dict[str, Any], validation_report: ValidationReport
) -> dict[str, Any]:
    generated_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    plan_id = f"plan-{generated_at.replace(':', '').replace('-', '').replace('T', '-').replace('Z', '')}"
    return {
        "schema_version": PLAN_OUTPUT_SCHEMA_VERSION,
        "plan_id": plan_id,
        "generated_at": generated_at,
        "plan_summary": result.get("plan_summary", {}),
        "week_summary": result.get("week_summary", {}),
        "daily_plan": result.get("daily_plan", []),
        "metrics": metrics,
        "warnings": result.get("warnings", []),
        "suggestions": result.get("suggestions", []),
        "decision_trace": result.get("decision_trace", []),
        "effective_config": result.get("effective_config", {}),
        "validation_report": validation_report.as_dict(),
    }


def build_success_report(
    result: dict[str, Any], metrics: dict[str, Any], validation_report: ValidationReport
) -> dict[str, Any]:
    """Return a JSON-serializable success report."""
    return {
        "status": "ok",
        "result": result,
        "metrics": metrics,
        "plan_output": build_plan_output(result, metrics, validation_report),
    }


def build_summary_report(result: dict[str, Any], validation_report: ValidationReport) -> dict[str, Any]:
    """Return only the dashboard view of a planner result."""
    return {
        "status": "ok",
        "week_summary": result.get("week_summary", {}),
        "plan_summary": result.get("plan_summary", {}),
        "validation_report": validation_report.as_dict(),
    }
