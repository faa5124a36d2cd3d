"""Resolve effective planner settings from the settings payload."""

from __future__ import annotations

from typing import Any

from studyplan.models import ALL_WEEKDAYS, PlannerConfig
from studyplan.validation import ValidationReport

DEFAULT_SETTINGS: dict[str, Any] = {
    "hours_per_week": 10,
    "study_days": list(ALL_WEEKDAYS),
    "cap_overdue": True,
}

_MIN_HOURS = 1
_MAX_HOURS = 80


def resolve_effective_config(loaded_payload: dict[str, Any], validation_report: ValidationReport) -> dict[str, Any]:
    """Build an ordered, engine-ready effective configuration payload."""
    settings = _resolve_settings(loaded_payload.get("settings", {}), validation_report)
    return {"settings": settings}


def resolve_planner_config(settings: dict[str, Any] | None) -> PlannerConfig:
    """Turn resolved settings into the engine's ``PlannerConfig``."""
    merged = {**DEFAULT_SETTINGS, **(settings or {})}
    study_days = merged.get("study_days")
    return PlannerConfig(
        hours_per_week=float(merged.get("hours_per_week", DEFAULT_SETTINGS["hours_per_week"])),
        study_days=None if study_days is None else tuple(study_days),
        cap_overdue=bool(merged.get("cap_overdue", True)),
    )


def _resolve_settings(source: Any, validation_report: ValidationReport) -> dict[str, Any]:
    settings = dict(DEFAULT_SETTINGS)
    if isinstance(source, dict):
        settings.update({key: value for key, value in source.items() if key in DEFAULT_SETTINGS})

    hours = settings.get("hours_per_week")
    if not isinstance(hours, (int, float)) or isinstance(hours, bool):
        settings["hours_per_week"] = DEFAULT_SETTINGS["hours_per_week"]
    else:
        clamped = min(_MAX_HOURS, max(_MIN_HOURS, hours))
        if clamped != hours:
            settings["hours_per_week"] = clamped
            validation_report.add_info(
                code="INFO_CLAMP_HOURS_APPLIED",
                message=f"hours_per_week was clamped into [{_MIN_HOURS},{_MAX_HOURS}]",
                field_path="$.settings.hours_per_week",
                extra={"applied_value": clamped},
            )

    settings["study_days"] = _clean_study_days(settings.get("study_days"), validation_report)
    settings["cap_overdue"] = bool(settings.get("cap_overdue", True))
    return settings


def _clean_study_days(raw: Any, validation_report: ValidationReport) -> list[int]:
    # An empty or fully invalid selection keeps the default week.
    if not isinstance(raw, list) or not raw:
        return list(ALL_WEEKDAYS)

    cleaned = sorted(
        {
            int(value)
            for value in raw
            if isinstance(value, (int, float)) and not isinstance(value, bool) and int(value) == value and 0 <= value <= 6
        }
    )
    if len(cleaned) != len(raw):
        validation_report.add_info(
            code="INFO_STUDY_DAYS_CLEANED",
            message="study_days dropped duplicate or out-of-range weekday indices",
            field_path="$.settings.study_days",
            extra={"applied_value": cleaned or list(ALL_WEEKDAYS)},
        )
    return cleaned or list(ALL_WEEKDAYS)
