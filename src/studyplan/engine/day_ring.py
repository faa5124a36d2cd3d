"""Build the dated study days of one week.

Days are produced in ascending weekday order, dated from the Monday that
starts the week of the reference date.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from studyplan.models import ALL_WEEKDAYS, PlanDay


def to_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


def start_of_week(day: str | date) -> date:
    """Return the Monday of the week containing ``day``."""
    reference = to_date(day)
    return reference - timedelta(days=reference.weekday())


def resolve_study_days(study_days: Iterable[int] | None) -> tuple[int, ...]:
    """Return unique, sorted weekday indices in 0..6.

    ``None`` enables all seven days; an empty collection stays empty.
    """

    if study_days is None:
        return ALL_WEEKDAYS
    cleaned: set[int] = set()
    for raw in study_days:
        if isinstance(raw, bool):
            continue
        try:
            value = int(raw)
        except (TypeError, ValueError):
            continue
        if value == raw and 0 <= value <= 6:
            cleaned.add(value)
    return tuple(sorted(cleaned))


def build_plan_days(*, week_start: str | date, study_days: Iterable[int] | None) -> list[PlanDay]:
    """Return one empty ``PlanDay`` per enabled weekday.

    A selection with no valid weekday still lays out the whole week; the
    allocator places nothing in that case.
    """

    start = to_date(week_start)
    weekdays = resolve_study_days(study_days) or ALL_WEEKDAYS
    return [PlanDay(weekday=weekday, date=start + timedelta(days=weekday)) for weekday in weekdays]
