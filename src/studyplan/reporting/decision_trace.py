"""Decision trace utilities for allocator runtime events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass(slots=True)
class DecisionTraceCollector:
    """Collect placement decisions while allocator passes are executed."""

    start_timestamp: datetime
    _sequence: int = 0
    _items: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.start_timestamp.tzinfo is None:
            self.start_timestamp = self.start_timestamp.replace(tzinfo=timezone.utc)

    def record(
        self,
        *,
        pass_name: str,
        day_label: str | None,
        task_id: str,
        score: float,
        hours: int,
        applied_rules: list[str],
        blocked_constraints: list[str],
        note: str,
    ) -> None:
        self._sequence += 1
        timestamp = self.start_timestamp + timedelta(seconds=self._sequence)
        self._items.append(
            {
                "decision_id": f"d-{self._sequence:06d}",
                "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
                "pass": pass_name,
                "day": day_label,
                "task_id": task_id,
                "score": float(score),
                "hours": int(hours),
                "applied_rules": applied_rules,
                "blocked_constraints": blocked_constraints,
                "note": note,
            }
        )

    def __len__(self) -> int:
        return len(self._items)

    def as_list(self) -> list[dict[str, Any]]:
        """Return trace sorted in deterministic chronological order."""
        return sorted(self._items, key=lambda item: (str(item["timestamp"]), str(item["decision_id"])))
