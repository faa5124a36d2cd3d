"""Input normalization."""

from .config_resolver import DEFAULT_SETTINGS, resolve_effective_config, resolve_planner_config
from .request import normalize_request
from .tasks import normalize_task, normalize_tasks

__all__ = [
    "DEFAULT_SETTINGS",
    "normalize_request",
    "normalize_task",
    "normalize_tasks",
    "resolve_effective_config",
    "resolve_planner_config",
]
