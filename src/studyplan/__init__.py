"""Weekly study planner: task prioritization and hour allocation."""

__version__ = "0.1.0"
