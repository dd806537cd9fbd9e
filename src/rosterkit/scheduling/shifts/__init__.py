"""Shift expansion from task templates."""

from .expander import (
    DEFAULT_DURATION_HOURS,
    DEFAULT_HORIZON_DAYS,
    DEFAULT_START_TIME,
    MAX_TILES_PER_DAY,
    expand_task,
    shift_id_for,
    task_runs_on,
)

__all__ = [
    "DEFAULT_HORIZON_DAYS",
    "DEFAULT_START_TIME",
    "DEFAULT_DURATION_HOURS",
    "MAX_TILES_PER_DAY",
    "expand_task",
    "shift_id_for",
    "task_runs_on",
]
