"""Expand task templates into concrete shift instances over a day horizon."""

from __future__ import annotations

import datetime as dt
import uuid
import warnings

from rosterkit.core.errors import RosterValueError, TilingOverflowWarning
from rosterkit.scenario.contract.models import SchedulingType, Shift, TaskTemplate
from rosterkit.scheduling.timeline import CalendarDate, date_range, parse_time_of_day

__all__ = [
    "DEFAULT_HORIZON_DAYS",
    "DEFAULT_START_TIME",
    "DEFAULT_DURATION_HOURS",
    "MAX_TILES_PER_DAY",
    "expand_task",
    "shift_id_for",
    "task_runs_on",
]

DEFAULT_HORIZON_DAYS = 30
DEFAULT_START_TIME = "08:00"
DEFAULT_DURATION_HOURS = 4.0
MAX_TILES_PER_DAY = 20

_SHIFT_NAMESPACE = uuid.UUID("6f1c9e1a-3b7d-4c55-9a0e-2d4b8f7a1c30")


def shift_id_for(task_id: str, start_time: dt.datetime) -> str:
    """Stable identifier for the shift of ``task_id`` starting at ``start_time``."""
    return str(uuid.uuid5(_SHIFT_NAMESPACE, f"{task_id}|{start_time.isoformat()}"))


def task_runs_on(task: TaskTemplate, day: CalendarDate) -> bool:
    """Return ``True`` when ``task`` generates shifts on ``day``."""
    if task.scheduling_type is SchedulingType.ONE_TIME and task.specific_date is None:
        return False
    if task.specific_date is not None and task.specific_date != day:
        return False
    if task.start_date is not None and day < task.start_date:
        return False
    if task.end_date is not None and day > task.end_date:
        return False
    return True


def _make_shift(task_id: str, start: dt.datetime, end: dt.datetime) -> Shift:
    return Shift(
        id=shift_id_for(task_id, start),
        task_id=task_id,
        start_time=start,
        end_time=end,
        assigned_person_ids=[],
        is_locked=False,
    )


def _tile_day(
    task: TaskTemplate,
    day: CalendarDate,
    start: dt.datetime,
    length: dt.timedelta,
    max_tiles: int,
) -> list[Shift]:
    day_limit = start + dt.timedelta(hours=24)
    tiles: list[Shift] = []
    current = start
    while current < day_limit and len(tiles) < max_tiles:
        if task.end_date is not None and CalendarDate.from_date(current.date()) > task.end_date:
            break
        end = current + length
        tiles.append(_make_shift(task.id, current, end))
        current = end
    if current < day_limit and len(tiles) >= max_tiles:
        warnings.warn(
            f"Task {task.id}: 24/7 tiling on {day} stopped at the {max_tiles}-shift cap "
            f"(duration_hours={length.total_seconds() / 3600:g}); coverage is incomplete.",
            TilingOverflowWarning,
            stacklevel=3,
        )
    return tiles


def expand_task(
    task: TaskTemplate,
    horizon_start: CalendarDate | str,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    *,
    max_tiles_per_day: int = MAX_TILES_PER_DAY,
) -> list[Shift]:
    """Generate the concrete shifts of ``task`` over ``[horizon_start, horizon_start + horizon_days)``.

    Parameters
    ----------
    task:
        Template to expand.
    horizon_start:
        First day of the generation horizon.
    horizon_days:
        Number of days to cover (defaults to 30).
    max_tiles_per_day:
        Safety cap on 24/7 tiles per day. Reaching it emits
        :class:`~rosterkit.core.errors.TilingOverflowWarning` and the truncated day is kept.

    Returns
    -------
    list of Shift
        Shifts in chronological order with no repeated ``(task_id, start_time)`` pair. Every shift
        is unassigned and unlocked.

    Notes
    -----
    24/7 tiles are laid back-to-back while a tile's start is before the day's start + 24h, so the
    last tile may run past that boundary; it is not shortened.
    """

    if horizon_days < 0:
        raise RosterValueError(f"horizon_days must be >= 0 (got {horizon_days})")
    start_day = CalendarDate.coerce(horizon_start)
    hour, minute = parse_time_of_day(task.default_start_time or DEFAULT_START_TIME)
    length = dt.timedelta(hours=task.duration_hours or DEFAULT_DURATION_HOURS)

    shifts: list[Shift] = []
    seen: set[tuple[str, dt.datetime]] = set()
    for day in date_range(start_day, horizon_days):
        if not task_runs_on(task, day):
            continue
        start = day.at(hour, minute)
        if task.is_247:
            day_shifts = _tile_day(task, day, start, length, max_tiles_per_day)
        else:
            day_shifts = [_make_shift(task.id, start, start + length)]
        for shift in day_shifts:
            key = (shift.task_id, shift.start_time)
            if key in seen:
                continue
            seen.add(key)
            shifts.append(shift)
    return shifts
