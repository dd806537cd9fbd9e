"""Rotation cycle arithmetic.

A rotation is an infinite on/off cycle anchored at a start date. Day ``0`` of every cycle is the
arrival day, day ``on_days - 1`` is the departure day, the days in between are full on-base days and
the remaining ``off_days`` are spent at home. Before the anchor date the rotation has not started.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from rosterkit.core.errors import RotationConfigError
from rosterkit.scheduling.timeline.models import CalendarDate


class RotationPhase(str, Enum):
    ARRIVAL = "arrival"
    FULL = "full"
    DEPARTURE = "departure"
    HOME = "home"

    @property
    def is_present(self) -> bool:
        return self is not RotationPhase.HOME


@dataclass(frozen=True, slots=True)
class RotationCycle:
    """Validated on/off cycle.

    Attributes
    ----------
    start_date:
        Anchor date; day 0 of the first cycle.
    on_days:
        Days on base per cycle (``> 0``).
    off_days:
        Days at home per cycle (``> 0``).
    end_date:
        Optional last day the cycle grants presence. Later dates resolve to ``HOME``.
    """

    start_date: CalendarDate
    on_days: int
    off_days: int
    end_date: CalendarDate | None = None

    def __post_init__(self) -> None:
        if self.on_days <= 0:
            raise RotationConfigError(f"on_days must be > 0 (got {self.on_days})")
        if self.off_days <= 0:
            raise RotationConfigError(f"off_days must be > 0 (got {self.off_days})")
        if self.end_date is not None and self.end_date < self.start_date:
            raise RotationConfigError("end_date must be on or after start_date")

    @property
    def cycle_length(self) -> int:
        return self.on_days + self.off_days


@lru_cache(maxsize=4096)
def _phase_for_day(day_in_cycle: int, on_days: int) -> RotationPhase:
    # arrival is checked first so a one-day stint resolves to ARRIVAL
    if day_in_cycle == 0:
        return RotationPhase.ARRIVAL
    if day_in_cycle < on_days - 1:
        return RotationPhase.FULL
    if day_in_cycle == on_days - 1:
        return RotationPhase.DEPARTURE
    return RotationPhase.HOME


def day_in_cycle(date: CalendarDate, cycle: RotationCycle) -> int | None:
    """Zero-based position of ``date`` in its cycle, or ``None`` before the start date."""
    elapsed = date - cycle.start_date
    if elapsed < 0:
        return None
    return elapsed % cycle.cycle_length


def phase_for(date: CalendarDate, cycle: RotationCycle) -> RotationPhase | None:
    """Return the rotation phase on ``date``.

    Parameters
    ----------
    date:
        Calendar day to evaluate.
    cycle:
        Rotation definition.

    Returns
    -------
    RotationPhase or None
        ``None`` when ``date`` falls before ``cycle.start_date`` (the rotation is not yet in effect
        and callers fall through to the next source).
    """

    position = day_in_cycle(date, cycle)
    if position is None:
        return None
    if cycle.end_date is not None and date > cycle.end_date:
        return RotationPhase.HOME
    return _phase_for_day(position, cycle.on_days)


__all__ = ["RotationPhase", "RotationCycle", "day_in_cycle", "phase_for"]
