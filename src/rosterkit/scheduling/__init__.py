"""Scheduling utilities (timeline, rotation cycles, shift expansion)."""

from .rotation import RotationCycle, RotationPhase, phase_for
from .timeline import CalendarDate, date_range

__all__ = ["CalendarDate", "date_range", "RotationCycle", "RotationPhase", "phase_for"]
