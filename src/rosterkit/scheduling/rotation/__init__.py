"""Rotation cycle calculator."""

from .cycle import RotationCycle, RotationPhase, day_in_cycle, phase_for

__all__ = ["RotationCycle", "RotationPhase", "day_in_cycle", "phase_for"]
