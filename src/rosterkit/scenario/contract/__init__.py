"""Roster contract models (Pydantic schemas, validators)."""

from .models import (
    PersonalRotation,
    Person,
    PresenceOverride,
    PresenceResult,
    PresenceSource,
    PresenceStatus,
    Roster,
    SchedulingType,
    Shift,
    TaskTemplate,
    TeamRotation,
)

__all__ = [
    "PresenceStatus",
    "PresenceSource",
    "SchedulingType",
    "PresenceOverride",
    "PersonalRotation",
    "TeamRotation",
    "Person",
    "PresenceResult",
    "TaskTemplate",
    "Shift",
    "Roster",
]
