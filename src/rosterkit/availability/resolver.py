"""Presence resolution across overrides, rotations and defaults.

Sources are evaluated in a fixed order and the first one that applies wins outright:

1. a manual override stored on the person for that date,
2. the person's active personal rotation,
3. the rotation configured for the person's team,
4. the default (present all day).

Personal rotations are consulted before team rotations whenever they are active, even when both
would produce a phase for the date.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Iterable, Iterator

from rosterkit.core.errors import RotationConfigError, RotationConfigWarning
from rosterkit.scenario.contract.models import (
    Person,
    PersonalRotation,
    PresenceOverride,
    PresenceResult,
    PresenceSource,
    PresenceStatus,
    TeamRotation,
)
from rosterkit.scheduling.rotation import RotationPhase, phase_for
from rosterkit.scheduling.timeline import END_OF_DAY, START_OF_DAY, CalendarDate, date_range

ConfigErrorHandler = Callable[[str], None]

__all__ = [
    "DEFAULT_PRESENCE",
    "infer_override_status",
    "presence_from_phase",
    "resolve_presence",
    "resolve_range",
]

DEFAULT_PRESENCE = PresenceResult(
    is_available=True,
    start_hour=START_OF_DAY,
    end_hour=END_OF_DAY,
    status=PresenceStatus.FULL,
    source=PresenceSource.DEFAULT,
)

_PHASE_STATUS: dict[RotationPhase, PresenceStatus] = {
    RotationPhase.ARRIVAL: PresenceStatus.ARRIVAL,
    RotationPhase.FULL: PresenceStatus.FULL,
    RotationPhase.DEPARTURE: PresenceStatus.DEPARTURE,
    RotationPhase.HOME: PresenceStatus.HOME,
}


def infer_override_status(override: PresenceOverride) -> PresenceStatus:
    """Return the override's tagged status, or infer one from its hours."""
    if override.status is not None:
        return override.status
    if not override.is_available:
        return PresenceStatus.HOME
    if override.start_hour != START_OF_DAY:
        return PresenceStatus.ARRIVAL
    if override.end_hour != END_OF_DAY:
        return PresenceStatus.DEPARTURE
    return PresenceStatus.FULL


def presence_from_phase(phase: RotationPhase, source: PresenceSource) -> PresenceResult:
    """Map a rotation phase onto a presence record."""
    status = _PHASE_STATUS[phase]
    if phase is RotationPhase.HOME:
        return PresenceResult(
            is_available=False,
            start_hour=START_OF_DAY,
            end_hour=START_OF_DAY,
            status=status,
            source=source,
        )
    return PresenceResult(
        is_available=True,
        start_hour=START_OF_DAY,
        end_hour=END_OF_DAY,
        status=status,
        source=source,
    )


def _report_config_error(message: str, on_config_error: ConfigErrorHandler | None) -> None:
    if on_config_error is None:
        warnings.warn(message, RotationConfigWarning, stacklevel=4)
    else:
        on_config_error(message)


def _personal_phase(
    rotation: PersonalRotation | None,
    day: CalendarDate,
    person_id: str,
    on_config_error: ConfigErrorHandler | None = None,
) -> RotationPhase | None:
    if rotation is None or not rotation.is_active:
        return None
    try:
        cycle = rotation.cycle()
    except RotationConfigError as exc:
        _report_config_error(
            f"Person {person_id}: personal rotation ignored ({exc})", on_config_error
        )
        return None
    return phase_for(day, cycle)


def _team_phase(
    team_id: str | None,
    team_rotations: Iterable[TeamRotation],
    day: CalendarDate,
    on_config_error: ConfigErrorHandler | None = None,
) -> RotationPhase | None:
    if team_id is None:
        return None
    rotation = next((r for r in team_rotations if r.team_id == team_id), None)
    if rotation is None:
        return None
    try:
        cycle = rotation.cycle()
    except RotationConfigError as exc:
        _report_config_error(f"Team {team_id}: rotation ignored ({exc})", on_config_error)
        return None
    return phase_for(day, cycle)


def resolve_presence(
    person: Person,
    date: CalendarDate | str,
    team_rotations: Iterable[TeamRotation] = (),
    *,
    on_config_error: ConfigErrorHandler | None = None,
) -> PresenceResult:
    """Resolve a person's presence on one calendar date.

    Parameters
    ----------
    person:
        Person record carrying overrides, team membership and an optional personal rotation.
    date:
        Target date as a :class:`CalendarDate`, ``datetime.date`` or ``YYYY-MM-DD`` key.
    team_rotations:
        Known team rotations; the first whose ``team_id`` matches the person's team is used.
    on_config_error:
        Receives the message of every rotation record skipped as incomplete. When ``None`` the
        message is issued as :class:`~rosterkit.core.errors.RotationConfigWarning`.

    Returns
    -------
    PresenceResult
        Exactly one record for every (person, date) input.

    Raises
    ------
    DateParseError
        If ``date`` is not a valid calendar date key.

    Notes
    -----
    An incomplete rotation record never aborts resolution: it is reported through
    ``on_config_error`` (or as a warning) and the next source is tried.
    """

    day = CalendarDate.coerce(date)

    override = person.overrides.get(day)
    if override is not None:
        return PresenceResult(
            is_available=override.is_available,
            start_hour=override.start_hour,
            end_hour=override.end_hour,
            status=infer_override_status(override),
            source=override.source,
        )

    phase = _personal_phase(person.personal_rotation, day, person.id, on_config_error)
    if phase is not None:
        return presence_from_phase(phase, PresenceSource.PERSONAL_ROTATION)

    phase = _team_phase(person.team_id, team_rotations, day, on_config_error)
    if phase is not None:
        return presence_from_phase(phase, PresenceSource.TEAM_ROTATION)

    return DEFAULT_PRESENCE.model_copy()


def resolve_range(
    person: Person,
    start: CalendarDate | str,
    days: int,
    team_rotations: Iterable[TeamRotation] = (),
    *,
    on_config_error: ConfigErrorHandler | None = None,
) -> Iterator[tuple[CalendarDate, PresenceResult]]:
    """Yield ``(date, presence)`` for ``days`` consecutive dates from ``start``."""
    rotations = list(team_rotations)
    for day in date_range(CalendarDate.coerce(start), days):
        yield day, resolve_presence(person, day, rotations, on_config_error=on_config_error)
