"""Pydantic models describing roster inputs and engine outputs."""

from __future__ import annotations

import datetime as dt
import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from rosterkit.core.errors import RotationConfigError
from rosterkit.scheduling.rotation import RotationCycle
from rosterkit.scheduling.timeline import (
    END_OF_DAY,
    START_OF_DAY,
    CalendarDate,
    normalise_time_of_day,
)


class PresenceStatus(str, Enum):
    ARRIVAL = "arrival"
    FULL = "full"
    DEPARTURE = "departure"
    HOME = "home"


class PresenceSource(str, Enum):
    MANUAL = "manual"
    PERSONAL_ROTATION = "personal_rotation"
    TEAM_ROTATION = "rotation"
    DEFAULT = "default"


class SchedulingType(str, Enum):
    RECURRING = "recurring"
    ONE_TIME = "one-time"


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


class PresenceOverride(BaseModel):
    """Human-entered presence record for one date.

    Attributes
    ----------
    is_available:
        Whether the person is present on the date.
    start_hour / end_hour:
        ``HH:MM`` window of presence. ``00:00``/``23:59`` means the whole day.
    status:
        Optional explicit status tag. When absent the resolver infers it from the hours.
    source:
        Always ``manual`` for overrides.
    """

    is_available: bool = True
    start_hour: str = START_OF_DAY
    end_hour: str = END_OF_DAY
    status: PresenceStatus | None = None
    source: PresenceSource = PresenceSource.MANUAL

    @field_validator("start_hour", "end_hour", mode="before")
    @classmethod
    def _normalise_hours(cls, value: Any, info: ValidationInfo) -> str:
        if _is_blank(value):
            return START_OF_DAY if info.field_name == "start_hour" else END_OF_DAY
        return normalise_time_of_day(str(value))

    @field_validator("status", mode="before")
    @classmethod
    def _legacy_status(cls, value: Any) -> Any:
        if _is_blank(value):
            return None
        if isinstance(value, str) and value.strip().lower() == "base":
            return PresenceStatus.FULL
        return value


class PersonalRotation(BaseModel):
    """Per-person on/off cycle.

    Fields are optional so incomplete rows still load; :meth:`cycle` decides whether the record is
    usable.
    """

    is_active: bool = False
    start_date: CalendarDate | None = None
    days_on: int | None = None
    days_off: int | None = None

    @field_validator("start_date", "days_on", "days_off", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if _is_blank(value) else value

    def cycle(self) -> RotationCycle:
        """Return the validated cycle or raise :class:`RotationConfigError`."""
        if self.start_date is None:
            raise RotationConfigError("personal rotation is missing start_date")
        if self.days_on is None or self.days_off is None:
            raise RotationConfigError("personal rotation is missing days_on/days_off")
        return RotationCycle(self.start_date, self.days_on, self.days_off)


class TeamRotation(BaseModel):
    """Team-wide on-base/at-home cycle shared by every member of ``team_id``.

    Attributes
    ----------
    team_id:
        Team the rotation belongs to (at most one rotation per team).
    start_date:
        Anchor date of the first cycle.
    days_on_base / days_at_home:
        Cycle durations in days (both ``> 0``).
    end_date:
        Optional last day of the rotation; later dates resolve to ``home``.
    """

    team_id: str
    start_date: CalendarDate | None = None
    days_on_base: int | None = None
    days_at_home: int | None = None
    end_date: CalendarDate | None = None

    @field_validator("start_date", "end_date", "days_on_base", "days_at_home", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if _is_blank(value) else value

    def cycle(self) -> RotationCycle:
        """Return the validated cycle or raise :class:`RotationConfigError`."""
        if self.start_date is None:
            raise RotationConfigError(f"team rotation {self.team_id} is missing start_date")
        if self.days_on_base is None or self.days_at_home is None:
            raise RotationConfigError(
                f"team rotation {self.team_id} is missing days_on_base/days_at_home"
            )
        return RotationCycle(self.start_date, self.days_on_base, self.days_at_home, self.end_date)


class Person(BaseModel):
    """Person record as consumed by the resolver."""

    id: str
    name: str | None = None
    team_id: str | None = None
    overrides: dict[CalendarDate, PresenceOverride] = Field(default_factory=dict)
    personal_rotation: PersonalRotation | None = None

    @field_validator("team_id", mode="before")
    @classmethod
    def _blank_team(cls, value: Any) -> Any:
        return None if _is_blank(value) else str(value)


class PresenceResult(BaseModel):
    """Resolved presence for one (person, date) pair."""

    is_available: bool
    start_hour: str
    end_hour: str
    status: PresenceStatus
    source: PresenceSource

    def to_row(self, person_id: str, date: CalendarDate) -> dict[str, object]:
        """Flatten into the snapshot row layout."""
        return {
            "person_id": person_id,
            "date": str(date),
            "status": self.status.value,
            "start_time": self.start_hour,
            "end_time": self.end_hour,
            "source": self.source.value,
        }


class TaskTemplate(BaseModel):
    """Recurring or one-time work definition used to generate shifts.

    Attributes
    ----------
    id:
        Task identifier copied onto every generated shift.
    scheduling_type:
        ``recurring`` (every day in the horizon) or ``one-time`` (only on ``specific_date``).
    specific_date:
        Single date the task runs on. Required for one-time tasks to produce anything.
    default_start_time:
        ``HH:MM`` start of the first shift each day (``08:00`` when unset).
    duration_hours:
        Shift length in hours (``4`` when unset or zero). Must be non-negative.
    is_247:
        Tile shifts back-to-back to cover 24 hours from the start time.
    start_date / end_date:
        Optional validity window; days outside it generate nothing.
    """

    id: str
    name: str | None = None
    scheduling_type: SchedulingType = SchedulingType.RECURRING
    specific_date: CalendarDate | None = None
    default_start_time: str | None = None
    duration_hours: float | None = None
    is_247: bool = False
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None

    @field_validator("specific_date", "start_date", "end_date", "default_start_time", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if _is_blank(value) else value

    @field_validator("default_start_time")
    @classmethod
    def _normalise_start(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalise_time_of_day(value)

    @field_validator("duration_hours", mode="before")
    @classmethod
    def _duration_non_negative(cls, value: Any) -> Any:
        if _is_blank(value):
            return None
        hours = float(value)
        if not math.isfinite(hours):
            raise ValueError("TaskTemplate.duration_hours must be a finite number")
        if hours < 0:
            raise ValueError("TaskTemplate.duration_hours must be non-negative")
        return value

    @model_validator(mode="after")
    def _window_ordered(self) -> TaskTemplate:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(f"Task {self.id} end_date precedes start_date")
        return self


class Shift(BaseModel):
    """Concrete shift instance produced by the expander."""

    id: str
    task_id: str
    start_time: dt.datetime
    end_time: dt.datetime
    assigned_person_ids: list[str] = Field(default_factory=list)
    is_locked: bool = False

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600.0


class Roster(BaseModel):
    """Bundle of people, team rotations and task templates loaded together."""

    name: str
    people: list[Person] = Field(default_factory=list)
    team_rotations: list[TeamRotation] = Field(default_factory=list)
    tasks: list[TaskTemplate] = Field(default_factory=list)

    @model_validator(mode="after")
    def _cross_validate(self) -> Roster:
        seen_people: set[str] = set()
        for person in self.people:
            if person.id in seen_people:
                raise ValueError(f"Duplicate person id={person.id}")
            seen_people.add(person.id)
        seen_teams: set[str] = set()
        for rotation in self.team_rotations:
            if rotation.team_id in seen_teams:
                raise ValueError(f"Team {rotation.team_id} has more than one rotation")
            seen_teams.add(rotation.team_id)
        seen_tasks: set[str] = set()
        for task in self.tasks:
            if task.id in seen_tasks:
                raise ValueError(f"Duplicate task id={task.id}")
            seen_tasks.add(task.id)
        return self

    def person_ids(self) -> list[str]:
        return [p.id for p in self.people]

    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    def get_person(self, person_id: str) -> Person:
        for person in self.people:
            if person.id == person_id:
                return person
        raise KeyError(person_id)

    def get_task(self, task_id: str) -> TaskTemplate:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise KeyError(task_id)

    def rotation_for_team(self, team_id: str | None) -> TeamRotation | None:
        if team_id is None:
            return None
        return next((r for r in self.team_rotations if r.team_id == team_id), None)
