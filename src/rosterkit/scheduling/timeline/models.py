"""Calendar-day and time-of-day primitives.

Every rotation and shift computation is keyed on a wall-clock calendar day. ``CalendarDate`` holds
only ``(year, month, day)`` so day arithmetic never passes through a timestamp (and therefore never
drifts by one near midnight in a non-UTC zone).
"""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from rosterkit.core.errors import DateParseError, TimeParseError

_DATE_KEY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")

START_OF_DAY = "00:00"
END_OF_DAY = "23:59"


@dataclass(frozen=True, slots=True, order=True)
class CalendarDate:
    """A wall-clock calendar day, free of time-of-day and time zone.

    Attributes
    ----------
    year, month, day:
        Gregorian calendar components. ``month`` is one-indexed.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        for name in ("year", "month", "day"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise DateParseError(f"CalendarDate.{name} must be an integer (got {value!r})")
        try:
            dt.date(self.year, self.month, self.day)
        except ValueError as exc:
            raise DateParseError(
                f"Invalid calendar date {self.year:04d}-{self.month:02d}-{self.day:02d}: {exc}"
            ) from exc

    @classmethod
    def parse(cls, text: str) -> "CalendarDate":
        """Parse a canonical ``YYYY-MM-DD`` key."""
        if not isinstance(text, str):
            raise DateParseError(f"Date key must be a string (got {type(text).__name__})")
        match = _DATE_KEY_RE.match(text.strip())
        if match is None:
            raise DateParseError(f"Date key '{text}' is not in YYYY-MM-DD format")
        year, month, day = (int(part) for part in match.groups())
        return cls(year, month, day)

    @classmethod
    def from_date(cls, value: dt.date) -> "CalendarDate":
        if isinstance(value, dt.datetime):
            raise DateParseError("CalendarDate cannot be built from a datetime; pass a date")
        return cls(value.year, value.month, value.day)

    @classmethod
    def coerce(cls, value: Any) -> "CalendarDate":
        """Accept a ``CalendarDate``, a plain ``datetime.date`` or a canonical string."""
        if isinstance(value, CalendarDate):
            return value
        if isinstance(value, dt.date):
            return cls.from_date(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise DateParseError(f"Cannot interpret {value!r} as a calendar date")

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )

    def ordinal(self) -> int:
        """Proleptic Gregorian ordinal (day 1 is 0001-01-01)."""
        return dt.date(self.year, self.month, self.day).toordinal()

    def days_until(self, other: "CalendarDate") -> int:
        """Signed number of days from ``self`` to ``other``."""
        return other.ordinal() - self.ordinal()

    def add_days(self, days: int) -> "CalendarDate":
        return CalendarDate.from_date(dt.date.fromordinal(self.ordinal() + int(days)))

    def to_date(self) -> dt.date:
        return dt.date(self.year, self.month, self.day)

    def at(self, hour: int, minute: int) -> dt.datetime:
        """Naive local instant at ``hour:minute`` on this day."""
        return dt.datetime(self.year, self.month, self.day, hour, minute)

    def __sub__(self, other: "CalendarDate") -> int:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return other.days_until(self)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


def date_range(start: CalendarDate, days: int) -> Iterator[CalendarDate]:
    """Yield ``days`` consecutive dates beginning at ``start``."""
    base = start.ordinal()
    for offset in range(max(int(days), 0)):
        yield CalendarDate.from_date(dt.date.fromordinal(base + offset))


def parse_time_of_day(value: str) -> tuple[int, int]:
    """Parse ``HH:MM`` (or storage-form ``HH:MM:SS``) into ``(hour, minute)``.

    Seconds are accepted and dropped.
    """
    if not isinstance(value, str):
        raise TimeParseError(f"Time of day must be a string (got {type(value).__name__})")
    match = _TIME_RE.match(value.strip())
    if match is None:
        raise TimeParseError(f"Time of day '{value}' is not in HH:MM format")
    hour, minute = int(match.group(1)), int(match.group(2))
    seconds = match.group(3)
    if hour > 23 or minute > 59 or (seconds is not None and int(seconds) > 59):
        raise TimeParseError(f"Time of day '{value}' is out of range")
    return hour, minute


def format_time_of_day(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def normalise_time_of_day(value: str) -> str:
    """Return the canonical zero-padded ``HH:MM`` form of ``value``."""
    return format_time_of_day(*parse_time_of_day(value))


__all__ = [
    "CalendarDate",
    "date_range",
    "parse_time_of_day",
    "format_time_of_day",
    "normalise_time_of_day",
    "START_OF_DAY",
    "END_OF_DAY",
]
