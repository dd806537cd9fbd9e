"""Calendar-day and time-of-day primitives."""

from .models import (
    END_OF_DAY,
    START_OF_DAY,
    CalendarDate,
    date_range,
    format_time_of_day,
    normalise_time_of_day,
    parse_time_of_day,
)

__all__ = [
    "CalendarDate",
    "date_range",
    "parse_time_of_day",
    "format_time_of_day",
    "normalise_time_of_day",
    "START_OF_DAY",
    "END_OF_DAY",
]
