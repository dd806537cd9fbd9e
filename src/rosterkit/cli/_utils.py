"""CLI helper utilities for rosterkit."""

from __future__ import annotations

import warnings
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

import typer

from rosterkit.core.errors import DateParseError
from rosterkit.scheduling.timeline import CalendarDate


def parse_date_option(value: str, *, option: str = "--start") -> CalendarDate:
    """Parse a ``YYYY-MM-DD`` CLI value, converting failures into ``typer.BadParameter``."""
    try:
        return CalendarDate.parse(value)
    except DateParseError as exc:
        raise typer.BadParameter(str(exc), param_hint=option) from exc


def format_hours(start_hour: str, end_hour: str) -> str:
    return f"{start_hour}-{end_hour}"


@contextmanager
def collect_warnings(*categories: type[Warning]) -> Iterator[list[str]]:
    """Capture warnings of the given categories as messages (all warnings when none given)."""
    messages: list[str] = []
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        yield messages
    wanted: Sequence[type[Warning]] = categories or (Warning,)
    for item in caught:
        if issubclass(item.category, tuple(wanted)):
            message = str(item.message)
            if message not in messages:
                messages.append(message)
        else:
            warnings.warn_explicit(item.message, item.category, item.filename, item.lineno)
