"""Core utilities shared across rosterkit modules."""

from .errors import (
    DateParseError,
    RosterValueError,
    RotationConfigError,
    RotationConfigWarning,
    TilingOverflowWarning,
    TimeParseError,
)

__all__ = [
    "RosterValueError",
    "DateParseError",
    "TimeParseError",
    "RotationConfigError",
    "RotationConfigWarning",
    "TilingOverflowWarning",
]
