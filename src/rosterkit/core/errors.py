"""Common rosterkit-specific exceptions and warning categories."""


class RosterValueError(ValueError):
    """Raised when rosterkit detects invalid user-provided data."""


class DateParseError(RosterValueError):
    """Raised when a calendar date key is not a canonical ``YYYY-MM-DD`` value."""


class TimeParseError(RosterValueError):
    """Raised when a time-of-day value is not ``HH:MM``."""


class RotationConfigError(RosterValueError):
    """Raised when a rotation record cannot be turned into a cycle.

    The resolver treats this as "rotation does not apply" and moves on to the next
    precedence level.
    """


class RotationConfigWarning(UserWarning):
    """Emitted when an incomplete rotation record is skipped during resolution."""


class TilingOverflowWarning(RuntimeWarning):
    """Emitted when 24/7 tiling hits the per-day safety cap."""


__all__ = [
    "RosterValueError",
    "DateParseError",
    "TimeParseError",
    "RotationConfigError",
    "RotationConfigWarning",
    "TilingOverflowWarning",
]
