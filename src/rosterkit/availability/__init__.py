"""Availability resolution (overrides, rotations, defaults)."""

from .resolver import (
    DEFAULT_PRESENCE,
    infer_override_status,
    presence_from_phase,
    resolve_presence,
    resolve_range,
)

__all__ = [
    "DEFAULT_PRESENCE",
    "infer_override_status",
    "presence_from_phase",
    "resolve_presence",
    "resolve_range",
]
