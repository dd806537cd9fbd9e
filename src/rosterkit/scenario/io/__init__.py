"""Roster I/O helpers."""

from .loaders import load_roster, read_csv

__all__ = ["load_roster", "read_csv"]
