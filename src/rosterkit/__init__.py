"""rosterkit: presence resolution and shift expansion for personnel rosters."""

__version__ = "0.1.0"
