"""Roster contract models and I/O."""
