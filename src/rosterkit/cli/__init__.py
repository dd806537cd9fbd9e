"""Command-line interface for rosterkit."""
