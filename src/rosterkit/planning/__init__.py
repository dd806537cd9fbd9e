"""Batch workflows built on the presence resolver.

Modules here provide library-friendly entry points that the CLI wires up, so automation scripts and
user-facing commands share the same chunking, progress and cancellation behaviour.
"""

from rosterkit.planning.snapshots import (
    DEFAULT_CHUNK_SIZE,
    MAX_CHUNK_SIZE,
    SNAPSHOT_COLUMNS,
    SnapshotError,
    SnapshotResult,
    build_presence_snapshot,
    snapshot_dataframe,
    summarize_snapshot,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "MAX_CHUNK_SIZE",
    "SNAPSHOT_COLUMNS",
    "SnapshotError",
    "SnapshotResult",
    "build_presence_snapshot",
    "snapshot_dataframe",
    "summarize_snapshot",
]
