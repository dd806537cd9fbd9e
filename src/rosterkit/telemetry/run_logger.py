"""JSONL run records for batch commands.

A run produces one terminal ``run`` record in ``log_path``. When chunk logging is enabled, every
chunk delivered by the snapshot driver also lands in ``chunks/<run_id>.jsonl`` next to it, so a
long snapshot can be followed while it is still being written.
"""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from .jsonl import append_jsonl

SCHEMA_VERSION = "1.0"


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(slots=True)
class RunTelemetryLogger(AbstractContextManager["RunTelemetryLogger"]):
    """Context manager that writes the run record of a batch command.

    Attributes
    ----------
    log_path:
        JSONL file receiving the terminal run record.
    command:
        CLI command that started the run (``"snapshot"``).
    roster_name / roster_path:
        Roster the run was computed for.
    options:
        Horizon and chunking options the run was invoked with.
    log_chunks:
        Also record one line per delivered chunk under ``chunks/<run_id>.jsonl``.

    Leaving the ``with`` block without calling :meth:`finalize` records ``status="ok"``, or
    ``status="error"`` with the exception repr when the block raised.
    """

    log_path: Path
    command: str
    roster_name: str | None = None
    roster_path: str | None = None
    options: Mapping[str, Any] = field(default_factory=dict)
    log_chunks: bool = False
    run_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    chunks_written: int = field(default=0, init=False)
    _started: float | None = field(default=None, init=False)
    _started_at: str | None = field(default=None, init=False)
    _finished: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    @property
    def chunks_path(self) -> Path | None:
        if not self.log_chunks:
            return None
        return self.log_path.parent / "chunks" / f"{self.run_id}.jsonl"

    def __enter__(self) -> RunTelemetryLogger:
        self._started = time.perf_counter()
        self._started_at = _utc_stamp()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.finalize()
        else:
            self.finalize(status="error", error=repr(exc))
        return False

    def _header(self, record_type: str) -> dict[str, Any]:
        return {
            "record_type": record_type,
            "schema_version": SCHEMA_VERSION,
            "run_id": self.run_id,
        }

    def progress(self, rows_done: int, rows_total: int) -> None:
        """Chunk callback with the snapshot driver's ``progress(done, total)`` signature."""
        index = self.chunks_written
        self.chunks_written += 1
        path = self.chunks_path
        if path is None:
            return
        append_jsonl(
            path,
            {
                **self._header("chunk"),
                "chunk_index": index,
                "rows_done": rows_done,
                "rows_total": rows_total,
                "recorded_at": _utc_stamp(),
            },
        )

    def finalize(
        self,
        *,
        status: str = "ok",
        metrics: Mapping[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Append the run record. Only the first call writes anything."""
        if self._finished:
            return
        self._finished = True
        elapsed = time.perf_counter() - self._started if self._started is not None else 0.0
        append_jsonl(
            self.log_path,
            {
                **self._header("run"),
                "command": self.command,
                "roster": self.roster_name,
                "roster_path": self.roster_path,
                "options": dict(self.options),
                "status": status,
                "chunks_written": self.chunks_written,
                "metrics": dict(metrics or {}),
                "error": error,
                "started_at": self._started_at,
                "finished_at": _utc_stamp(),
                "duration_seconds": round(elapsed, 3),
            },
        )


__all__ = ["RunTelemetryLogger", "SCHEMA_VERSION"]
