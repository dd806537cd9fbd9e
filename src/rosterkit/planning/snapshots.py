"""Batch presence snapshots.

This module drives the resolver over ``people x days`` and flattens each result into the row layout
persisted by snapshot storage (``person_id, date, status, start_time, end_time, source``). Rows are
handed to an optional sink in write-sized chunks; progress is reported after every chunk and
cancellation is checked at chunk boundaries.

Example
-------
>>> from rosterkit.planning.snapshots import build_presence_snapshot
>>> from rosterkit.scenario.io import load_roster
>>> roster = load_roster("examples/team7/roster.yaml")
>>> result = build_presence_snapshot(roster, start="2024-01-01", days=14)
>>> len(result.rows) == len(roster.people) * 14
True
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

import pandas as pd

from rosterkit.availability import resolve_presence
from rosterkit.core.errors import RosterValueError
from rosterkit.scenario.contract.models import Person, Roster, TeamRotation
from rosterkit.scheduling.timeline import CalendarDate, date_range

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

DEFAULT_CHUNK_SIZE = 500
MAX_CHUNK_SIZE = 1000
SNAPSHOT_COLUMNS = ("person_id", "date", "status", "start_time", "end_time", "source")

SnapshotRow = dict[str, object]
ProgressCallback = Callable[[int, int], None]
CancelCheck = Callable[[], bool]
RowSink = Callable[[Sequence[SnapshotRow]], None]


@dataclass
class SnapshotError:
    """Failure isolated to one person during a batch run."""

    person_id: str
    date: str | None
    message: str


@dataclass
class SnapshotResult:
    """Aggregated result of a snapshot run.

    Attributes
    ----------
    rows:
        Flattened presence rows in person-major, date-ascending order.
    start / days:
        Horizon covered by the run.
    chunks_written:
        Number of chunks delivered to the sink (or that would have been, when no sink is given).
    cancelled:
        ``True`` when ``should_cancel`` stopped the run at a chunk boundary.
    errors:
        Per-person failures; the batch continues past them.
    warnings:
        Messages from rotation records that were skipped as incomplete.
    """

    rows: list[SnapshotRow]
    start: CalendarDate
    days: int
    chunks_written: int = 0
    cancelled: bool = False
    errors: list[SnapshotError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class _Cancelled(Exception):
    pass


def _resolve_person(
    person: Person,
    start: CalendarDate,
    days: int,
    team_rotations: Sequence[TeamRotation],
    captured: list[str],
) -> list[SnapshotRow]:
    def record(message: str) -> None:
        if message not in captured:
            captured.append(message)

    return [
        resolve_presence(person, day, team_rotations, on_config_error=record).to_row(person.id, day)
        for day in date_range(start, days)
    ]


def build_presence_snapshot(
    roster: Roster | Iterable[Person],
    team_rotations: Iterable[TeamRotation] | None = None,
    *,
    start: CalendarDate | str,
    days: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress: ProgressCallback | None = None,
    should_cancel: CancelCheck | None = None,
    sink: RowSink | None = None,
) -> SnapshotResult:
    """Resolve presence for every person and day in the horizon.

    Parameters
    ----------
    roster:
        Either a :class:`Roster` (its team rotations are used unless ``team_rotations`` is given)
        or an iterable of :class:`Person` records.
    team_rotations:
        Team rotations to resolve against. Optional when ``roster`` is a :class:`Roster`.
    start / days:
        First day and length of the horizon.
    chunk_size:
        Rows per write batch (``1..1000``).
    progress:
        Called as ``progress(rows_done, rows_total)`` after each chunk.
    should_cancel:
        Polled before each chunk is emitted. Returning ``True`` stops the run.
    sink:
        Receives each chunk of rows, e.g. a storage bulk-insert.

    Returns
    -------
    SnapshotResult
        Rows emitted so far plus isolated errors, warnings and cancellation state.

    Raises
    ------
    DateParseError
        If ``start`` is not a valid date key.
    RosterValueError
        If ``days`` is negative or ``chunk_size`` is out of range.
    """

    if isinstance(roster, Roster):
        people = list(roster.people)
        rotations = list(team_rotations) if team_rotations is not None else list(roster.team_rotations)
    else:
        people = list(roster)
        rotations = list(team_rotations or [])

    start_day = CalendarDate.coerce(start)
    if days < 0:
        raise RosterValueError(f"days must be >= 0 (got {days})")
    if not 1 <= chunk_size <= MAX_CHUNK_SIZE:
        raise RosterValueError(f"chunk_size must be within 1..{MAX_CHUNK_SIZE} (got {chunk_size})")

    result = SnapshotResult(rows=[], start=start_day, days=days)
    total = len(people) * days
    pending: list[SnapshotRow] = []

    def flush() -> None:
        if should_cancel is not None and should_cancel():
            raise _Cancelled()
        chunk = list(pending)
        pending.clear()
        if sink is not None:
            sink(chunk)
        result.rows.extend(chunk)
        result.chunks_written += 1
        if progress is not None:
            progress(len(result.rows), total)

    try:
        for person in people:
            try:
                person_rows = _resolve_person(person, start_day, days, rotations, result.warnings)
            except RosterValueError as exc:
                result.errors.append(SnapshotError(person_id=person.id, date=None, message=str(exc)))
                total -= days
                continue
            for row in person_rows:
                pending.append(row)
                if len(pending) >= chunk_size:
                    flush()
        if pending:
            flush()
    except _Cancelled:
        result.cancelled = True

    return result


def snapshot_dataframe(result: SnapshotResult) -> pd.DataFrame:
    """Return snapshot rows as a DataFrame with the storage column order."""
    return pd.DataFrame(result.rows, columns=list(SNAPSHOT_COLUMNS))


def summarize_snapshot(result: SnapshotResult) -> dict[str, object]:
    """JSON-serialisable summary of a snapshot run."""
    status_counts: dict[str, int] = {}
    source_counts: dict[str, int] = {}
    for row in result.rows:
        status = str(row["status"])
        source = str(row["source"])
        status_counts[status] = status_counts.get(status, 0) + 1
        source_counts[source] = source_counts.get(source, 0) + 1
    return {
        "start": str(result.start),
        "days": result.days,
        "rows": len(result.rows),
        "chunks_written": result.chunks_written,
        "cancelled": result.cancelled,
        "status_counts": dict(sorted(status_counts.items())),
        "source_counts": dict(sorted(source_counts.items())),
        "errors": [
            {"person_id": err.person_id, "date": err.date, "message": err.message}
            for err in result.errors
        ],
        "warnings": list(result.warnings),
    }
