"""Roster loading utilities (YAML metadata + CSV tables)."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

import pandas as pd
import yaml
from pydantic import TypeAdapter

from rosterkit.scenario.contract.models import (
    Person,
    PresenceOverride,
    Roster,
    TaskTemplate,
    TeamRotation,
)
from rosterkit.scheduling.timeline import CalendarDate

__all__ = ["load_roster", "read_csv"]

_ROTATION_COLUMNS = {
    "rotation_active": "is_active",
    "rotation_start_date": "start_date",
    "rotation_days_on": "days_on",
    "rotation_days_off": "days_off",
}
_OVERRIDE_FIELDS = ("is_available", "start_hour", "end_hour", "status")


def read_csv(path: Path) -> pd.DataFrame:
    """Load a CSV file keeping every cell as text (blank cells become empty strings)."""
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def _resolve_path(root: Path, value: str | None) -> Path | None:
    if value is None:
        return None
    path = Path(value)
    if not path.is_absolute():
        path = root / path
    if not path.exists():
        raise FileNotFoundError(path)
    return path


def _as_optional_string(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if pd.isna(cast("Any", value)):
        return None
    return str(value)


def _records(df: pd.DataFrame) -> list[dict[str, object]]:
    """Convert a frame to dict rows, dropping blank cells so model defaults apply."""
    rows: list[dict[str, object]] = []
    for raw in df.to_dict("records"):
        row: dict[str, object] = {}
        for key, value in raw.items():
            normalised = _as_optional_string(value)
            if normalised is not None:
                row[str(key).strip()] = normalised
        rows.append(row)
    return rows


def _stringify_ids(rows: list[dict[str, Any]], *keys: str) -> None:
    for row in rows:
        for key in keys:
            if row.get(key) is not None:
                row[key] = str(row[key])


def _split_person_row(row: dict[str, object]) -> dict[str, object]:
    rotation = {
        target: row.pop(column) for column, target in _ROTATION_COLUMNS.items() if column in row
    }
    if rotation:
        row["personal_rotation"] = rotation
    return row


def _override_rows(rows: list[Mapping[str, object]]) -> dict[str, dict[CalendarDate, PresenceOverride]]:
    adapter = TypeAdapter(PresenceOverride)
    by_person: dict[str, dict[CalendarDate, PresenceOverride]] = {}
    for row in rows:
        person_id = _as_optional_string(row.get("person_id"))
        if person_id is None:
            raise ValueError(f"Override row is missing person_id: {dict(row)}")
        # parse explicitly so a malformed key surfaces as DateParseError
        day = CalendarDate.parse(str(row.get("date", "")))
        payload = {key: row[key] for key in _OVERRIDE_FIELDS if row.get(key) is not None}
        by_person.setdefault(person_id, {})[day] = adapter.validate_python(payload)
    return by_person


def _inline_overrides(person_id: str, raw: object) -> dict[str, object]:
    if not isinstance(raw, Mapping):
        raise ValueError(f"Person {person_id}: overrides must be a mapping of date -> record")
    parsed: dict[str, object] = {}
    for key, value in raw.items():
        parsed_key = key if isinstance(key, CalendarDate) else CalendarDate.coerce(key)
        parsed[str(parsed_key)] = value
    return parsed


def load_roster(yaml_path: str | Path) -> Roster:
    """Load a Roster from the YAML metadata + CSV bundle.

    Parameters
    ----------
    yaml_path:
        Path to the ``roster.yaml`` file. Tables can be given inline (``people``,
        ``team_rotations``, ``tasks``, ``overrides``) or as CSV files under a ``data`` section.

    Returns
    -------
    Roster
        Fully validated Pydantic model.

    Notes
    -----
    * CSV paths are resolved relative to the YAML file; a missing file raises ``FileNotFoundError``.
    * Blank CSV cells are dropped so model defaults apply.
    * Personal rotations may be spread over ``rotation_*`` columns of the people table.
    * Override dates are parsed strictly: a malformed key raises
      :class:`~rosterkit.core.errors.DateParseError`.
    """
    base_path = Path(yaml_path).resolve()
    with base_path.open("r", encoding="utf-8") as handle:
        meta = yaml.safe_load(handle) or {}
    root = base_path.parent
    data_section = meta.get("data") or {}

    def table(key: str) -> list[dict[str, object]]:
        if key in data_section:
            path = _resolve_path(root, str(data_section[key]))
            return _records(read_csv(cast(Path, path)))
        inline = meta.get(key) or []
        return [dict(item) for item in inline]

    people_rows = [_split_person_row(row) for row in table("people")]
    _stringify_ids(people_rows, "id", "team_id")
    for row in people_rows:
        if "overrides" in row:
            row["overrides"] = _inline_overrides(str(row["id"]), row["overrides"])

    override_rows = table("overrides")
    _stringify_ids(override_rows, "person_id", "date")
    overrides = _override_rows(override_rows)
    known_ids = {str(row.get("id")) for row in people_rows}
    unknown = sorted(set(overrides) - known_ids)
    if unknown:
        raise ValueError(f"Overrides reference unknown person ids: {unknown}")

    people = TypeAdapter(list[Person]).validate_python(people_rows)
    people = [
        person.model_copy(update={"overrides": {**person.overrides, **overrides[person.id]}})
        if person.id in overrides
        else person
        for person in people
    ]

    rotation_rows = table("team_rotations")
    _stringify_ids(rotation_rows, "team_id")
    team_rotations = TypeAdapter(list[TeamRotation]).validate_python(rotation_rows)

    task_rows = table("tasks")
    _stringify_ids(task_rows, "id")
    tasks = TypeAdapter(list[TaskTemplate]).validate_python(task_rows)

    return Roster(
        name=str(meta.get("name") or base_path.stem),
        people=people,
        team_rotations=team_rotations,
        tasks=tasks,
    )

