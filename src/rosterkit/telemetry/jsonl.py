"""Utilities for writing structured JSONL records."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any


def _dump(handle, record: Mapping[str, Any]) -> None:
    json.dump(record, handle, ensure_ascii=False, separators=(",", ":"), default=str)
    handle.write("\n")


def append_jsonl(path: str | Path, record: Mapping[str, Any]) -> None:
    """Append a JSON record as a single line to the given path."""
    path = Path(path)
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        _dump(handle, record)


def write_jsonl(path: str | Path, records: Iterable[Mapping[str, Any]]) -> int:
    """Write ``records`` to ``path`` (one per line), replacing any existing file.

    Returns the number of records written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8") as handle:
        for record in records:
            _dump(handle, record)
            count += 1
    return count


__all__ = ["append_jsonl", "write_jsonl"]
