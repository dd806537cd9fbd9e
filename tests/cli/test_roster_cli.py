import json
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from rosterkit.cli.main import app

ROSTER = Path(__file__).resolve().parents[2] / "examples" / "team7" / "roster.yaml"


def test_validate_prints_counts() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["validate", str(ROSTER)], prog_name="rosterkit")
    assert result.exit_code == 0
    assert "People" in result.stdout
    assert "Tasks" in result.stdout


def test_resolve_person_exports_rows(tmp_path: Path) -> None:
    runner = CliRunner()
    out_csv = tmp_path / "presence.csv"
    result = runner.invoke(
        app,
        [
            "resolve",
            str(ROSTER),
            "--person",
            "P1",
            "--start",
            "2024-01-01",
            "--days",
            "14",
            "--out-csv",
            str(out_csv),
        ],
        prog_name="rosterkit",
    )
    assert result.exit_code == 0
    frame = pd.read_csv(out_csv, dtype=str)
    assert len(frame) == 14
    assert frame.loc[0, "status"] == "arrival"
    manual = frame[frame["date"] == "2024-01-10"].iloc[0]
    assert manual["source"] == "manual"


def test_resolve_unknown_person_fails() -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["resolve", str(ROSTER), "--person", "NOPE", "--start", "2024-01-01"],
        prog_name="rosterkit",
    )
    assert result.exit_code != 0


def test_resolve_rejects_bad_start() -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["resolve", str(ROSTER), "--person", "P1", "--start", "01/01/2024"],
        prog_name="rosterkit",
    )
    assert result.exit_code != 0


def test_expand_task_exports_shifts(tmp_path: Path) -> None:
    runner = CliRunner()
    out_csv = tmp_path / "shifts.csv"
    result = runner.invoke(
        app,
        [
            "expand",
            str(ROSTER),
            "--task",
            "GATE",
            "--start",
            "2024-02-01",
            "--days",
            "3",
            "--out-csv",
            str(out_csv),
        ],
        prog_name="rosterkit",
    )
    assert result.exit_code == 0
    frame = pd.read_csv(out_csv)
    assert len(frame) == 3
    assert {"id", "task_id", "start_time", "end_time", "is_locked"}.issubset(frame.columns)
    assert frame["start_time"].iloc[0] == "2024-02-01T08:00:00"


def test_snapshot_writes_summary(tmp_path: Path) -> None:
    runner = CliRunner()
    summary_path = tmp_path / "summary.json"
    result = runner.invoke(
        app,
        ["snapshot", str(ROSTER), "--start", "2024-01-01", "--days", "7", "--out-json", str(summary_path)],
        prog_name="rosterkit",
    )
    assert result.exit_code == 0
    summary = json.loads(summary_path.read_text())
    assert summary["rows"] == 35
    assert "Status counts" in result.stdout
    assert "arrival" in result.stdout
    assert summary["cancelled"] is False
