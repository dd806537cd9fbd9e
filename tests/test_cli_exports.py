import json
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from rosterkit.cli.main import app

ROSTER = Path(__file__).resolve().parents[1] / "examples" / "team7" / "roster.yaml"


def test_snapshot_full_exports(tmp_path: Path) -> None:
    runner = CliRunner()
    out_csv = tmp_path / "snapshot.csv"
    out_jsonl = tmp_path / "snapshot.jsonl"
    telemetry = tmp_path / "telemetry" / "runs.jsonl"

    result = runner.invoke(
        app,
        [
            "snapshot",
            str(ROSTER),
            "--start",
            "2024-01-01",
            "--days",
            "30",
            "--chunk-size",
            "40",
            "--out-csv",
            str(out_csv),
            "--out-jsonl",
            str(out_jsonl),
            "--telemetry-log",
            str(telemetry),
        ],
        prog_name="rosterkit",
    )
    assert result.exit_code == 0

    frame = pd.read_csv(out_csv, dtype=str)
    assert len(frame) == 150
    assert list(frame.columns) == ["person_id", "date", "status", "start_time", "end_time", "source"]
    assert len(out_jsonl.read_text().splitlines()) == 150

    runs = [json.loads(line) for line in telemetry.read_text().splitlines()]
    assert runs[-1]["command"] == "snapshot"
    assert runs[-1]["metrics"]["rows"] == 150
    chunk_files = list((telemetry.parent / "chunks").glob("*.jsonl"))
    assert len(chunk_files) == 1
    assert len(chunk_files[0].read_text().splitlines()) == 4


def test_expand_247_task(tmp_path: Path) -> None:
    runner = CliRunner()
    out_csv = tmp_path / "watch.csv"
    result = runner.invoke(
        app,
        ["expand", str(ROSTER), "--task", "WATCH", "--start", "2024-02-01", "--days", "7", "--out-csv", str(out_csv)],
        prog_name="rosterkit",
    )
    assert result.exit_code == 0
    assert len(pd.read_csv(out_csv)) == 21
