from __future__ import annotations

import json
from contextlib import nullcontext
from pathlib import Path
from typing import Annotated, cast

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from rosterkit.availability import resolve_range
from rosterkit.cli._utils import collect_warnings, format_hours, parse_date_option
from rosterkit.core.errors import TilingOverflowWarning
from rosterkit.planning import (
    DEFAULT_CHUNK_SIZE,
    SNAPSHOT_COLUMNS,
    build_presence_snapshot,
    snapshot_dataframe,
    summarize_snapshot,
)
from rosterkit.scenario.io import load_roster
from rosterkit.scheduling.shifts import DEFAULT_HORIZON_DAYS, expand_task
from rosterkit.telemetry import RunTelemetryLogger, write_jsonl

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


def _print_warnings(messages: list[str]) -> None:
    if messages:
        console.print("[yellow]Warnings:[/]\n- " + "\n- ".join(messages))


@app.command()
def validate(roster: Path):
    """Validate a roster YAML and print summary."""
    rs = load_roster(roster)
    t = Table(title=f"Roster: {rs.name}")
    t.add_column("Entities")
    t.add_column("Count")
    t.add_row("People", str(len(rs.people)))
    t.add_row("Team rotations", str(len(rs.team_rotations)))
    t.add_row("Tasks", str(len(rs.tasks)))
    t.add_row("Overrides", str(sum(len(p.overrides) for p in rs.people)))
    console.print(t)


@app.command()
def resolve(
    roster: Annotated[Path, typer.Argument(help="Path to roster YAML file.")],
    person: Annotated[str, typer.Option("--person", "-p", help="Person id to resolve")],
    start: Annotated[str, typer.Option("--start", help="First date (YYYY-MM-DD)")],
    days: Annotated[int, typer.Option("--days", min=1, help="Number of days to resolve")] = 14,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Optional path to write presence rows as CSV.")
    ] = None,
) -> None:
    """Resolve one person's presence over a date range."""
    start_day = parse_date_option(start)
    rs = load_roster(roster)
    try:
        target = rs.get_person(person)
    except KeyError:
        raise typer.BadParameter(f"Unknown person id '{person}'", param_hint="--person")

    messages: list[str] = []

    def on_config_error(message: str) -> None:
        if message not in messages:
            messages.append(message)

    resolved = list(
        resolve_range(target, start_day, days, rs.team_rotations, on_config_error=on_config_error)
    )

    t = Table(title=f"Presence: {target.name or target.id}")
    t.add_column("Date")
    t.add_column("Status")
    t.add_column("Hours")
    t.add_column("Source")
    for day, result in resolved:
        style = "" if result.is_available else "dim"
        t.add_row(
            str(day),
            result.status.value,
            format_hours(result.start_hour, result.end_hour),
            result.source.value,
            style=style,
        )
    console.print(t)
    _print_warnings(messages)

    if out_csv:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        rows = [result.to_row(target.id, day) for day, result in resolved]
        pd.DataFrame(rows, columns=list(SNAPSHOT_COLUMNS)).to_csv(out_csv, index=False)
        console.print(f"Wrote {len(rows)} presence rows to {out_csv}")


@app.command()
def expand(
    roster: Annotated[Path, typer.Argument(help="Path to roster YAML file.")],
    task: Annotated[str, typer.Option("--task", "-t", help="Task id to expand")],
    start: Annotated[str, typer.Option("--start", help="Horizon start date (YYYY-MM-DD)")],
    days: Annotated[
        int, typer.Option("--days", min=0, help="Horizon length in days")
    ] = DEFAULT_HORIZON_DAYS,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Optional path to write shifts as CSV.")
    ] = None,
) -> None:
    """Expand a task template into concrete shifts."""
    start_day = parse_date_option(start)
    rs = load_roster(roster)
    try:
        template = rs.get_task(task)
    except KeyError:
        raise typer.BadParameter(f"Unknown task id '{task}'", param_hint="--task")

    with collect_warnings(TilingOverflowWarning) as messages:
        shifts = expand_task(template, start_day, days)

    t = Table(title=f"Shifts: {template.name or template.id}")
    t.add_column("Start")
    t.add_column("End")
    t.add_column("Hours", justify="right")
    for shift in shifts:
        t.add_row(
            shift.start_time.strftime("%Y-%m-%d %H:%M"),
            shift.end_time.strftime("%Y-%m-%d %H:%M"),
            f"{shift.duration_hours:g}",
        )
    console.print(t)
    console.print(f"[bold green]Generated[/]: {len(shifts)} shift(s)")
    _print_warnings(messages)

    if out_csv:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        frame = pd.DataFrame(
            [
                {
                    "id": shift.id,
                    "task_id": shift.task_id,
                    "start_time": shift.start_time.isoformat(),
                    "end_time": shift.end_time.isoformat(),
                    "is_locked": shift.is_locked,
                }
                for shift in shifts
            ],
            columns=["id", "task_id", "start_time", "end_time", "is_locked"],
        )
        frame.to_csv(out_csv, index=False)
        console.print(f"Wrote shifts to {out_csv}")


@app.command()
def snapshot(
    roster: Annotated[Path, typer.Argument(help="Path to roster YAML file.")],
    start: Annotated[str, typer.Option("--start", help="First date (YYYY-MM-DD)")],
    days: Annotated[int, typer.Option("--days", min=1, help="Number of days")] = 30,
    chunk_size: Annotated[
        int,
        typer.Option("--chunk-size", min=1, max=1000, help="Rows per write batch."),
    ] = DEFAULT_CHUNK_SIZE,
    out_csv: Annotated[
        Path | None, typer.Option("--out-csv", help="Optional path to write snapshot rows as CSV.")
    ] = None,
    out_jsonl: Annotated[
        Path | None,
        typer.Option("--out-jsonl", help="Optional path to write snapshot rows as JSONL."),
    ] = None,
    out_json: Annotated[
        Path | None, typer.Option("--out-json", help="Optional path to write the run summary JSON.")
    ] = None,
    telemetry_log: Annotated[
        Path | None,
        typer.Option("--telemetry-log", help="Append a run record (and chunk records) to this JSONL."),
    ] = None,
) -> None:
    """Resolve presence for every person over a horizon (batch snapshot)."""
    start_day = parse_date_option(start)
    rs = load_roster(roster)
    options = {"start": str(start_day), "days": days, "chunk_size": chunk_size}

    logger = (
        RunTelemetryLogger(
            log_path=telemetry_log,
            command="snapshot",
            roster_name=rs.name,
            roster_path=str(roster),
            options=options,
            log_chunks=True,
        )
        if telemetry_log
        else None
    )

    with logger if logger is not None else nullcontext():
        result = build_presence_snapshot(
            rs,
            start=start_day,
            days=days,
            chunk_size=chunk_size,
            progress=logger.progress if logger is not None else None,
        )
        summary = summarize_snapshot(result)
        if logger is not None:
            logger.finalize(
                status="ok" if not result.errors else "partial",
                metrics={"rows": summary["rows"], "errors": len(result.errors)},
            )

    console.print(
        f"[bold green]Snapshot completed[/]: {summary['rows']} rows in "
        f"{result.chunks_written} chunk(s) for {len(rs.people)} people x {days} days"
    )
    t = Table(title="Status counts")
    t.add_column("Status")
    t.add_column("Rows", justify="right")
    status_counts = cast(dict[str, int], summary["status_counts"])
    for status, count in status_counts.items():
        t.add_row(str(status), str(count))
    console.print(t)
    for err in result.errors:
        console.print(f"[red]Error[/] person={err.person_id}: {err.message}")
    _print_warnings(result.warnings)

    if out_csv:
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        snapshot_dataframe(result).to_csv(out_csv, index=False)
        console.print(f"Wrote snapshot rows to {out_csv}")
    if out_jsonl:
        count = write_jsonl(out_jsonl, result.rows)
        console.print(f"Wrote {count} snapshot rows to {out_jsonl}")
    if out_json:
        out_json.parent.mkdir(parents=True, exist_ok=True)
        out_json.write_text(json.dumps(summary, indent=2))
        console.print(f"Wrote summary to {out_json}")
    if telemetry_log:
        console.print(f"[dim]Telemetry record written to {telemetry_log}.[/]")


if __name__ == "__main__":
    app()
