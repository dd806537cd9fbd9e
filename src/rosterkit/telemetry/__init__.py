"""Telemetry helpers (JSONL records, run logging)."""

from .jsonl import append_jsonl, write_jsonl
from .run_logger import RunTelemetryLogger

__all__ = ["append_jsonl", "write_jsonl", "RunTelemetryLogger"]
