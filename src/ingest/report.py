"""Ingest report rendering.

The report goes to two channels: human-readable diagnostic lines and a
single ``count,millis`` line meant for a calling process.
"""

from __future__ import annotations

from typing import TextIO

from core.types import IngestReport


def emit_report(report: IngestReport, output: TextIO, diagnostics: TextIO) -> None:
    """Write the report to the diagnostic and primary output streams.

    Args:
        report: Successful ingest report.
        output: Primary channel receiving the machine-readable line.
        diagnostics: Channel receiving the human-readable lines.
    """
    print(f"Inserted: {report.inserted_count}", file=diagnostics)
    print(f"Duration: {report.elapsed_millis:.0f}ms", file=diagnostics)
    print(report.to_output_line(), file=output, flush=True)


def parse_report_line(line: str) -> IngestReport:
    """Parse a ``count,millis`` line produced by :func:`emit_report`.

    Args:
        line: One line of primary output.

    Returns:
        Parsed report.

    Raises:
        ValueError: If the line is not a valid report line.
    """
    parts = line.strip().split(",")
    if len(parts) != 2:
        raise ValueError(f"Expected '<insertedCount>,<elapsedMillis>', got '{line.strip()}'")
    inserted_count = int(parts[0])
    elapsed_millis = float(parts[1])
    if inserted_count < 0 or elapsed_millis < 0:
        raise ValueError(f"Report values must be non-negative, got '{line.strip()}'")
    return IngestReport(inserted_count=inserted_count, elapsed_millis=elapsed_millis)
