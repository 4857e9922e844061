"""Export benchmark results to JSON, CSV and Markdown formats.

CSV format: one row per result, one column per aggregate.  Cells of
families that were not tracked are left empty rather than zero-filled.

Markdown format: a ranked table suitable for reports, README files and
GitHub issues.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Sequence

from microbench.bench.compare import rank
from microbench.bench.results import BenchResult

_CSV_COLUMNS = [
    "name",
    "iterations",
    "wall_avg_ms",
    "wall_min_ms",
    "wall_max_ms",
    "cpu_avg_ms",
    "cpu_min_ms",
    "cpu_max_ms",
    "heap_avg_kb",
    "heap_min_kb",
    "heap_max_kb",
    "writes_total",
    "writes_min",
    "writes_max",
    "reads_total",
    "reads_min",
    "reads_max",
]


# ---------------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------------


def export_json(results: Sequence[BenchResult], *, indent: int = 2) -> str:
    """Export results as a JSON array of sparse result dicts."""
    return json.dumps([r.to_dict() for r in results], indent=indent)


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def _csv_row(result: BenchResult) -> list[Any]:
    row: list[Any] = [
        result.name,
        result.iterations,
        result.wall.avg,
        result.wall.min,
        result.wall.max,
        result.cpu.avg,
        result.cpu.min,
        result.cpu.max,
    ]
    if result.heap is not None:
        row.extend([result.heap.avg, result.heap.min, result.heap.max])
    else:
        row.extend(["", "", ""])
    for counter in (result.writes, result.reads):
        if counter is not None:
            row.extend([counter.total, counter.min, counter.max])
        else:
            row.extend(["", "", ""])
    return row


def export_csv(results: Sequence[BenchResult]) -> str:
    """Export results as CSV, one row per result in the given order."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(_CSV_COLUMNS)
    for result in results:
        writer.writerow(_csv_row(result))
    return output.getvalue()


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def export_markdown(results: Sequence[BenchResult], *, title: str = "") -> str:
    """Export results as a Markdown table ranked by average CPU time."""
    ranked = rank(results)
    has_heap = any(r.heap is not None for r in results)
    has_db = any(r.writes is not None for r in results)

    lines: list[str] = []
    if title:
        lines.append(f"## {title}")
        lines.append("")

    header = ["#", "Benchmark", "CPU avg (ms)", "CPU min–max (ms)", "Wall avg (ms)", "Ratio"]
    if has_heap:
        header.append("Heap min–max (KB)")
    if has_db:
        header.extend(["Writes", "Reads"])
    lines.append("| " + " | ".join(header) + " |")
    lines.append("|" + "|".join("---:" if i != 1 else "---" for i in range(len(header))) + "|")

    for entry in ranked:
        r = entry.result
        cells = [
            str(entry.position),
            f"`{r.name}`",
            f"{r.cpu.avg:.3f}",
            f"{r.cpu.min:.3f}–{r.cpu.max:.3f}",
            f"{r.wall.avg:.3f}",
            "" if entry.is_fastest else f"{entry.ratio:.2f}x",
        ]
        if has_heap:
            cells.append(f"{r.heap.min:.1f}–{r.heap.max:.1f}" if r.heap is not None else "")
        if has_db:
            cells.append(str(r.writes.total) if r.writes is not None else "")
            cells.append(str(r.reads.total) if r.reads is not None else "")
        lines.append("| " + " | ".join(cells) + " |")

    return "\n".join(lines) + "\n"
