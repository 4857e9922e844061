"""Terminal display formatting for benchmark results.

One line per result; optional families only appear when they were
tracked.  Ranked output appends the slowdown ratio (``2.00x``) to every
entry except the fastest.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from microbench.bench.compare import RankedResult
from microbench.bench.config import BenchConfig
from microbench.bench.results import BenchResult, CounterStats, MetricStats

log = logging.getLogger("microbench")


# ---------------------------------------------------------------------------
# Value formatting utilities
# ---------------------------------------------------------------------------


def _format_ms(value: float, precision: int = 3) -> str:
    """Format a millisecond value."""
    if math.isnan(value):
        return "N/A"
    return f"{value:.{precision}f}"


def _format_ratio(ratio: float) -> str:
    """Format a slowdown ratio with an ``x`` suffix."""
    if math.isinf(ratio):
        return "infx"
    return f"{ratio:.2f}x"


def _format_metric(label: str, stats: MetricStats, unit: str, precision: int = 3) -> str:
    return (
        f"{label} {_format_ms(stats.avg, precision)} {unit} "
        f"[min {_format_ms(stats.min, precision)}, max {_format_ms(stats.max, precision)}]"
    )


def _format_counter(label: str, stats: CounterStats) -> str:
    return f"{label} {stats.total} [min {stats.min}, max {stats.max}]"


# ---------------------------------------------------------------------------
# Result lines
# ---------------------------------------------------------------------------


def format_result(result: BenchResult, ratio: float | None = None) -> str:
    """Format one result as a single human-readable line.

    Args:
        result: The result to render.
        ratio: Slowdown ratio to append, or None to omit it.
    """
    parts = [
        _format_metric("wall", result.wall, "ms"),
        _format_metric("cpu", result.cpu, "ms"),
    ]
    if result.heap is not None:
        parts.append(_format_metric("heap", result.heap, "KB", precision=1))
    if result.writes is not None:
        parts.append(_format_counter("writes", result.writes))
    if result.reads is not None:
        parts.append(_format_counter("reads", result.reads))

    line = f"{result.name}: " + ", ".join(parts)
    if ratio is not None:
        line += f"  {_format_ratio(ratio)}"
    return line


def format_results(results: Sequence[BenchResult]) -> str:
    """Format results in their given order, one per line."""
    return "\n".join(format_result(r) for r in results)


def format_ranking(ranked: Sequence[RankedResult]) -> str:
    """Format a ranking, fastest first, with slowdown ratios."""
    lines: list[str] = []
    width = len(str(len(ranked)))
    for entry in ranked:
        ratio = None if entry.is_fastest else entry.ratio
        lines.append(f"{entry.position:>{width}d}. {format_result(entry.result, ratio)}")
    return "\n".join(lines)


def format_config(config: BenchConfig) -> str:
    """One-line description of the shared configuration."""
    return (
        f"Iterations: {config.iterations} measured + {config.warmup} warmup; "
        f"tracking: {', '.join(config.families)}"
    )


# ---------------------------------------------------------------------------
# Reporters
# ---------------------------------------------------------------------------


class LogReporter:
    """Default suite reporter: logs the ranking at INFO."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or log

    def __call__(self, ranked: Sequence[RankedResult]) -> None:
        if not ranked:
            self.logger.info("No benchmark results to compare.")
            return
        for line in format_ranking(ranked).splitlines():
            self.logger.info(line)
