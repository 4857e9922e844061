"""Relative ranking of benchmark results.

Results are ordered by average CPU time, which is less sensitive to
host scheduling noise than wall time, and each entry gets a slowdown
ratio against the fastest one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from microbench.bench.results import BenchResult

log = logging.getLogger("microbench")


@dataclass(frozen=True)
class RankedResult:
    """A result's position in a ranking and its slowdown ratio."""

    result: BenchResult
    ratio: float  # avg CPU / fastest avg CPU; 1.0 for the fastest
    position: int  # 1-based

    @property
    def is_fastest(self) -> bool:
        return self.position == 1


def slowdown_ratio(cpu_ms: float, fastest_cpu_ms: float) -> float:
    """How many times slower *cpu_ms* is than *fastest_cpu_ms*.

    When the fastest entry measured zero CPU time, entries that also
    measured zero are tied at 1.0 and anything slower is infinitely
    slower.
    """
    if fastest_cpu_ms == 0:
        return 1.0 if cpu_ms == 0 else math.inf
    return cpu_ms / fastest_cpu_ms


def rank(results: Sequence[BenchResult]) -> list[RankedResult]:
    """Rank *results* by average CPU time, fastest first.

    The sort is stable: results with equal CPU time keep their input
    order.  The input sequence is not modified.

    Returns:
        One RankedResult per input result.  Empty input gives an empty list.
    """
    ordered = sorted(results, key=lambda r: r.cpu.avg)
    if not ordered:
        return []

    fastest = ordered[0].cpu.avg
    ranked = [
        RankedResult(
            result=r,
            ratio=1.0 if i == 0 else slowdown_ratio(r.cpu.avg, fastest),
            position=i + 1,
        )
        for i, r in enumerate(ordered)
    ]
    log.debug(
        "Ranked %d results; fastest is %s (%.4f ms cpu)",
        len(ranked),
        ordered[0].name,
        fastest,
    )
    return ranked
