"""Fold per-iteration samples into a BenchResult.

Samples are consumed as a stream: only running sums and extrema are
kept, never the individual samples.  Sums are accumulated as exact
fractions and converted to float once, so an average is the correctly
rounded mean of its inputs.  That keeps sub-millisecond resolution and
guarantees ``min <= avg <= max`` even when all samples are equal.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Iterable

from microbench.bench.config import BenchConfig, ConfigurationError, EmptySampleError
from microbench.bench.results import BenchResult, CounterStats, MetricStats, Sample

log = logging.getLogger("microbench")


class _MetricAccumulator:
    """Running exact sum and extrema of a float metric."""

    __slots__ = ("total", "lo", "hi", "count")

    def __init__(self) -> None:
        self.total = Fraction(0)
        self.lo: float | None = None
        self.hi: float | None = None
        self.count = 0

    def add(self, value: float) -> None:
        self.total += Fraction(value)
        self.lo = value if self.lo is None or value < self.lo else self.lo
        self.hi = value if self.hi is None or value > self.hi else self.hi
        self.count += 1

    def result(self) -> MetricStats:
        assert self.lo is not None and self.hi is not None
        return MetricStats(avg=float(self.total / self.count), min=self.lo, max=self.hi)


class _CounterAccumulator:
    """Running total and extrema of an integer counter delta."""

    __slots__ = ("total", "lo", "hi")

    def __init__(self) -> None:
        self.total = 0
        self.lo: int | None = None
        self.hi: int | None = None

    def add(self, value: int) -> None:
        self.total += value
        self.lo = value if self.lo is None or value < self.lo else self.lo
        self.hi = value if self.hi is None or value > self.hi else self.hi

    def result(self) -> CounterStats:
        assert self.lo is not None and self.hi is not None
        return CounterStats(total=self.total, min=self.lo, max=self.hi)


def aggregate(name: str, samples: Iterable[Sample], config: BenchConfig) -> BenchResult:
    """Aggregate measured samples into a BenchResult.

    Args:
        name: Benchmark name for the result.
        samples: One Sample per measured iteration, in order.
        config: The configuration the samples were produced under.
            Decides which optional families appear in the result.

    Returns:
        A BenchResult whose disabled families are None.

    Raises:
        EmptySampleError: If *samples* is empty.
        ConfigurationError: If the number of samples differs from
            ``config.iterations``, or a sample lacks a reading for an
            enabled family.
    """
    wall = _MetricAccumulator()
    cpu = _MetricAccumulator()
    heap = _MetricAccumulator() if config.track_heap else None
    writes = _CounterAccumulator() if config.track_database else None
    reads = _CounterAccumulator() if config.track_database else None

    for index, sample in enumerate(samples, start=1):
        wall.add(sample.wall_ms)
        cpu.add(sample.cpu_ms)
        if heap is not None:
            if sample.heap_kb is None:
                raise ConfigurationError(
                    f"Sample {index} of '{name}' has no heap reading but heap tracking is on."
                )
            heap.add(sample.heap_kb)
        if writes is not None and reads is not None:
            if sample.writes is None or sample.reads is None:
                raise ConfigurationError(
                    f"Sample {index} of '{name}' has no operation counts "
                    f"but database tracking is on."
                )
            writes.add(sample.writes)
            reads.add(sample.reads)

    if wall.count == 0:
        raise EmptySampleError(f"Cannot aggregate '{name}': no samples.")
    if wall.count != config.iterations:
        raise ConfigurationError(
            f"Cannot aggregate '{name}': got {wall.count} samples, "
            f"configured for {config.iterations} iterations."
        )

    result = BenchResult(
        name=name,
        iterations=wall.count,
        wall=wall.result(),
        cpu=cpu.result(),
        heap=heap.result() if heap is not None else None,
        writes=writes.result() if writes is not None else None,
        reads=reads.result() if reads is not None else None,
        config=config,
    )
    log.debug(
        "Aggregated %s: %d iterations, avg wall %.4f ms, avg cpu %.4f ms",
        name,
        result.iterations,
        result.wall.avg,
        result.cpu.avg,
    )
    return result
