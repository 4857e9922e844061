"""Benchmark iteration engine.

Runs one benchmark through its lifecycle:

1. ``setup()`` once, not measured
2. ``config.warmup`` calls to ``run()``, observations discarded
3. ``config.iterations`` measured calls to ``run()``, one Sample each
4. ``teardown()`` once, not measured

Readings are nested around the measured call so the cheap clocks sit
innermost: heap and operation counters are read outside the CPU and
wall-clock window and their cost never lands in the time deltas::

    heap, writes, reads, cpu, wall -> run() -> wall, cpu, reads, writes, heap

A failure in any lifecycle call propagates unchanged.  The samples
gathered so far are dropped with the stack frame, so an aborted run can
never be aggregated.  ``teardown()`` is not called after a failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from microbench.bench.benchmark import benchmark_name, call_setup, call_teardown
from microbench.bench.config import BenchConfig, ensure_valid
from microbench.bench.provider import MetricsProvider, SystemMetricsProvider
from microbench.bench.results import Sample

log = logging.getLogger("microbench")


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback."""

    phase: str  # "setup", "warmup", "measure", "teardown"
    benchmark: str
    iteration: int  # 1-based within the phase, 0 for setup/teardown
    total_iterations: int  # iterations in the phase
    wall_ms: float | None = None  # measured phase only


ProgressCallback = Callable[[BenchProgress], None]


# ---------------------------------------------------------------------------
# IterationRunner
# ---------------------------------------------------------------------------


class IterationRunner:
    """Executes warmup and measured iterations of a single benchmark.

    Usage::

        runner = IterationRunner(provider)
        samples = runner.execute(my_benchmark, BenchConfig(iterations=50))
    """

    def __init__(
        self,
        provider: MetricsProvider | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.provider: MetricsProvider = (
            provider if provider is not None else SystemMetricsProvider()
        )
        self.progress: ProgressCallback = progress_callback or self._default_progress

    def execute(self, benchmark: Any, config: BenchConfig) -> list[Sample]:
        """Run *benchmark* under *config* and return one Sample per measured pass.

        Raises:
            ConfigurationError: If *config* is invalid.  Raised before
                ``setup()`` is called.
            Exception: Whatever ``setup()``, ``run()`` or ``teardown()``
                raises, unchanged.
        """
        ensure_valid(config, log_warnings=False)
        name = benchmark_name(benchmark)
        run = benchmark.run

        self.progress(BenchProgress("setup", name, 0, 0))
        call_setup(benchmark)

        for i in range(config.warmup):
            run()
            self.progress(BenchProgress("warmup", name, i + 1, config.warmup))

        samples: list[Sample] = []
        for i in range(config.iterations):
            sample = self._measure(run, config)
            samples.append(sample)
            self.progress(
                BenchProgress("measure", name, i + 1, config.iterations, wall_ms=sample.wall_ms)
            )

        self.progress(BenchProgress("teardown", name, 0, 0))
        call_teardown(benchmark)
        return samples

    def _measure(self, run: Callable[[], Any], config: BenchConfig) -> Sample:
        """Take before/after readings around a single ``run()`` call."""
        p = self.provider
        heap_before = p.heap_kb() if config.track_heap else 0.0
        if config.track_database:
            writes_before = p.write_count()
            reads_before = p.read_count()
        cpu_before = p.cpu_time_ms()
        wall_before = p.wall_time_ms()

        run()

        wall_after = p.wall_time_ms()
        cpu_after = p.cpu_time_ms()
        writes: int | None = None
        reads: int | None = None
        if config.track_database:
            reads = p.read_count() - reads_before
            writes = p.write_count() - writes_before
        heap: float | None = None
        if config.track_heap:
            heap = p.heap_kb() - heap_before

        return Sample(
            wall_ms=wall_after - wall_before,
            cpu_ms=cpu_after - cpu_before,
            heap_kb=heap,
            writes=writes,
            reads=reads,
        )

    @staticmethod
    def _default_progress(progress: BenchProgress) -> None:
        """Default progress callback: log phase transitions at DEBUG."""
        if progress.phase in ("setup", "teardown"):
            log.debug("%s: %s", progress.benchmark, progress.phase)
        elif progress.iteration == progress.total_iterations:
            log.debug(
                "%s: %s done (%d iterations)",
                progress.benchmark,
                progress.phase,
                progress.total_iterations,
            )
