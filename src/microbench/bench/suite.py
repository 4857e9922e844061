"""Comparative benchmark suites.

A suite collects named benchmarks and one shared configuration, then
runs every benchmark under exactly that configuration::

    results = (
        BenchSuite()
        .add("json", JsonBench())
        .add("pickle", PickleBench())
        .warmup(5)
        .iterations(200)
        .track_heap()
        .run_and_compare()
    )

The configuration is captured once when a run starts.  No benchmark
can override it, so results from one run are always comparable.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Sequence

from microbench.bench.aggregate import aggregate
from microbench.bench.benchmark import FunctionBenchmark
from microbench.bench.compare import RankedResult, rank
from microbench.bench.config import (
    DEFAULT_ITERATIONS,
    DEFAULT_WARMUP,
    BenchConfig,
    ensure_valid,
)
from microbench.bench.display import LogReporter, format_config
from microbench.bench.provider import MetricsProvider
from microbench.bench.results import BenchResult
from microbench.bench.runner import IterationRunner, ProgressCallback

log = logging.getLogger("microbench")

Reporter = Callable[[Sequence[RankedResult]], None]


class BenchSuite:
    """Builder for a set of benchmarks run under one configuration."""

    def __init__(
        self,
        name: str = "",
        *,
        provider: MetricsProvider | None = None,
        reporter: Reporter | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.name = name
        self.reporter: Reporter = reporter or LogReporter()
        self._runner = IterationRunner(provider, progress_callback)
        self._benchmarks: list[tuple[str, Any]] = []
        self._warmup = DEFAULT_WARMUP
        self._iterations = DEFAULT_ITERATIONS
        self._track_heap = False
        self._track_database = False

    # -- builder ------------------------------------------------------------

    def add(self, name: str, bench: Any) -> BenchSuite:
        """Add a named benchmark.

        *bench* is any object with a callable ``run()``; a plain
        callable is wrapped in a FunctionBenchmark.

        Raises:
            ValueError: If *name* is empty or already in the suite.
            TypeError: If *bench* is a class rather than an instance, or has
                no callable ``run`` and is not callable.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Benchmark names must be non-empty strings.")
        if name in self.names:
            raise ValueError(f"Duplicate benchmark name '{name}'.")
        if inspect.isclass(bench):
            raise TypeError(
                f"Benchmark '{name}' is the class {bench.__name__}; add an instance instead."
            )
        if not callable(getattr(bench, "run", None)):
            if not callable(bench):
                raise TypeError(
                    f"Benchmark '{name}' must define run() or be callable "
                    f"(got {type(bench).__name__})."
                )
            bench = FunctionBenchmark(bench, name=name)
        self._benchmarks.append((name, bench))
        return self

    def warmup(self, count: int) -> BenchSuite:
        """Set the number of unmeasured warmup iterations."""
        self._warmup = count
        return self

    def iterations(self, count: int) -> BenchSuite:
        """Set the number of measured iterations."""
        self._iterations = count
        return self

    def track_heap(self, enabled: bool = True) -> BenchSuite:
        """Enable (or disable) heap tracking."""
        self._track_heap = enabled
        return self

    def track_database(self, enabled: bool = True) -> BenchSuite:
        """Enable (or disable) database-operation tracking."""
        self._track_database = enabled
        return self

    def configure(self, config: BenchConfig) -> BenchSuite:
        """Copy every setting from *config*."""
        self._warmup = config.warmup
        self._iterations = config.iterations
        self._track_heap = config.track_heap
        self._track_database = config.track_database
        return self

    # -- inspection ---------------------------------------------------------

    @property
    def config(self) -> BenchConfig:
        """Snapshot of the configuration as currently built."""
        return BenchConfig(
            warmup=self._warmup,
            iterations=self._iterations,
            track_heap=self._track_heap,
            track_database=self._track_database,
        )

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._benchmarks]

    def __len__(self) -> int:
        return len(self._benchmarks)

    # -- execution ----------------------------------------------------------

    def run_all(self) -> list[BenchResult]:
        """Run every benchmark in addition order.

        Returns:
            One BenchResult per benchmark, in addition order.  An empty
            suite with a valid configuration returns an empty list.  The
            configuration is validated first, so an empty suite with an
            invalid configuration still raises ConfigurationError.

        Raises:
            ConfigurationError: If the shared configuration is invalid.
            Exception: The first benchmark failure, unchanged.  Later
                benchmarks are not run.
        """
        config = ensure_valid(self.config)
        benchmarks = list(self._benchmarks)
        if not benchmarks:
            log.info("No benchmarks to run.")
            return []

        log.info(
            "Running %d benchmark(s)%s. %s",
            len(benchmarks),
            f" in suite '{self.name}'" if self.name else "",
            format_config(config),
        )
        results: list[BenchResult] = []
        for idx, (name, bench) in enumerate(benchmarks, start=1):
            log.info("[%d/%d] %s", idx, len(benchmarks), name)
            try:
                samples = self._runner.execute(bench, config)
            except Exception as exc:
                log.error("Benchmark '%s' failed: %s: %s", name, type(exc).__name__, exc)
                raise
            results.append(aggregate(name, samples, config))
        return results

    def run_and_compare(self) -> list[BenchResult]:
        """Run every benchmark, then report them ranked by CPU time.

        The ranking goes to the suite's reporter.  The returned list is
        the same as :meth:`run_all` would return, in addition order.
        """
        results = self.run_all()
        self.reporter(rank(results))
        return results
