"""Benchmark execution and statistics engine for microbench.

Runs benchmarks through warmup and measured iterations, folds the
per-iteration samples into min/max/average results, and ranks results
produced under one shared configuration against each other.
"""

from microbench.bench.aggregate import aggregate
from microbench.bench.benchmark import Benchmark, FunctionBenchmark, benchmark
from microbench.bench.compare import RankedResult, rank
from microbench.bench.config import BenchConfig, ConfigurationError
from microbench.bench.provider import MetricsProvider, SystemMetricsProvider
from microbench.bench.results import BenchResult, CounterStats, MetricStats, Sample
from microbench.bench.runner import IterationRunner
from microbench.bench.suite import BenchSuite

__all__ = [
    "BenchConfig",
    "BenchResult",
    "BenchSuite",
    "Benchmark",
    "ConfigurationError",
    "CounterStats",
    "FunctionBenchmark",
    "IterationRunner",
    "MetricStats",
    "MetricsProvider",
    "RankedResult",
    "Sample",
    "SystemMetricsProvider",
    "aggregate",
    "benchmark",
    "rank",
]
