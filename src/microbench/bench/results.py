"""Benchmark sample and result data structures.

Hierarchy::

    Sample (one per measured iteration, discarded after aggregation)
      wall_ms, cpu_ms, heap_kb?, writes?, reads?

    BenchResult (one per completed benchmark)
      wall, cpu : MetricStats            (always present)
      heap      : MetricStats | None     (iff heap tracking enabled)
      writes    : CounterStats | None    (iff database tracking enabled)
      reads     : CounterStats | None    (iff database tracking enabled)

An absent family is None, never zero: zero is a real measurement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from microbench.bench.config import BenchConfig


# ---------------------------------------------------------------------------
# Iteration-level sample
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Sample:
    """Metric deltas observed around one measured ``run()`` call."""

    wall_ms: float
    cpu_ms: float
    heap_kb: float | None = None  # Set only with heap tracking
    writes: int | None = None  # Set only with database tracking
    reads: int | None = None  # Set only with database tracking


# ---------------------------------------------------------------------------
# Aggregated families
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetricStats:
    """Average, minimum and maximum of a continuous metric."""

    avg: float
    min: float
    max: float

    def to_dict(self) -> dict[str, float]:
        return {"avg": self.avg, "min": self.min, "max": self.max}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetricStats:
        return cls(avg=float(data["avg"]), min=float(data["min"]), max=float(data["max"]))


@dataclass(frozen=True)
class CounterStats:
    """Total and per-iteration extrema of an operation counter."""

    total: int
    min: int
    max: int

    def to_dict(self) -> dict[str, int]:
        return {"total": self.total, "min": self.min, "max": self.max}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CounterStats:
        return cls(total=int(data["total"]), min=int(data["min"]), max=int(data["max"]))


# ---------------------------------------------------------------------------
# Benchmark-level result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchResult:
    """Aggregated measurements of one completed benchmark run."""

    name: str
    iterations: int
    wall: MetricStats
    cpu: MetricStats
    heap: MetricStats | None = None
    writes: CounterStats | None = None
    reads: CounterStats | None = None
    config: BenchConfig | None = None

    @property
    def avg_wall_ms(self) -> float:
        return self.wall.avg

    @property
    def avg_cpu_ms(self) -> float:
        return self.cpu.avg

    @property
    def tracks_heap(self) -> bool:
        return self.heap is not None

    @property
    def tracks_database(self) -> bool:
        return self.writes is not None and self.reads is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (sparse: omits absent families)."""
        d: dict[str, Any] = {
            "name": self.name,
            "iterations": self.iterations,
            "wall_ms": self.wall.to_dict(),
            "cpu_ms": self.cpu.to_dict(),
        }
        if self.heap is not None:
            d["heap_kb"] = self.heap.to_dict()
        if self.writes is not None:
            d["writes"] = self.writes.to_dict()
        if self.reads is not None:
            d["reads"] = self.reads.to_dict()
        if self.config is not None:
            d["config"] = self.config.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BenchResult:
        """Deserialize from a dict produced by :meth:`to_dict`."""
        config_data = data.get("config")
        return cls(
            name=data["name"],
            iterations=int(data["iterations"]),
            wall=MetricStats.from_dict(data["wall_ms"]),
            cpu=MetricStats.from_dict(data["cpu_ms"]),
            heap=MetricStats.from_dict(data["heap_kb"]) if "heap_kb" in data else None,
            writes=CounterStats.from_dict(data["writes"]) if "writes" in data else None,
            reads=CounterStats.from_dict(data["reads"]) if "reads" in data else None,
            config=BenchConfig(**config_data) if config_data else None,
        )
