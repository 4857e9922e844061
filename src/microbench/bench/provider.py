"""Point-in-time metric readings for benchmark iterations.

The iteration runner never reads clocks or counters directly: it asks
a :class:`MetricsProvider` for readings before and after each measured
call.  :class:`SystemMetricsProvider` is the real implementation; tests
inject a scripted stand-in to get exact, reproducible samples.

Readings:

- wall time (ms): ``time.perf_counter``
- CPU time (ms): ``time.process_time`` (user + system of this process)
- heap (KB): ``tracemalloc`` traced memory, current size
- reads / writes: cumulative counts from an :class:`OperationCounter`

Precision caveat: ``process_time`` resolution depends on the platform
clock (see ``time.get_clock_info("process_time")``).  On some systems it
is coarser than a millisecond, so very short benchmarks may report CPU
deltas of zero for some iterations.  Readings are passed through
unrounded.
"""

from __future__ import annotations

import logging
import time
import tracemalloc
from typing import Protocol, runtime_checkable

from microbench.bench.counters import OperationCounter, default_counter

log = logging.getLogger("microbench")


# ---------------------------------------------------------------------------
# Provider protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class MetricsProvider(Protocol):
    """Source of wall time, CPU time, heap and operation-count readings.

    CPU time and the cumulative counters must be monotonic
    non-decreasing within a process; wall time must be monotonic
    non-decreasing.  The engine does not check this: a provider that
    goes backwards shows up as negative deltas in the results.
    """

    def wall_time_ms(self) -> float: ...

    def cpu_time_ms(self) -> float: ...

    def heap_kb(self) -> float: ...

    def write_count(self) -> int: ...

    def read_count(self) -> int: ...


# ---------------------------------------------------------------------------
# System implementation
# ---------------------------------------------------------------------------


class SystemMetricsProvider:
    """Reads the real clocks, ``tracemalloc`` and an operation counter.

    Heap tracing is started lazily on the first :meth:`heap_kb` call so
    that benchmarks without heap tracking do not pay the tracemalloc
    allocation overhead.  Once started, tracing stays on.
    """

    def __init__(self, counter: OperationCounter | None = None) -> None:
        self.counter = counter if counter is not None else default_counter()

    def wall_time_ms(self) -> float:
        return time.perf_counter() * 1000.0

    def cpu_time_ms(self) -> float:
        return time.process_time() * 1000.0

    def heap_kb(self) -> float:
        if not tracemalloc.is_tracing():
            log.debug("Starting tracemalloc for heap tracking")
            tracemalloc.start()
        current, _peak = tracemalloc.get_traced_memory()
        return current / 1024.0

    def write_count(self) -> int:
        return self.counter.writes

    def read_count(self) -> int:
        return self.counter.reads


def describe_clocks() -> dict[str, float]:
    """Return the resolution (in ms) of the clocks used for wall and CPU time."""
    wall = time.get_clock_info("perf_counter")
    cpu = time.get_clock_info("process_time")
    return {
        "wall_resolution_ms": wall.resolution * 1000.0,
        "cpu_resolution_ms": cpu.resolution * 1000.0,
    }
