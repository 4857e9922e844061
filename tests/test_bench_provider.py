"""Tests for microbench.bench.provider — system metric readings."""

from __future__ import annotations

import tracemalloc
import unittest

from bench_test_helpers import ScriptedProvider

from microbench.bench.counters import OperationCounter, default_counter
from microbench.bench.provider import (
    MetricsProvider,
    SystemMetricsProvider,
    describe_clocks,
)


class TestSystemMetricsProvider(unittest.TestCase):
    """Real clock and counter readings."""

    def test_satisfies_protocol(self) -> None:
        self.assertIsInstance(SystemMetricsProvider(), MetricsProvider)

    def test_scripted_provider_satisfies_protocol(self) -> None:
        self.assertIsInstance(ScriptedProvider(), MetricsProvider)

    def test_clocks_do_not_go_backwards(self) -> None:
        provider = SystemMetricsProvider()
        wall = [provider.wall_time_ms() for _ in range(50)]
        cpu = [provider.cpu_time_ms() for _ in range(50)]
        self.assertEqual(wall, sorted(wall))
        self.assertEqual(cpu, sorted(cpu))

    def test_cpu_time_advances_with_work(self) -> None:
        provider = SystemMetricsProvider()
        start = provider.cpu_time_ms()
        total = 0
        while provider.cpu_time_ms() - start < 5.0:
            total += sum(range(1000))
        self.assertGreaterEqual(provider.cpu_time_ms() - start, 5.0)

    def test_heap_starts_tracing(self) -> None:
        was_tracing = tracemalloc.is_tracing()
        if was_tracing:
            tracemalloc.stop()
        self.addCleanup(tracemalloc.stop)
        provider = SystemMetricsProvider()
        before = provider.heap_kb()
        self.assertTrue(tracemalloc.is_tracing())
        keep = [bytearray(1024) for _ in range(64)]
        after = provider.heap_kb()
        self.assertGreater(after - before, 32.0)
        del keep

    def test_counter_readings(self) -> None:
        counter = OperationCounter()
        provider = SystemMetricsProvider(counter)
        counter.record_write(3)
        counter.record_read(2)
        self.assertEqual(provider.write_count(), 3)
        self.assertEqual(provider.read_count(), 2)

    def test_default_counter(self) -> None:
        self.assertIs(SystemMetricsProvider().counter, default_counter())


class TestDescribeClocks(unittest.TestCase):
    def test_resolutions_positive(self) -> None:
        clocks = describe_clocks()
        self.assertGreater(clocks["wall_resolution_ms"], 0)
        self.assertGreater(clocks["cpu_resolution_ms"], 0)


if __name__ == "__main__":
    unittest.main()
