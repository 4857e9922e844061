"""Tests for microbench.bench.results — result data structures."""

from __future__ import annotations

import dataclasses
import json
import unittest

from bench_test_helpers import make_result

from microbench.bench.config import BenchConfig
from microbench.bench.results import BenchResult, CounterStats, MetricStats, Sample


class TestSample(unittest.TestCase):
    def test_optional_fields_default_to_none(self) -> None:
        sample = Sample(wall_ms=1.0, cpu_ms=0.5)
        self.assertIsNone(sample.heap_kb)
        self.assertIsNone(sample.writes)
        self.assertIsNone(sample.reads)

    def test_frozen(self) -> None:
        with self.assertRaises(dataclasses.FrozenInstanceError):
            Sample(wall_ms=1.0, cpu_ms=1.0).wall_ms = 2.0  # type: ignore[misc]


class TestBenchResult(unittest.TestCase):
    """Serialization and convenience accessors."""

    def test_time_only_to_dict_is_sparse(self) -> None:
        d = make_result("t", 2.0, wall_avg=3.0).to_dict()
        self.assertEqual(d["name"], "t")
        self.assertEqual(d["cpu_ms"], {"avg": 2.0, "min": 2.0, "max": 2.0})
        self.assertEqual(d["wall_ms"]["avg"], 3.0)
        for absent in ("heap_kb", "writes", "reads"):
            self.assertNotIn(absent, d)

    def test_full_to_dict(self) -> None:
        result = make_result(
            "full",
            1.0,
            heap=MetricStats(avg=2.0, min=1.0, max=3.0),
            writes=CounterStats(total=10, min=1, max=3),
            reads=CounterStats(total=0, min=0, max=0),
        )
        d = result.to_dict()
        self.assertEqual(d["heap_kb"], {"avg": 2.0, "min": 1.0, "max": 3.0})
        self.assertEqual(d["writes"], {"total": 10, "min": 1, "max": 3})
        self.assertEqual(d["reads"], {"total": 0, "min": 0, "max": 0})
        self.assertTrue(result.tracks_heap)
        self.assertTrue(result.tracks_database)

    def test_from_dict_restores_result(self) -> None:
        original = make_result(
            "r",
            1.5,
            heap=MetricStats(avg=0.0, min=-1.0, max=1.0),
            writes=CounterStats(total=4, min=2, max=2),
            reads=CounterStats(total=6, min=3, max=3),
        )
        restored = BenchResult.from_dict(json.loads(json.dumps(original.to_dict())))
        self.assertEqual(restored, original)

    def test_from_dict_without_config(self) -> None:
        data = make_result("nc", 1.0).to_dict()
        del data["config"]
        self.assertIsNone(BenchResult.from_dict(data).config)

    def test_accessors(self) -> None:
        result = make_result("acc", 4.0, wall_avg=5.0)
        self.assertEqual(result.avg_cpu_ms, 4.0)
        self.assertEqual(result.avg_wall_ms, 5.0)
        self.assertFalse(result.tracks_heap)
        self.assertFalse(result.tracks_database)
        self.assertEqual(result.config, BenchConfig(warmup=0, iterations=5))


if __name__ == "__main__":
    unittest.main()
