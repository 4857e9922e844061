"""Tests for microbench.bench.display — terminal formatting for results."""

from __future__ import annotations

import logging
import math
import unittest

from bench_test_helpers import make_result

from microbench.bench.compare import rank
from microbench.bench.config import BenchConfig
from microbench.bench.display import (
    LogReporter,
    _format_ms,
    _format_ratio,
    format_config,
    format_ranking,
    format_result,
    format_results,
)
from microbench.bench.results import BenchResult, CounterStats, MetricStats


def _varied_result() -> BenchResult:
    return BenchResult(
        name="varied",
        iterations=3,
        wall=MetricStats(avg=2.0, min=1.5, max=2.5),
        cpu=MetricStats(avg=1.0, min=0.75, max=1.25),
    )


class TestFormatHelpers(unittest.TestCase):
    def test_format_ms(self) -> None:
        self.assertEqual(_format_ms(1.23456), "1.235")
        self.assertEqual(_format_ms(0.5, precision=1), "0.5")
        self.assertEqual(_format_ms(float("nan")), "N/A")

    def test_format_ratio(self) -> None:
        self.assertEqual(_format_ratio(2.0), "2.00x")
        self.assertEqual(_format_ratio(1.456), "1.46x")
        self.assertEqual(_format_ratio(math.inf), "infx")


class TestFormatResult(unittest.TestCase):
    """Single-line rendering."""

    def test_time_fields(self) -> None:
        line = format_result(_varied_result())
        self.assertTrue(line.startswith("varied: "))
        self.assertIn("wall 2.000 ms [min 1.500, max 2.500]", line)
        self.assertIn("cpu 1.000 ms [min 0.750, max 1.250]", line)

    def test_absent_families_not_rendered(self) -> None:
        line = format_result(_varied_result())
        self.assertNotIn("heap", line)
        self.assertNotIn("writes", line)
        self.assertNotIn("reads", line)

    def test_present_families_rendered(self) -> None:
        result = make_result(
            "db",
            1.0,
            heap=MetricStats(avg=10.0, min=8.0, max=12.5),
            writes=CounterStats(total=30, min=2, max=4),
            reads=CounterStats(total=0, min=0, max=0),
        )
        line = format_result(result)
        self.assertIn("heap 10.0 KB [min 8.0, max 12.5]", line)
        self.assertIn("writes 30 [min 2, max 4]", line)
        self.assertIn("reads 0 [min 0, max 0]", line)

    def test_ratio_appended(self) -> None:
        self.assertTrue(format_result(_varied_result(), 2.0).endswith("  2.00x"))

    def test_format_results_keeps_order(self) -> None:
        text = format_results([make_result("b", 2.0), make_result("a", 1.0)])
        self.assertEqual([line.split(":")[0] for line in text.splitlines()], ["b", "a"])


class TestFormatRanking(unittest.TestCase):
    """Ranked rendering."""

    def test_ratio_omitted_for_fastest(self) -> None:
        ranked = rank([make_result("two", 2.0), make_result("four", 4.0), make_result("one", 1.0)])
        lines = format_ranking(ranked).splitlines()
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith("1. one: "))
        self.assertFalse(lines[0].endswith("x"))
        self.assertTrue(lines[1].endswith("2.00x"))
        self.assertTrue(lines[2].endswith("4.00x"))

    def test_positions_aligned(self) -> None:
        ranked = rank([make_result(f"r{i}", float(i + 1)) for i in range(10)])
        lines = format_ranking(ranked).splitlines()
        self.assertTrue(lines[0].startswith(" 1. "))
        self.assertTrue(lines[9].startswith("10. "))

    def test_empty(self) -> None:
        self.assertEqual(format_ranking([]), "")


class TestFormatConfig(unittest.TestCase):
    def test_time_only(self) -> None:
        self.assertEqual(
            format_config(BenchConfig()),
            "Iterations: 100 measured + 10 warmup; tracking: time",
        )

    def test_all_families(self) -> None:
        text = format_config(BenchConfig(track_heap=True, track_database=True))
        self.assertTrue(text.endswith("tracking: time, heap, database"))


class TestLogReporter(unittest.TestCase):
    def test_logs_each_line(self) -> None:
        logger = logging.getLogger("microbench.test_reporter")
        ranked = rank([make_result("a", 1.0), make_result("b", 3.0)])
        with self.assertLogs(logger, level="INFO") as cm:
            LogReporter(logger)(ranked)
        self.assertEqual(len(cm.output), 2)
        self.assertIn("3.00x", cm.output[1])

    def test_empty_ranking(self) -> None:
        with self.assertLogs("microbench", level="INFO") as cm:
            LogReporter()([])
        self.assertIn("No benchmark results", cm.output[0])


if __name__ == "__main__":
    unittest.main()
