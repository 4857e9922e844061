"""Tests for microbench.bench.loader — benchmark discovery from files."""

from __future__ import annotations

import sys
import tempfile
import textwrap
import unittest
from pathlib import Path

from microbench.bench.benchmark import Benchmark, FunctionBenchmark
from microbench.bench.loader import discover_benchmarks, filter_benchmarks, load_module

BENCH_FILE = textwrap.dedent(
    """\
    from microbench.bench import Benchmark, benchmark

    DATA = list(range(100))


    @benchmark
    def bench_sum():
        sum(DATA)


    @benchmark(name="sorted-list")
    def bench_sorted():
        sorted(DATA)


    def helper():
        return 1


    class Abstractish(Benchmark):
        pass


    class Concat(Benchmark):
        def setup(self):
            self.parts = ["a"] * 10

        def run(self):
            "".join(self.parts)


    concat_instance = Concat()
    concat_instance.name = "concat-instance"
    """
)


class TestLoader(unittest.TestCase):
    """load_module() and discover_benchmarks()."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, text: str) -> Path:
        path = self.tmpdir / name
        path.write_text(text)
        self.addCleanup(sys.modules.pop, f"microbench_user_{path.stem}", None)
        return path

    def test_load_module(self) -> None:
        module = load_module(self._write("bench_basic.py", "VALUE = 42\n"))
        self.assertEqual(module.VALUE, 42)
        self.assertNotIn(str(self.tmpdir.resolve()), sys.path)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_module(self.tmpdir / "missing.py")

    def test_import_error_propagates(self) -> None:
        path = self._write("bench_broken.py", "raise RuntimeError('broken')\n")
        with self.assertRaisesRegex(RuntimeError, "broken"):
            load_module(path)
        self.assertNotIn("microbench_user_bench_broken", sys.modules)

    def test_sibling_imports_resolve(self) -> None:
        self._write("bench_sibling_helper.py", "FACTOR = 3\n")
        self.addCleanup(sys.modules.pop, "bench_sibling_helper", None)
        module = load_module(
            self._write("bench_uses_sibling.py", "from bench_sibling_helper import FACTOR\n")
        )
        self.assertEqual(module.FACTOR, 3)

    def test_discovery_order_and_kinds(self) -> None:
        module = load_module(self._write("bench_mixed.py", BENCH_FILE))
        found = discover_benchmarks(module)
        self.assertEqual(
            [name for name, _ in found],
            ["bench_sum", "sorted-list", "Concat", "concat-instance"],
        )
        self.assertIsInstance(found[0][1], FunctionBenchmark)
        self.assertIsInstance(found[2][1], Benchmark)
        self.assertIs(found[3][1], module.concat_instance)

    def test_discovered_benchmarks_run(self) -> None:
        module = load_module(self._write("bench_runnable.py", BENCH_FILE))
        for _name, bench in discover_benchmarks(module):
            bench.setup()
            bench.run()
            bench.teardown()

    def test_empty_module(self) -> None:
        module = load_module(self._write("bench_empty.py", "import json\n"))
        self.assertEqual(discover_benchmarks(module), [])


class TestFilterBenchmarks(unittest.TestCase):
    def setUp(self) -> None:
        self.benchmarks = [
            ("json.loads", object()),
            ("json.dumps", object()),
            ("Sorted", object()),
        ]

    def test_no_keyword(self) -> None:
        self.assertEqual(filter_benchmarks(self.benchmarks, None), self.benchmarks)
        self.assertEqual(filter_benchmarks(self.benchmarks, ""), self.benchmarks)

    def test_substring_case_insensitive(self) -> None:
        names = [n for n, _ in filter_benchmarks(self.benchmarks, "JSON")]
        self.assertEqual(names, ["json.loads", "json.dumps"])
        names = [n for n, _ in filter_benchmarks(self.benchmarks, "sort")]
        self.assertEqual(names, ["Sorted"])

    def test_no_match(self) -> None:
        self.assertEqual(filter_benchmarks(self.benchmarks, "xml"), [])


if __name__ == "__main__":
    unittest.main()
