"""Benchmark definitions.

A benchmark is anything with a callable ``run()``.  ``setup()`` and
``teardown()`` are optional and called once around the iterations.
Three ways to define one::

    class ParseJson(Benchmark):
        def setup(self):
            self.doc = json.dumps(payload)

        def run(self):
            json.loads(self.doc)

    FunctionBenchmark(lambda: sorted(data), name="sort")

    @benchmark
    def bench_sort():
        sorted(data)
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, overload, runtime_checkable

_MARKER = "__microbench_name__"


@runtime_checkable
class BenchmarkLike(Protocol):
    """Minimal capability the engine needs from a benchmark."""

    def run(self) -> Any: ...


class Benchmark:
    """Base class for benchmarks with optional setup and teardown."""

    name: str = ""

    def setup(self) -> None:
        """Prepare state before any iteration.  Not measured."""

    def run(self) -> Any:
        """The measured operation."""
        raise NotImplementedError

    def teardown(self) -> None:
        """Release state after the last iteration.  Not measured."""


class FunctionBenchmark(Benchmark):
    """Adapt plain callables to the benchmark lifecycle."""

    def __init__(
        self,
        func: Callable[[], Any],
        *,
        setup: Callable[[], Any] | None = None,
        teardown: Callable[[], Any] | None = None,
        name: str | None = None,
    ) -> None:
        self.func = func
        self._setup = setup
        self._teardown = teardown
        self.name = name or getattr(func, "__name__", "") or "benchmark"

    def setup(self) -> None:
        if self._setup is not None:
            self._setup()

    def run(self) -> Any:
        return self.func()

    def teardown(self) -> None:
        if self._teardown is not None:
            self._teardown()

    def __repr__(self) -> str:
        return f"FunctionBenchmark({self.name!r})"


@overload
def benchmark(func: Callable[[], Any]) -> Callable[[], Any]: ...


@overload
def benchmark(*, name: str) -> Callable[[Callable[[], Any]], Callable[[], Any]]: ...


def benchmark(func: Callable[[], Any] | None = None, *, name: str | None = None) -> Any:
    """Mark a zero-argument function for discovery by ``microbench run``.

    Usable bare (``@benchmark``) or with a display name
    (``@benchmark(name="json.loads")``).  The function itself is
    returned unchanged apart from the marker attribute.
    """

    def mark(f: Callable[[], Any]) -> Callable[[], Any]:
        setattr(f, _MARKER, name or f.__name__)
        return f

    if func is not None:
        return mark(func)
    return mark


def marked_name(obj: object) -> str | None:
    """Return the name set by ``@benchmark``, or None if *obj* is unmarked."""
    return getattr(obj, _MARKER, None)


def benchmark_name(obj: object, default: str = "") -> str:
    """Best-effort display name for a benchmark object."""
    name = getattr(obj, "name", "") or ""
    if name:
        return str(name)
    return default or type(obj).__name__


def call_setup(bench: object) -> None:
    """Call ``setup()`` if *bench* defines one."""
    setup = getattr(bench, "setup", None)
    if setup is not None:
        setup()


def call_teardown(bench: object) -> None:
    """Call ``teardown()`` if *bench* defines one."""
    teardown = getattr(bench, "teardown", None)
    if teardown is not None:
        teardown()
