"""Benchmark discovery for the command line.

``microbench run FILE`` imports FILE as a module and collects, in
definition order:

- functions decorated with ``@benchmark``
- ``Benchmark`` instances bound to module-level names
- concrete ``Benchmark`` subclasses defined in FILE (instantiated with
  no arguments)
"""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

from microbench.bench.benchmark import (
    Benchmark,
    FunctionBenchmark,
    benchmark_name,
    marked_name,
)
from microbench.logging import get_logger

log = get_logger("loader")


def load_module(path: Path) -> ModuleType:
    """Import a Python file by path.

    The file's directory is put on ``sys.path`` for the duration of the
    import so that sibling helper modules resolve.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ImportError: If the file cannot be loaded as a module.
    """
    if not path.exists():
        raise FileNotFoundError(f"Benchmark file not found: {path}")

    module_name = f"microbench_user_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load benchmarks from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    parent = str(path.resolve().parent)
    sys.path.insert(0, parent)
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    finally:
        try:
            sys.path.remove(parent)
        except ValueError:
            pass
    log.debug("Loaded benchmark module %s from %s", module_name, path)
    return module


def _is_concrete_benchmark_class(obj: Any, module: ModuleType) -> bool:
    return (
        inspect.isclass(obj)
        and issubclass(obj, Benchmark)
        and obj not in (Benchmark, FunctionBenchmark)
        and obj.__module__ == module.__name__
        and obj.run is not Benchmark.run
        and not inspect.isabstract(obj)
    )


def discover_benchmarks(module: ModuleType) -> list[tuple[str, Any]]:
    """Collect (name, benchmark) pairs from *module* in definition order."""
    found: list[tuple[str, Any]] = []
    seen: set[int] = set()

    for attr, obj in vars(module).items():
        if attr.startswith("_") or id(obj) in seen:
            continue

        marked = marked_name(obj)
        if marked is not None and callable(obj):
            found.append((marked, FunctionBenchmark(obj, name=marked)))
        elif isinstance(obj, Benchmark):
            found.append((benchmark_name(obj, default=attr), obj))
        elif _is_concrete_benchmark_class(obj, module):
            instance = obj()
            found.append((benchmark_name(instance, default=obj.__name__), instance))
        else:
            continue
        seen.add(id(obj))

    log.debug("Discovered %d benchmark(s) in %s", len(found), module.__name__)
    return found


def filter_benchmarks(
    benchmarks: list[tuple[str, Any]],
    keyword: str | None,
) -> list[tuple[str, Any]]:
    """Keep benchmarks whose name contains *keyword* (case-insensitive)."""
    if not keyword:
        return benchmarks
    needle = keyword.lower()
    return [(name, bench) for name, bench in benchmarks if needle in name.lower()]
