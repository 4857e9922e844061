"""Command-line interface for microbench.

Subcommands:
    microbench run FILE   Run the benchmarks defined in FILE
    microbench system     Print system characterization
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import click

from microbench import __version__
from microbench.bench.compare import RankedResult
from microbench.bench.config import (
    ConfigurationError,
    config_from_profile,
    ensure_valid,
    load_profile,
    quick_config,
)
from microbench.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """microbench: run micro-benchmarks and compare them under identical conditions."""


def _echo_ranking(ranked: Sequence[RankedResult]) -> None:
    from microbench.bench.display import format_ranking

    if not ranked:
        click.echo("No results.")
        return
    click.echo(format_ranking(ranked))


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("bench_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML profile with warmup, iterations and tracking settings.",
)
@click.option("--warmup", type=int, default=None, help="Warm-up iterations (default: 10).")
@click.option(
    "--iterations", type=int, default=None, help="Measured iterations (default: 100, min: 1)."
)
@click.option(
    "--track-heap/--no-track-heap",
    default=None,
    help="Track heap usage per iteration (overrides the profile).",
)
@click.option(
    "--track-db/--no-track-db",
    "track_db",
    default=None,
    help="Track database read/write operations per iteration (overrides the profile).",
)
@click.option("--quick", is_flag=True, default=False, help="Quick mode: no warmup, 5 iterations.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json", "csv", "markdown"]),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--compare/--no-compare",
    default=True,
    show_default=True,
    help="Rank text output by CPU time with slowdown ratios.",
)
@click.option(
    "-k",
    "keyword",
    type=str,
    default=None,
    help="Only run benchmarks whose name contains this substring.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option("--log-file", type=click.Path(path_type=Path), default=None)
def run(  # noqa: PLR0913
    bench_file: Path,
    profile_path: Path | None,
    warmup: int | None,
    iterations: int | None,
    track_heap: bool | None,
    track_db: bool | None,
    quick: bool,
    fmt: str,
    compare: bool,
    keyword: str | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run the benchmarks defined in BENCH_FILE as one suite.

    \b
    Examples:
        microbench run benchmarks.py
        microbench run benchmarks.py --iterations 500 --track-heap
        microbench run benchmarks.py --profile bench.yaml --format markdown
    """
    from microbench.bench.display import format_config, format_results
    from microbench.bench.export import export_csv, export_json, export_markdown
    from microbench.bench.loader import discover_benchmarks, filter_benchmarks, load_module
    from microbench.bench.suite import BenchSuite
    from microbench.bench.system import capture_system_profile, format_system_profile

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "warmup": warmup,
        "iterations": iterations,
        "track_heap": track_heap,
        "track_database": track_db,
    }
    profile_data = load_profile(profile_path) if profile_path else {}
    config = config_from_profile(profile_data, cli_overrides=cli_overrides)
    if quick:
        config = quick_config(config)
    try:
        ensure_valid(config, log_warnings=False)
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    module = load_module(bench_file)
    benchmarks = filter_benchmarks(discover_benchmarks(module), keyword)
    if not benchmarks:
        click.echo(f"No benchmarks found in {bench_file}.")
        return

    ranked_text = fmt == "text" and compare
    suite = BenchSuite(
        name=str(profile_data.get("name") or bench_file.stem),
        reporter=_echo_ranking if ranked_text else None,
    ).configure(config)
    for name, bench in benchmarks:
        suite.add(name, bench)

    if fmt == "text":
        click.echo(format_system_profile(capture_system_profile()))
        click.echo()
        click.echo(format_config(config))
        click.echo()

    try:
        results = suite.run_and_compare() if ranked_text else suite.run_all()
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904
    except Exception as exc:  # noqa: BLE001
        click.echo(f"Error: benchmark failed: {type(exc).__name__}: {exc}", err=True)
        raise SystemExit(1) from exc

    if fmt == "text":
        if not ranked_text:
            click.echo(format_results(results))
    elif fmt == "json":
        click.echo(export_json(results))
    elif fmt == "csv":
        click.echo(export_csv(results), nl=False)
    else:
        click.echo(export_markdown(results, title=suite.name), nl=False)


# ---------------------------------------------------------------------------
# system
# ---------------------------------------------------------------------------


@main.command("system")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def system_cmd(as_json: bool) -> None:
    """Print the system profile used to contextualize results."""
    from microbench.bench.system import capture_system_profile, format_system_profile

    profile = capture_system_profile()
    if as_json:
        click.echo(profile.to_json())
    else:
        click.echo(format_system_profile(profile))


if __name__ == "__main__":
    main()
