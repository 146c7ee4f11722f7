"""Command-line interface for perfpair.

Subcommands:
    perfpair run     Compare two callables over a file of inputs
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Callable

import click

from perfpair import __version__
from perfpair.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """perfpair: verify and benchmark two implementations side by side."""


def load_callable(reference: str) -> Callable[..., Any]:
    """Resolve a ``module:attribute`` reference to a callable.

    The attribute part may be dotted (``pkg.mod:Class.method``).

    Raises:
        ValueError: If the reference is malformed, cannot be imported, or
            does not name a callable.
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:attribute', got '{reference}'.")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"Cannot import module '{module_name}': {exc}") from exc

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ValueError(f"'{module_name}' has no attribute '{attr_path}'.") from exc

    if not callable(obj):
        raise ValueError(f"'{reference}' is not callable.")
    return obj


@main.command()
@click.argument("original")
@click.argument("optimized")
@click.option(
    "--inputs",
    "inputs_path",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="YAML or JSON file containing the list of inputs.",
)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML profile with run settings.",
)
@click.option("--name", type=str, default=None, help="Benchmark name for the report.")
@click.option("--original-name", type=str, default=None, help="Label for ORIGINAL.")
@click.option("--optimized-name", type=str, default=None, help="Label for OPTIMIZED.")
@click.option(
    "--equality",
    type=str,
    default=None,
    help="'module:func' predicate comparing two results (default: JSON equality).",
)
@click.option("--warmup", type=int, default=None, help="Warmup iterations (default: 100).")
@click.option("--trials", type=int, default=None, help="Benchmark trials (default: 100).")
@click.option("--seed", type=int, default=None, help="Seed for warmup input selection.")
@click.option(
    "--skip-verify/--verify",
    "skip_verify",
    default=None,
    help="Skip the output equivalence check.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show per-trial timings.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
def run(  # noqa: PLR0913
    original: str,
    optimized: str,
    inputs_path: Path,
    profile_path: Path | None,
    name: str | None,
    original_name: str | None,
    optimized_name: str | None,
    equality: str | None,
    warmup: int | None,
    trials: int | None,
    seed: int | None,
    skip_verify: bool | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Compare ORIGINAL and OPTIMIZED, given as 'module:function'.

    \b
    Examples:
        perfpair run mylib.slow:parse mylib.fast:parse --inputs cases.json
        perfpair run old:encode new:encode --inputs cases.yaml \\
            --trials 50 --warmup 10 --original-name v1 --optimized-name v2
    """
    from perfpair.config import config_from_profile, load_inputs, load_profile
    from perfpair.tester import PerfTester

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, Any] = {
        "name": name,
        "original_name": original_name,
        "optimized_name": optimized_name,
        "warmup": warmup,
        "trials": trials,
        "seed": seed,
        "skip_verify": skip_verify,
    }

    try:
        profile_data = load_profile(profile_path) if profile_path else {}
        config = config_from_profile(profile_data, cli_overrides=cli_overrides)
        if not name and not profile_data.get("name"):
            config.name = f"{original} vs {optimized}"
        inputs = load_inputs(inputs_path)
        tester = PerfTester.from_config(
            config,
            inputs,
            load_callable(original),
            load_callable(optimized),
            equality=load_callable(equality) if equality else None,
        )
    except (ValueError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    try:
        tester.run_sync(
            warmup_runs=config.warmup,
            benchmark_runs=config.trials,
            skip_equality_check=config.skip_verify,
        )
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904
