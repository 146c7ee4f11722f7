"""Top-level comparison harness.

Orchestrates, strictly in sequence:
1. Equivalence verification (optional)
2. Warmup
3. Alternating benchmark trials
4. Summary table
5. Distribution view

Everything is written to a text stream; nothing is returned or persisted.
"""

from __future__ import annotations

import asyncio
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence, TextIO

from perfpair.config import RunConfig, check_config
from perfpair.display import format_summary
from perfpair.distribution import format_distribution_pair
from perfpair.equivalence import EquivalenceChecker, VerificationReport
from perfpair.logging import get_logger
from perfpair.runner import DEFAULT_SEED, TimingSamples, TrialRunner
from perfpair.stats import describe

log = get_logger("tester")


@dataclass(frozen=True)
class BenchmarkSpec:
    """What to compare: two candidates and the inputs they both receive."""

    name: str
    inputs: Sequence[Any]
    original: Callable[[Any], Any]
    optimized: Callable[[Any], Any]
    original_name: str = "Original"
    optimized_name: str = "Optimized"
    equality: Callable[[Any, Any], bool] | None = None

    def __post_init__(self) -> None:
        # Freeze the input sequence so every pass sees the same values.
        object.__setattr__(self, "inputs", tuple(self.inputs))
        if not self.inputs:
            raise ValueError(f"Benchmark '{self.name}' needs at least one input.")


class PerfTester:
    """Verifies, benchmarks and reports on a BenchmarkSpec.

    Usage::

        spec = BenchmarkSpec(name="parse", inputs=cases, original=old, optimized=new)
        PerfTester(spec).run_sync(warmup_runs=50, benchmark_runs=100)
    """

    def __init__(
        self,
        spec: BenchmarkSpec,
        *,
        seed: int = DEFAULT_SEED,
        out: TextIO | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.spec = spec
        self.out = out if out is not None else sys.stdout
        self.runner = TrialRunner(
            spec.original,
            spec.optimized,
            spec.inputs,
            seed=seed,
            clock=clock,
            out=self.out,
        )
        self.verification: VerificationReport | None = None

    @classmethod
    def from_config(
        cls,
        config: RunConfig,
        inputs: Sequence[Any],
        original: Callable[[Any], Any],
        optimized: Callable[[Any], Any],
        *,
        equality: Callable[[Any, Any], bool] | None = None,
        out: TextIO | None = None,
    ) -> PerfTester:
        """Build a tester from a validated RunConfig."""
        check_config(config)
        spec = BenchmarkSpec(
            name=config.name,
            inputs=inputs,
            original=original,
            optimized=optimized,
            original_name=config.original_name,
            optimized_name=config.optimized_name,
            equality=equality,
        )
        return cls(spec, seed=config.seed, out=out)

    @property
    def samples(self) -> TimingSamples:
        return self.runner.samples

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    async def run(
        self,
        *,
        warmup_runs: int = 100,
        benchmark_runs: int = 100,
        skip_equality_check: bool = False,
    ) -> None:
        """Run verification, warmup and benchmark, then print the report."""
        spec = self.spec
        if benchmark_runs < 1:
            raise ValueError(f"Need at least 1 benchmark run (got {benchmark_runs}).")
        if warmup_runs < 0:
            raise ValueError(f"Warmup runs cannot be negative (got {warmup_runs}).")

        log.info(
            "Benchmark '%s': %d inputs, %d warmup, %d trials",
            spec.name,
            len(spec.inputs),
            warmup_runs,
            benchmark_runs,
        )

        if not skip_equality_check:
            checker = EquivalenceChecker(
                spec.original,
                spec.optimized,
                original_name=spec.original_name,
                optimized_name=spec.optimized_name,
                equality=spec.equality,
                out=self.out,
            )
            self.verification = await checker.verify(spec.inputs)

        await self.runner.warmup(warmup_runs)
        await self.runner.benchmark(benchmark_runs)
        self.print_results()

    def run_sync(self, **kwargs: Any) -> None:
        """Run the harness in a fresh event loop; see :meth:`run`."""
        asyncio.run(self.run(**kwargs))

    def print_results(self) -> None:
        """Print the summary table and the distribution view."""
        spec = self.spec
        samples = self.samples
        operations = len(samples) * len(spec.inputs)

        original_stats = describe(samples.original, operations)
        optimized_stats = describe(samples.optimized, operations)

        self._print()
        self._print(
            format_summary(
                spec.name,
                original_stats,
                optimized_stats,
                original_name=spec.original_name,
                optimized_name=spec.optimized_name,
                operations=operations,
            )
        )
        self._print("\n")
        self._print(
            format_distribution_pair(
                samples.original,
                samples.optimized,
                label_a=spec.original_name,
                label_b=spec.optimized_name,
            )
        )
