"""Warmup and alternating benchmark trials.

Execution order:
1. Warmup: a seeded pseudo-random input is run through both candidates,
   results and timings discarded.
2. Benchmark: each trial makes one timed pass over every input per
   candidate. The original goes first on even trials and the optimized on
   odd trials, so ordering effects (cache warmth, frequency scaling,
   scheduler noise) fall evenly on both sides. Each pass duration is always
   credited to the candidate that ran it, whatever slot it ran in.

Candidate exceptions are not caught; they abort the run.
"""

from __future__ import annotations

import random
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence, TextIO

from perfpair.invoke import invoke
from perfpair.logging import get_logger

log = get_logger("runner")

DEFAULT_SEED = 42


@dataclass
class TimingSamples:
    """Per-pass durations in milliseconds, in trial order."""

    original: list[float] = field(default_factory=list)
    optimized: list[float] = field(default_factory=list)

    def record(self, original_ms: float, optimized_ms: float) -> None:
        """Append one trial's durations; both lists grow together."""
        self.original.append(original_ms)
        self.optimized.append(optimized_ms)

    def __len__(self) -> int:
        return len(self.original)


class TrialRunner:
    """Runs warmup and benchmark phases for two candidates.

    Usage::

        runner = TrialRunner(original, optimized, inputs, seed=42)
        await runner.warmup(100)
        samples = await runner.benchmark(100)
    """

    def __init__(
        self,
        original: Callable[[Any], Any],
        optimized: Callable[[Any], Any],
        inputs: Sequence[Any],
        *,
        seed: int = DEFAULT_SEED,
        clock: Callable[[], float] = time.perf_counter,
        out: TextIO | None = None,
    ) -> None:
        if not inputs:
            raise ValueError("TrialRunner needs at least one input.")
        self.original = original
        self.optimized = optimized
        self.inputs = inputs
        self.seed = seed
        self.rng = random.Random(seed)
        self.clock = clock
        self.out = out if out is not None else sys.stdout
        self.samples = TimingSamples()

    async def warmup(self, iterations: int = 100) -> None:
        """Run both candidates on random inputs without measuring anything.

        The generator is re-seeded on every call, so repeated runs warm up on
        the same input sequence.
        """
        self.rng.seed(self.seed)
        print("\nWarming up...", file=self.out)
        for _ in range(iterations):
            value = self.inputs[self.rng.randrange(len(self.inputs))]
            await invoke(self.original, value)
            await invoke(self.optimized, value)
        log.debug("Warmup finished after %d iterations", iterations)

    async def _timed_pass(self, func: Callable[[Any], Any]) -> float:
        """Run *func* over every input; return elapsed milliseconds."""
        start = self.clock()
        for value in self.inputs:
            await invoke(func, value)
        return (self.clock() - start) * 1000.0

    async def run_trial(self, index: int) -> tuple[float, float]:
        """Run one trial and return ``(original_ms, optimized_ms)``.

        Even indices time the original first, odd indices the optimized.
        """
        if index % 2 == 0:
            original_ms = await self._timed_pass(self.original)
            optimized_ms = await self._timed_pass(self.optimized)
        else:
            optimized_ms = await self._timed_pass(self.optimized)
            original_ms = await self._timed_pass(self.original)
        return original_ms, optimized_ms

    async def benchmark(self, trials: int = 100) -> TimingSamples:
        """Run *trials* alternating trials and return their samples.

        Samples from any earlier call are discarded.
        """
        self.samples = TimingSamples()
        print("\nRunning benchmark...", file=self.out)
        for index in range(trials):
            original_ms, optimized_ms = await self.run_trial(index)
            self.samples.record(original_ms, optimized_ms)
            log.debug(
                "Trial %d/%d: original=%.3fms optimized=%.3fms",
                index + 1,
                trials,
                original_ms,
                optimized_ms,
            )
        return self.samples
