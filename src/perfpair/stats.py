"""Descriptive statistics and pairwise comparison of timing samples.

Everything here is plain arithmetic over lists of milliseconds using the
``statistics`` module; no external dependencies.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Sequence

from perfpair.formatting import format_factor


# ---------------------------------------------------------------------------
# Descriptive statistics
# ---------------------------------------------------------------------------


@dataclass
class SampleStats:
    """Summary of one candidate's per-pass timings (all in ms except ops)."""

    n: int
    total: float
    mean: float
    median: float
    stdev: float  # sample standard deviation, n - 1 denominator
    min: float
    max: float
    ops_per_sec: float


def throughput(operations: int, total_ms: float) -> float:
    """Operations per second for *operations* calls taking *total_ms* in all.

    A non-positive total (clock resolution too coarse to see the work)
    yields ``inf``.
    """
    if total_ms <= 0:
        return float("inf")
    return operations / total_ms * 1000.0


def describe(values: Sequence[float], operations: int) -> SampleStats:
    """Compute summary statistics for one candidate.

    Args:
        values: Per-pass durations in milliseconds, any order.
        operations: Total calls made across all passes (trials x inputs),
            used for throughput.

    Returns:
        SampleStats. With a single sample the stdev is 0.0; with none, every
        field is NaN.
    """
    if not values:
        nan = float("nan")
        return SampleStats(
            n=0,
            total=nan,
            mean=nan,
            median=nan,
            stdev=nan,
            min=nan,
            max=nan,
            ops_per_sec=nan,
        )

    sorted_v = sorted(values)
    n = len(sorted_v)
    total = math.fsum(sorted_v)
    mean = statistics.mean(sorted_v)

    return SampleStats(
        n=n,
        total=total,
        mean=mean,
        median=statistics.median(sorted_v),
        stdev=statistics.stdev(sorted_v, mean) if n >= 2 else 0.0,
        min=sorted_v[0],
        max=sorted_v[-1],
        ops_per_sec=throughput(operations, total),
    )


def percentile_floor(sorted_values: Sequence[float], p: float) -> float:
    """Return the element at index ``floor(n * p)`` of an ascending sequence.

    No interpolation: for 100 samples the 99th percentile is the largest
    sample. The index is clamped to the last element.
    """
    n = len(sorted_values)
    if n == 0:
        return float("nan")
    idx = min(int(math.floor(n * p)), n - 1)
    return sorted_values[idx]


# ---------------------------------------------------------------------------
# Pairwise comparison
# ---------------------------------------------------------------------------


def _ratio(numerator: float, denominator: float) -> float:
    """Divide without raising.

    ``x/0`` gives a signed infinity, ``0/0`` gives NaN, and ``inf/inf``
    gives a signed 1.0 so an infinite rate compared with another infinity
    reads as a full (100%) difference rather than NaN.
    """
    if math.isinf(numerator) and math.isinf(denominator):
        return math.copysign(1.0, numerator) * math.copysign(1.0, denominator)
    if denominator == 0:
        if numerator == 0:
            return float("nan")
        return math.copysign(float("inf"), numerator)
    return numerator / denominator


def _format_percent(value: float) -> str:
    if math.isinf(value):
        return "Infinity"
    return f"{value:.1f}"


@dataclass
class MetricComparison:
    """How a candidate's metric compares with the baseline's."""

    candidate: float
    baseline: float
    percent: float  # positive = candidate is better
    speedup: float  # > 1 = candidate is better
    higher_is_better: bool = False

    @property
    def slowdown(self) -> float:
        """Reciprocal of the speedup: how many times slower the candidate is."""
        return _ratio(1.0, self.speedup)

    def describe(self) -> str:
        """Human-readable verdict, e.g. ``'↑25.0% (1.3x faster)'``."""
        if self.percent > 0:
            return f"↑{_format_percent(self.percent)}% ({format_factor(self.speedup)}x faster)"
        if self.percent < 0:
            return f"↓{_format_percent(-self.percent)}% ({format_factor(self.slowdown)}x slower)"
        return "No difference"


def compare_metric(
    candidate: float,
    baseline: float,
    *,
    higher_is_better: bool = False,
) -> MetricComparison:
    """Compare *candidate* against *baseline* for one metric.

    For latency metrics (lower is better) the percent difference is
    ``(baseline - candidate) / baseline * 100`` and the speedup is
    ``baseline / candidate``. For rates (higher is better) the percent sign
    is flipped and the speedup inverted, so a positive percent always means
    the candidate wins. Equal values, including two zeros, compare as no
    difference.
    """
    if candidate == baseline:
        return MetricComparison(candidate, baseline, 0.0, 1.0, higher_is_better)

    percent = _ratio(baseline - candidate, baseline) * 100
    speedup = _ratio(baseline, candidate)

    if higher_is_better:
        percent = -percent
        speedup = _ratio(1.0, speedup)

    return MetricComparison(candidate, baseline, percent, speedup, higher_is_better)
