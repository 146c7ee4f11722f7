"""Side-by-side text histograms of per-trial timings.

Both candidates share one value range so their lines are directly
comparable. The range runs from the global minimum to 1.2x the larger p99,
capped at the global maximum: a few extreme outliers do not squash the body
of the distribution into a single bin, yet genuine tails remain visible.
Samples above the range are counted as outliers next to the line.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from perfpair.formatting import density_glyph, format_compact
from perfpair.stats import percentile_floor

BIN_COUNT = 30
TAIL_PERCENTILE = 0.99
TAIL_HEADROOM = 1.2
LABEL_WIDTH = 15


@dataclass
class Histogram:
    """Binned samples for one candidate."""

    bins: list[int] = field(default_factory=list)
    outliers: int = 0
    min: float = float("nan")
    max: float = float("nan")

    @property
    def binned(self) -> int:
        """Number of samples inside the visualization range."""
        return sum(self.bins)


def visualization_range(
    data_a: Sequence[float],
    data_b: Sequence[float],
) -> tuple[float, float]:
    """Return the shared ``(low, high)`` range for two non-empty samples."""
    sorted_a = sorted(data_a)
    sorted_b = sorted(data_b)
    low = min(sorted_a[0], sorted_b[0])
    p99 = max(
        percentile_floor(sorted_a, TAIL_PERCENTILE),
        percentile_floor(sorted_b, TAIL_PERCENTILE),
    )
    high = min(p99 * TAIL_HEADROOM, max(sorted_a[-1], sorted_b[-1]))
    return low, high


def build_histogram(
    values: Sequence[float],
    low: float,
    high: float,
    bins: int = BIN_COUNT,
) -> Histogram:
    """Assign *values* to *bins* equal-width bins spanning ``[low, high]``.

    A value equal to *high* lands in the last bin; only values strictly
    above *high* count as outliers. Values below *low* are clamped into the
    first bin. When the range has zero width every value goes to bin 0.
    """
    hist = Histogram(bins=[0] * bins)
    if values:
        hist.min = min(values)
        hist.max = max(values)

    width = (high - low) / bins
    for value in values:
        if value > high:
            hist.outliers += 1
            continue
        idx = int(math.floor((value - low) / width)) if width > 0 else 0
        hist.bins[max(0, min(idx, bins - 1))] += 1
    return hist


def format_distribution_line(
    hist: Histogram,
    label: str,
    max_count: int,
    label_width: int = LABEL_WIDTH,
) -> str:
    """Render one candidate's histogram as a single line of glyphs."""
    glyphs = "".join(density_glyph(count, max_count) for count in hist.bins)
    line = f"{label.ljust(label_width)}│{glyphs}│ n={hist.binned}"
    if hist.outliers > 0:
        line += f" (+{hist.outliers})"
    line += f" [{format_compact(hist.min)}-{format_compact(hist.max)}ms]"
    return line


def format_distribution_pair(
    data_a: Sequence[float],
    data_b: Sequence[float],
    *,
    label_a: str = "Data 1",
    label_b: str = "Data 2",
    bins: int = BIN_COUNT,
) -> str:
    """Render both candidates' timing distributions on a shared scale.

    Returns an empty string if either sample is empty.
    """
    if not data_a or not data_b:
        return ""

    low, high = visualization_range(data_a, data_b)
    hist_a = build_histogram(data_a, low, high, bins)
    hist_b = build_histogram(data_b, low, high, bins)
    max_count = max(max(hist_a.bins), max(hist_b.bins))
    label_width = max(LABEL_WIDTH, len(label_a), len(label_b))

    return "\n".join(
        [
            f"Distribution (showing {format_compact(low)}-{format_compact(high)}ms):",
            format_distribution_line(hist_a, label_a, max_count, label_width),
            format_distribution_line(hist_b, label_b, max_count, label_width),
        ]
    )
