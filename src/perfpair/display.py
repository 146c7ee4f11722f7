"""Terminal rendering of the performance summary table.

One row per metric, one column per candidate, and a trailing verdict
column describing the optimized candidate relative to the original.
"""

from __future__ import annotations

from typing import Callable

from perfpair.formatting import format_count, format_ms, format_table
from perfpair.stats import SampleStats, compare_metric

# (row label, stats attribute, formatter, higher is better)
_ROWS: list[tuple[str, str, Callable[[float], str], bool]] = [
    ("Total Time (ms):", "total", format_ms, False),
    ("Ops/Second:", "ops_per_sec", format_count, True),
    ("Min (ms):", "min", format_ms, False),
    ("Max (ms):", "max", format_ms, False),
    ("Median (ms):", "median", format_ms, False),
    ("Mean (ms):", "mean", format_ms, False),
    ("Std Dev (ms):", "stdev", format_ms, False),
]


def summary_rows(
    original: SampleStats,
    optimized: SampleStats,
) -> list[list[str]]:
    """Build the table cells: label, optimized value, original value, verdict."""
    rows: list[list[str]] = []
    for label, attr, fmt, higher_is_better in _ROWS:
        candidate = getattr(optimized, attr)
        baseline = getattr(original, attr)
        verdict = compare_metric(candidate, baseline, higher_is_better=higher_is_better)
        rows.append([label, fmt(candidate), fmt(baseline), verdict.describe()])
    return rows


def format_summary(
    name: str,
    original: SampleStats,
    optimized: SampleStats,
    *,
    original_name: str = "Original",
    optimized_name: str = "Optimized",
    operations: int,
) -> str:
    """Format the performance summary for a finished benchmark.

    Args:
        name: Benchmark name for the header.
        original: Stats for the original candidate.
        optimized: Stats for the optimized candidate.
        original_name: Column header for the original candidate.
        optimized_name: Column header for the optimized candidate.
        operations: Calls made per candidate (trials x inputs).

    Returns:
        Multi-line string ready for printing.
    """
    lines = [
        f"=== {name} Performance Summary ===",
        f"Total Operations: {operations}",
    ]
    headers = ["", optimized_name, original_name, "Comparison"]
    lines.append(format_table(headers, summary_rows(original, optimized)))
    return "\n".join(lines)
