"""Shared text formatting helpers for perfpair.

Number formatting with magnitude-dependent precision, aligned tables, the
density glyph ramp used by the distribution view, and newline escaping for
single-line diff output.
"""

from __future__ import annotations

import math

INFINITY_TOKEN = "Infinity"

# Nine density levels: blank, then eighth blocks up to a full block.
DENSITY_GLYPHS = " ▁▂▃▄▅▆▇█"


def _special(value: float) -> str | None:
    """Return a token for non-finite values, or None for ordinary numbers."""
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        return INFINITY_TOKEN if value > 0 else f"-{INFINITY_TOKEN}"
    return None


def format_ms(value: float) -> str:
    """Format a millisecond value, using fewer decimals as magnitude grows.

    Examples: ``'0.123'``, ``'42.500'``, ``'123.4'``, ``'2048'``.
    """
    token = _special(value)
    if token is not None:
        return token
    if abs(value) >= 1000:
        return f"{value:.0f}"
    if abs(value) >= 100:
        return f"{value:.1f}"
    return f"{value:.3f}"


def format_count(value: float) -> str:
    """Format a large rate with K/M suffixes: ``'1.50M'``, ``'2.00K'``, ``'87.25'``."""
    token = _special(value)
    if token is not None:
        return token
    if value >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    if value >= 1000:
        return f"{value / 1000:.2f}K"
    if value >= 100:
        return f"{value:.1f}"
    if value >= 10:
        return f"{value:.2f}"
    return f"{value:.3f}"


def format_compact(value: float) -> str:
    """Format a value for the distribution view.

    Small values keep enough decimals to stay distinguishable:
    ``0.0004`` → ``'0.000400'``, ``0.05`` → ``'0.050'``, ``12.34`` → ``'12.3'``.
    """
    token = _special(value)
    if token is not None:
        return token
    if value < 0.001:
        return f"{value:.6f}"
    if value < 0.01:
        return f"{value:.4f}"
    if value < 0.1:
        return f"{value:.3f}"
    if value < 1:
        return f"{value:.2f}"
    return f"{value:.1f}"


def format_factor(value: float) -> str:
    """Format a speedup factor with one decimal, or the Infinity token."""
    token = _special(value)
    if token is not None:
        return token
    return f"{value:.1f}"


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    gap: int = 2,
    indent: int = 0,
) -> str:
    """Format rows as an aligned text table.

    Column widths are computed from the longest cell in each column, header
    included, so the layout holds regardless of name lengths or numeric
    magnitude. Trailing whitespace is stripped from every line.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of cell strings.
        alignments: Per-column alignment: ``'l'`` or ``'r'``.
        gap: Number of spaces between columns.
        indent: Number of leading spaces per line.

    Returns:
        The formatted table as a string.
    """
    if not headers:
        return ""

    ncols = len(headers)
    if alignments is None:
        alignments = ["l"] * ncols
    while len(alignments) < ncols:
        alignments.append("l")

    proc_rows: list[list[str]] = []
    for row in rows:
        padded = list(row) + [""] * (ncols - len(row))
        proc_rows.append(padded[:ncols])

    widths = [len(h) for h in headers]
    for row in proc_rows:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    prefix = " " * indent
    sep = " " * gap

    def _format_line(cells: list[str]) -> str:
        parts = [
            cell.rjust(widths[i]) if alignments[i] == "r" else cell.ljust(widths[i])
            for i, cell in enumerate(cells)
        ]
        return (prefix + sep.join(parts)).rstrip()

    lines = [_format_line(list(headers))]
    lines.extend(_format_line(row) for row in proc_rows)
    return "\n".join(lines)


def density_glyph(count: int, max_count: int) -> str:
    """Pick the glyph for a histogram bin.

    The level is the square root of *count* relative to *max_count*, scaled
    to 0-8, so a dominant bin does not flatten smaller modes into blanks.
    """
    if count <= 0 or max_count <= 0:
        return DENSITY_GLYPHS[0]
    ratio = math.sqrt(count) / math.sqrt(max_count)
    level = int(ratio * (len(DENSITY_GLYPHS) - 1) + 0.5)
    return DENSITY_GLYPHS[max(0, min(level, len(DENSITY_GLYPHS) - 1))]


def escape_newlines(text: str) -> str:
    """Render embedded newlines as a literal ``\\n`` for single-line output."""
    return text.replace("\n", "\\n")


def truncate(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to *max_len*, adding *suffix* if truncated."""
    if len(text) <= max_len:
        return text
    if max_len <= len(suffix):
        return suffix[:max_len]
    return text[: max_len - len(suffix)] + suffix
