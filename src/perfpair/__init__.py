"""perfpair: compare two implementations of the same function.

Verifies the two candidates agree on a fixed set of inputs, times them in
alternating trials, and prints a statistical and visual comparison.
"""

from __future__ import annotations

__version__ = "0.1.0"

from perfpair.config import RunConfig  # noqa: E402
from perfpair.tester import BenchmarkSpec, PerfTester  # noqa: E402

__all__ = ["BenchmarkSpec", "PerfTester", "RunConfig", "__version__"]
