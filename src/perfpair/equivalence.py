"""Output equivalence checking for two candidate implementations.

Both candidates are run once per input before any timing happens. Results
are compared with a caller-supplied predicate when one is given, otherwise
by their canonical JSON encoding. Mismatches are printed and counted but
never abort the run: verification is advisory.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence, TextIO

from perfpair.formatting import escape_newlines, truncate
from perfpair.invoke import invoke

log = logging.getLogger("perfpair")

# Encodings longer than this are shown as a compact diff instead of in full.
LONG_OUTPUT_THRESHOLD = 1000
_MAX_INPUT_DISPLAY = 1000


# ---------------------------------------------------------------------------
# Canonical encoding
# ---------------------------------------------------------------------------


def safe_encode(value: Any) -> str:
    """Encode *value* as canonical JSON, falling back to ``repr``.

    Keys are sorted so two dicts with equal contents encode identically
    regardless of insertion order. Values JSON cannot handle (sets, custom
    objects, mixed-type keys, cycles, nesting too deep to walk) degrade to
    their ``repr``, and a ``repr`` that fails degrades to a type placeholder.
    Never raises.

    Instances of classes without their own ``__repr__`` include a memory
    address, so equal results from two calls never encode alike. Pass an
    ``equality`` predicate to :class:`EquivalenceChecker` for such types.
    """
    try:
        return json.dumps(value, sort_keys=True)
    except (TypeError, ValueError, RecursionError):
        pass
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"


# ---------------------------------------------------------------------------
# Compact string diff
# ---------------------------------------------------------------------------


@dataclass
class StringDiff:
    """Summary of where two strings diverge."""

    len_a: int
    len_b: int
    prefix: int  # length of the longest common prefix
    suffix: int  # length of the longest common suffix, not overlapping the prefix
    middle_a: str  # differing segment of a, capped
    middle_b: str  # differing segment of b, capped
    prefix_context: str  # up to `context` chars immediately before the divergence
    suffix_context: str  # up to `context` chars of the common suffix
    suffix_truncated: bool


def string_diff(
    a: str,
    b: str,
    *,
    context: int = 200,
    max_middle: int = 600,
) -> StringDiff:
    """Compute a compact diff between two (usually long) strings.

    Args:
        a: First string.
        b: Second string.
        context: Characters of shared text to keep around the divergence.
        max_middle: Maximum characters kept from each differing middle.

    Returns:
        StringDiff with prefix/suffix lengths and the capped middles.
    """
    min_len = min(len(a), len(b))

    prefix = 0
    while prefix < min_len and a[prefix] == b[prefix]:
        prefix += 1

    suffix = 0
    while suffix < min_len - prefix and a[len(a) - 1 - suffix] == b[len(b) - 1 - suffix]:
        suffix += 1

    a_mid_end = len(a) - suffix
    b_mid_end = len(b) - suffix

    return StringDiff(
        len_a=len(a),
        len_b=len(b),
        prefix=prefix,
        suffix=suffix,
        middle_a=a[prefix : min(prefix + max_middle, a_mid_end)],
        middle_b=b[prefix : min(prefix + max_middle, b_mid_end)],
        prefix_context=a[max(prefix - context, 0) : prefix],
        suffix_context=a[a_mid_end : a_mid_end + context],
        suffix_truncated=suffix > context,
    )


def format_string_diff(diff: StringDiff, label_a: str = "A", label_b: str = "B") -> str:
    """Render a StringDiff as a block of single-line text."""
    lines = [
        "--- Diff summary ---",
        f"Lengths: {label_a}={diff.len_a}, {label_b}={diff.len_b}",
        f"Common prefix: {diff.prefix} chars, Common suffix: {diff.suffix} chars",
    ]
    if diff.prefix > 0:
        lines.append("..." + escape_newlines(diff.prefix_context))
    lines.append(f"<<< {label_a} differs >>>")
    lines.append(escape_newlines(diff.middle_a))
    lines.append(f">>> {label_b} differs <<<")
    lines.append(escape_newlines(diff.middle_b))
    if diff.suffix > 0:
        tail = "..." if diff.suffix_truncated else ""
        lines.append(escape_newlines(diff.suffix_context) + tail)
    lines.append("--- End diff ---")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


@dataclass
class Mismatch:
    """One input on which the candidates disagreed."""

    index: int
    input: Any
    encoded_original: str
    encoded_optimized: str


@dataclass
class VerificationReport:
    """Outcome of checking both candidates over the input set."""

    outcomes: list[bool] = field(default_factory=list)  # one per input, True = equal
    mismatches: list[Mismatch] = field(default_factory=list)

    @property
    def checked(self) -> int:
        return len(self.outcomes)

    @property
    def passed(self) -> bool:
        return not self.mismatches


class EquivalenceChecker:
    """Checks two candidates produce equivalent results for every input."""

    def __init__(
        self,
        original: Callable[[Any], Any],
        optimized: Callable[[Any], Any],
        *,
        original_name: str = "Original",
        optimized_name: str = "Optimized",
        equality: Callable[[Any, Any], bool] | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.original = original
        self.optimized = optimized
        self.original_name = original_name
        self.optimized_name = optimized_name
        self.equality = equality
        self.out = out if out is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def _is_equal(self, result1: Any, result2: Any, encoded1: str, encoded2: str) -> bool:
        if self.equality is not None:
            return bool(self.equality(result1, result2))
        return encoded1 == encoded2

    async def verify(self, inputs: Sequence[Any]) -> VerificationReport:
        """Run both candidates on every input and report disagreements.

        Returns:
            VerificationReport with one outcome per input.
        """
        self._print("Verifying implementations...")
        report = VerificationReport()

        for i, value in enumerate(inputs):
            result1 = await invoke(self.original, value)
            result2 = await invoke(self.optimized, value)

            encoded1 = safe_encode(result1)
            encoded2 = safe_encode(result2)
            is_equal = self._is_equal(result1, result2, encoded1, encoded2)
            report.outcomes.append(is_equal)
            log.debug("Verify input %d: %s", i, "match" if is_equal else "MISMATCH")

            if is_equal:
                continue

            report.mismatches.append(
                Mismatch(
                    index=i,
                    input=value,
                    encoded_original=encoded1,
                    encoded_optimized=encoded2,
                )
            )
            self._print(f"\nMismatch found for test case {i}:")
            self._print(f"Input: {truncate(repr(value), _MAX_INPUT_DISPLAY)}")
            if len(encoded1) > LONG_OUTPUT_THRESHOLD or len(encoded2) > LONG_OUTPUT_THRESHOLD:
                diff = string_diff(encoded1, encoded2)
                self._print(format_string_diff(diff, self.original_name, self.optimized_name))
            else:
                self._print(f"{self.original_name}: {encoded1}")
                self._print(f"{self.optimized_name}: {encoded2}")

        if report.passed:
            self._print("\nAll test cases produced identical output! ✅")
        else:
            self._print(
                f"\nWarning: Differences found in outputs! ❌ "
                f"({len(report.mismatches)} of {report.checked} test cases)"
            )
            log.warning(
                "%d of %d inputs produced different output", len(report.mismatches), report.checked
            )
            if self.equality is None:
                log.info(
                    "Results without a JSON form are compared by repr(); "
                    "pass an equality predicate if their repr is not stable"
                )
        return report
