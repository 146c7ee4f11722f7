"""Tests for perfpair.equivalence: output verification and compact diffs."""

from __future__ import annotations

import asyncio
import io
import unittest

from perfpair.equivalence import (
    LONG_OUTPUT_THRESHOLD,
    EquivalenceChecker,
    format_string_diff,
    safe_encode,
    string_diff,
)


# ---------------------------------------------------------------------------
# safe_encode
# ---------------------------------------------------------------------------


class TestSafeEncode(unittest.TestCase):
    def test_json_value(self) -> None:
        self.assertEqual(safe_encode([1, "a", None]), '[1, "a", null]')

    def test_dict_key_order_is_canonical(self) -> None:
        self.assertEqual(safe_encode({"b": 1, "a": 2}), safe_encode({"a": 2, "b": 1}))

    def test_non_serializable_falls_back_to_repr(self) -> None:
        self.assertEqual(safe_encode({1, 2}), repr({1, 2}))

    def test_custom_object_falls_back_to_repr(self) -> None:
        class Point:
            def __repr__(self) -> str:
                return "Point(1, 2)"

        self.assertEqual(safe_encode(Point()), "Point(1, 2)")

    def test_mixed_key_types_fall_back(self) -> None:
        value = {1: "a", "b": 2}
        self.assertEqual(safe_encode(value), repr(value))

    def test_circular_reference_falls_back(self) -> None:
        value: list[object] = []
        value.append(value)
        self.assertEqual(safe_encode(value), "[[...]]")

    def test_deep_nesting_does_not_raise(self) -> None:
        value: list[object] = []
        for _ in range(100_000):
            value = [value]
        encoded = safe_encode(value)
        self.assertIsInstance(encoded, str)

    def test_failing_repr_uses_placeholder(self) -> None:
        class Opaque:
            def __repr__(self) -> str:
                raise RuntimeError("no repr")

        self.assertEqual(safe_encode(Opaque()), "<unrepresentable Opaque>")


# ---------------------------------------------------------------------------
# string_diff
# ---------------------------------------------------------------------------


class TestStringDiff(unittest.TestCase):
    def test_middle_difference(self) -> None:
        a = "x" * 50 + "AAA" + "y" * 70
        b = "x" * 50 + "BBBBB" + "y" * 70
        diff = string_diff(a, b)
        self.assertEqual(diff.prefix, 50)
        self.assertEqual(diff.suffix, 70)
        self.assertEqual(diff.middle_a, "AAA")
        self.assertEqual(diff.middle_b, "BBBBB")
        self.assertEqual(diff.len_a, 123)
        self.assertEqual(diff.len_b, 125)

    def test_prefix_and_suffix_do_not_overlap(self) -> None:
        diff = string_diff("aaa", "aaaa")
        self.assertEqual(diff.prefix, 3)
        self.assertEqual(diff.suffix, 0)
        self.assertEqual(diff.middle_a, "")
        self.assertEqual(diff.middle_b, "a")

    def test_identical_strings(self) -> None:
        diff = string_diff("same", "same")
        self.assertEqual(diff.prefix, 4)
        self.assertEqual(diff.suffix, 0)
        self.assertEqual(diff.middle_a, "")

    def test_completely_different(self) -> None:
        diff = string_diff("abc", "xyz")
        self.assertEqual(diff.prefix, 0)
        self.assertEqual(diff.suffix, 0)
        self.assertEqual(diff.middle_a, "abc")

    def test_middle_is_capped(self) -> None:
        diff = string_diff("A" * 1000, "B" * 1000, max_middle=600)
        self.assertEqual(len(diff.middle_a), 600)
        self.assertEqual(len(diff.middle_b), 600)

    def test_context_snippets(self) -> None:
        a = "p" * 300 + "A" + "s" * 300
        b = "p" * 300 + "B" + "s" * 300
        diff = string_diff(a, b, context=200)
        self.assertEqual(diff.prefix_context, "p" * 200)
        self.assertEqual(diff.suffix_context, "s" * 200)
        self.assertTrue(diff.suffix_truncated)

    def test_short_suffix_not_truncated(self) -> None:
        diff = string_diff("aXend", "aYend", context=200)
        self.assertEqual(diff.suffix_context, "end")
        self.assertFalse(diff.suffix_truncated)


class TestFormatStringDiff(unittest.TestCase):
    def test_format_contains_summary(self) -> None:
        text = format_string_diff(string_diff("ab\ncX", "ab\ncY"), "old", "new")
        self.assertIn("--- Diff summary ---", text)
        self.assertIn("Lengths: old=5, new=5", text)
        self.assertIn("Common prefix: 4 chars, Common suffix: 0 chars", text)
        self.assertIn("...ab\\nc", text)
        self.assertIn("<<< old differs >>>", text)
        self.assertIn(">>> new differs <<<", text)
        self.assertTrue(text.endswith("--- End diff ---"))

    def test_every_line_is_single_line(self) -> None:
        text = format_string_diff(string_diff("x\ny\nz1", "x\ny\nz2\n\n"), "a", "b")
        # Only the block's own line breaks remain; content newlines are escaped.
        self.assertIn("\\n", text)
        self.assertEqual(len(text.splitlines()), 9)

    def test_suffix_ellipsis(self) -> None:
        text = format_string_diff(string_diff("A" + "s" * 300, "B" + "s" * 300))
        self.assertIn("s" * 200 + "...", text)


# ---------------------------------------------------------------------------
# EquivalenceChecker
# ---------------------------------------------------------------------------


def _square(x: int) -> int:
    return x * x


class TestEquivalenceChecker(unittest.IsolatedAsyncioTestCase):
    def _checker(self, original, optimized, **kwargs):  # type: ignore[no-untyped-def]
        out = io.StringIO()
        return EquivalenceChecker(original, optimized, out=out, **kwargs), out

    async def test_identical_implementations(self) -> None:
        checker, out = self._checker(_square, _square)
        report = await checker.verify([1, 2, 3])
        self.assertTrue(report.passed)
        self.assertEqual(report.outcomes, [True, True, True])
        self.assertEqual(report.mismatches, [])
        self.assertIn("All test cases produced identical output!", out.getvalue())

    async def test_one_mismatch_per_differing_input(self) -> None:
        def broken(x: int) -> int:
            return -1 if x in (2, 4) else x * x

        checker, out = self._checker(_square, broken)
        report = await checker.verify([1, 2, 3, 4, 5])
        self.assertFalse(report.passed)
        self.assertEqual(report.checked, 5)
        self.assertEqual([m.index for m in report.mismatches], [1, 3])
        self.assertEqual(report.outcomes, [True, False, True, False, True])
        text = out.getvalue()
        self.assertIn("Mismatch found for test case 1:", text)
        self.assertIn("Mismatch found for test case 3:", text)
        self.assertIn("Original: 4", text)
        self.assertIn("Optimized: -1", text)
        self.assertIn("Differences found", text)

    async def test_custom_names_in_output(self) -> None:
        checker, out = self._checker(
            _square, lambda x: 0, original_name="v1", optimized_name="v2"
        )
        await checker.verify([3])
        self.assertIn("v1: 9", out.getvalue())
        self.assertIn("v2: 0", out.getvalue())

    async def test_predicate_overrides_encoding(self) -> None:
        checker, _ = self._checker(
            lambda x: x + 0.1,
            lambda x: x + 0.1000001,
            equality=lambda a, b: abs(a - b) < 1e-3,
        )
        report = await checker.verify([1.0, 2.0])
        self.assertTrue(report.passed)

    async def test_predicate_can_reject_equal_encodings(self) -> None:
        checker, _ = self._checker(_square, _square, equality=lambda a, b: False)
        report = await checker.verify([1, 2])
        self.assertEqual(len(report.mismatches), 2)

    async def test_long_outputs_use_diff(self) -> None:
        size = LONG_OUTPUT_THRESHOLD + 100
        checker, out = self._checker(lambda x: "a" * size, lambda x: "a" * (size - 1) + "b")
        report = await checker.verify([0])
        self.assertFalse(report.passed)
        text = out.getvalue()
        self.assertIn("--- Diff summary ---", text)
        self.assertIn(f"Common prefix: {size}", text)

    async def test_non_serializable_results(self) -> None:
        checker, _ = self._checker(lambda x: {x}, lambda x: {x})
        report = await checker.verify([1, 2])
        self.assertTrue(report.passed)

    async def test_unrepresentable_results_do_not_abort(self) -> None:
        class Opaque:
            def __repr__(self) -> str:
                raise RuntimeError("no repr")

        checker, out = self._checker(lambda x: Opaque(), lambda x: Opaque())
        report = await checker.verify([1, 2])
        self.assertTrue(report.passed)
        self.assertIn("identical output", out.getvalue())

    async def test_default_repr_needs_predicate(self) -> None:
        class Plain:
            pass

        checker, _ = self._checker(lambda x: Plain(), lambda x: Plain())
        with self.assertLogs("perfpair", level="INFO") as logs:
            report = await checker.verify([1])
        self.assertFalse(report.passed)
        self.assertTrue(any("equality predicate" in line for line in logs.output))

        checker, _ = self._checker(
            lambda x: Plain(), lambda x: Plain(), equality=lambda a, b: type(a) is type(b)
        )
        report = await checker.verify([1])
        self.assertTrue(report.passed)

    async def test_async_candidates(self) -> None:
        async def async_square(x: int) -> int:
            await asyncio.sleep(0)
            return x * x

        checker, _ = self._checker(_square, async_square)
        report = await checker.verify([1, 2, 3])
        self.assertTrue(report.passed)

    async def test_dict_order_does_not_matter(self) -> None:
        checker, _ = self._checker(lambda x: {"a": x, "b": 1}, lambda x: {"b": 1, "a": x})
        report = await checker.verify([1])
        self.assertTrue(report.passed)


if __name__ == "__main__":
    unittest.main()
