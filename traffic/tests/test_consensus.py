import random
import unittest
from collections import namedtuple
from datetime import datetime, timedelta, timezone

from traffic.consensus import (
    EMPTY_CONSENSUS,
    OTHER,
    UNKNOWN,
    compute_consensus,
    normalize_level,
)
from traffic.exceptions import ConsensusUsageError

Report = namedtuple("Report", ["level", "submitted_at"])

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def reports(*levels):
    """Newest first: the first level gets the latest timestamp."""
    n = len(levels)
    return [Report(level, T0 + timedelta(minutes=n - i)) for i, level in enumerate(levels)]


class TestNormalizeLevel(unittest.TestCase):

    def test_canonical_levels(self):
        for level in ("low", "medium", "high"):
            self.assertEqual(normalize_level(level), level)

    def test_legacy_labels(self):
        self.assertEqual(normalize_level("light"), "low")
        self.assertEqual(normalize_level(" Moderate "), "medium")
        self.assertEqual(normalize_level("CROWDED"), "high")

    def test_unknown_values(self):
        self.assertIsNone(normalize_level("packed"))
        self.assertIsNone(normalize_level(None))
        self.assertIsNone(normalize_level(3))


class TestComputeConsensus(unittest.TestCase):

    def test_empty_input(self):
        result = compute_consensus([], 10)
        self.assertEqual(result, EMPTY_CONSENSUS)
        self.assertEqual(result.level, UNKNOWN)
        self.assertEqual(result.confidence, 0)
        self.assertEqual(result.report_count, 0)
        self.assertIsNone(result.last_updated)

    def test_single_report(self):
        data = [Report("medium", T0)]
        result = compute_consensus(data, 10)
        self.assertEqual(result.level, "medium")
        self.assertEqual(result.confidence, 100)
        self.assertEqual(result.report_count, 1)
        self.assertEqual(result.last_updated, T0)

    def test_unanimous_reports(self):
        result = compute_consensus(reports("high", "high", "high", "high"), 10)
        self.assertEqual(result.level, "high")
        self.assertEqual(result.confidence, 100)

    def test_tie_goes_to_most_recent_level(self):
        data = [Report("high", T0 + timedelta(minutes=3)), Report("low", T0 + timedelta(minutes=2))]
        result = compute_consensus(data, 2)
        self.assertEqual(result.level, "high")
        self.assertEqual(result.confidence, 50)
        self.assertEqual(result.report_count, 2)

    def test_tie_between_three_levels(self):
        result = compute_consensus(reports("medium", "low", "high", "high", "low", "medium"), 10)
        self.assertEqual(result.level, "medium")
        self.assertEqual(result.confidence, 33)

    def test_window_ignores_older_reports(self):
        data = reports(*(["low"] * 15 + ["high"] * 5))
        result = compute_consensus(data, 10)
        self.assertEqual(result.level, "low")
        self.assertEqual(result.confidence, 100)
        self.assertEqual(result.report_count, 10)
        self.assertEqual(result.last_updated, data[0].submitted_at)

    def test_mixed_distribution(self):
        data = reports(*(["medium"] * 6 + ["low"] * 3 + ["high"]))
        result = compute_consensus(data, 10)
        self.assertEqual(result.level, "medium")
        self.assertEqual(result.confidence, 60)
        self.assertEqual(result.report_count, 10)

    def test_confidence_rounds_half_up(self):
        result = compute_consensus(reports(*(["low"] * 5 + ["high"] * 3)), 10)
        self.assertEqual(result.confidence, 63)

    def test_legacy_labels_count_with_canonical(self):
        result = compute_consensus(reports("crowded", "high", "light"), 10)
        self.assertEqual(result.level, "high")
        self.assertEqual(result.confidence, 67)
        self.assertFalse(result.has_anomalies)

    def test_malformed_levels_form_other_bucket(self):
        result = compute_consensus(reports("banana", "low", "banana"), 10)
        self.assertEqual(result.level, OTHER)
        self.assertEqual(result.confidence, 67)
        self.assertEqual(result.report_count, 3)
        self.assertEqual(result.anomalies, ("banana", "banana"))

    def test_malformed_reports_still_count(self):
        result = compute_consensus(reports("low", "low", None), 10)
        self.assertEqual(result.level, "low")
        self.assertEqual(result.confidence, 67)
        self.assertEqual(result.report_count, 3)
        self.assertTrue(result.has_anomalies)

    def test_zero_window(self):
        self.assertEqual(compute_consensus(reports("low"), 0), EMPTY_CONSENSUS)

    def test_accepts_any_iterable(self):
        data = reports("low", "high", "high")
        self.assertEqual(compute_consensus(iter(data), 10), compute_consensus(tuple(data), 10))

    def test_idempotent(self):
        data = tuple(reports("low", "medium", "medium", "high", "wet"))
        self.assertEqual(compute_consensus(data, 4), compute_consensus(data, 4))

    def test_bounds_hold_for_random_inputs(self):
        rng = random.Random(7)
        levels = ["low", "medium", "high", "moderate", "bogus"]
        for _ in range(200):
            window = rng.randint(1, 20)
            data = reports(*[rng.choice(levels) for _ in range(rng.randint(0, 30))])
            result = compute_consensus(data, window)
            self.assertGreaterEqual(result.confidence, 0)
            self.assertLessEqual(result.confidence, 100)
            self.assertLessEqual(result.report_count, window)
            if data:
                self.assertNotEqual(result.level, UNKNOWN)

    def test_as_dict(self):
        result = compute_consensus([Report("low", T0)], 10)
        self.assertEqual(result.as_dict(), {
            "level": "low",
            "confidence": 100,
            "report_count": 1,
            "last_updated": T0.isoformat(),
            "anomalies": [],
        })


class TestUsageErrors(unittest.TestCase):

    def test_none_reports(self):
        with self.assertRaises(ConsensusUsageError):
            compute_consensus(None, 10)

    def test_negative_window(self):
        with self.assertRaises(ConsensusUsageError):
            compute_consensus([], -1)

    def test_non_integer_window(self):
        for window in ("10", 2.5, None, True):
            with self.assertRaises(ConsensusUsageError):
                compute_consensus([], window)

    def test_usage_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            compute_consensus(None, 10)


if __name__ == "__main__":
    unittest.main()
