"""Tests for period window computation."""
import unittest
from datetime import datetime, timedelta

from spendlens.analysis.period import compute_window
from spendlens.utils.exceptions import InvalidWindowError


class TestComputeWindow(unittest.TestCase):
    """Test compute_window functionality."""

    def setUp(self):
        self.now = datetime(2026, 3, 15, 18, 30)

    def test_windows_are_contiguous_and_equal_length(self):
        window = compute_window(self.now, 7)

        self.assertEqual(window.period_end, self.now)
        self.assertEqual(window.period_start, self.now - timedelta(days=7))
        self.assertEqual(window.prev_end, window.period_start)
        self.assertEqual(window.prev_start, self.now - timedelta(days=14))

    def test_non_positive_window_raises(self):
        for days in (0, -3):
            with self.assertRaises(InvalidWindowError):
                compute_window(self.now, days)

    def test_membership_is_inclusive(self):
        window = compute_window(self.now, 7)

        self.assertTrue(window.contains_current(window.period_start))
        self.assertTrue(window.contains_current(self.now))
        self.assertTrue(window.contains_previous(window.prev_start))
        # The shared boundary belongs to both windows
        self.assertTrue(window.contains_previous(window.period_start))
        self.assertFalse(window.contains_current(self.now + timedelta(seconds=1)))
        self.assertFalse(window.contains_previous(window.prev_start - timedelta(seconds=1)))


if __name__ == "__main__":
    unittest.main()
