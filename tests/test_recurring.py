"""Tests for recurring merchant detection."""
import unittest
from datetime import datetime
from decimal import Decimal

from spendlens.analysis.models import ExpenseRecord
from spendlens.analysis.recurring import RecurringMerchantDetector


def charge(merchant, amount, day=1):
    return ExpenseRecord(title=merchant or "Cash", amount=Decimal(amount), date=datetime(2026, 4, day), merchant=merchant)


class TestRecurringMerchantDetector(unittest.TestCase):
    """Test RecurringMerchantDetector functionality."""

    def setUp(self):
        self.detector = RecurringMerchantDetector()

    def test_similar_amounts_flagged(self):
        expenses = [charge("Netflix", "9.99", 1), charge("Netflix", "10.99", 20)]

        self.assertEqual(self.detector.detect(expenses), ["Netflix"])

    def test_dissimilar_amounts_use_frequency_fallback(self):
        expenses = [charge("Shop", "5.00"), charge("Shop", "500.00")]

        self.assertEqual(self.detector.detect(expenses), ["Shop"])

    def test_fallback_not_used_when_similarity_matches(self):
        expenses = [
            charge("Shop", "5.00"),
            charge("Shop", "500.00"),
            charge("Spotify", "11.99"),
            charge("Spotify", "11.99"),
        ]

        self.assertEqual(self.detector.detect(expenses), ["Spotify"])

    def test_relative_tolerance_for_large_amounts(self):
        # 5% of 1000 allows a 50 difference; 60 is too far
        self.assertEqual(self.detector.detect([charge("Landlord", "950"), charge("Landlord", "1000"),
                                               charge("Gym", "40"), charge("Gym", "41")]),
                         ["Gym", "Landlord"])
        self.assertFalse(self.detector._has_similar_pair([Decimal("940"), Decimal("1000")]))

    def test_unsorted_amounts_are_sorted_first(self):
        self.assertTrue(self.detector._has_similar_pair([Decimal("100"), Decimal("3"), Decimal("99.50")]))

    def test_ignores_missing_merchant_and_single_charges(self):
        expenses = [charge(None, "10.00"), charge(None, "10.00"), charge("", "4.00"), charge("Bakery", "4.00")]

        self.assertEqual(self.detector.detect(expenses), [])

    def test_result_sorted_and_unique(self):
        expenses = [
            charge("Zoo", "12.00"), charge("Zoo", "12.00"), charge("Zoo", "12.50"),
            charge("Apple", "0.99"), charge("Apple", "0.99"),
        ]

        self.assertEqual(self.detector.detect(expenses), ["Apple", "Zoo"])


if __name__ == "__main__":
    unittest.main()
