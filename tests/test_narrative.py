"""Tests for rule-based narrative text."""
import unittest
from datetime import datetime
from decimal import Decimal

from spendlens.analysis.models import Category, CategoryDelta, CategoryTotal
from spendlens.analysis.narrative import NarrativeBuilder


class TestNarrativeBuilder(unittest.TestCase):
    """Test NarrativeBuilder functionality."""

    def setUp(self):
        self.builder = NarrativeBuilder()
        self.start = datetime(2026, 10, 5, 9, 0)
        self.end = datetime(2026, 10, 12, 9, 0)

    def test_summary_and_insights(self):
        summary, insights = self.builder.build(
            Decimal("1234.5"),
            4,
            [CategoryTotal(Category.FOOD, Decimal("120")), CategoryTotal(Category.RENT, Decimal("100"))],
            [CategoryDelta(Category.FOOD, 1.0), CategoryDelta(Category.RENT, -0.25)],
            ["Netflix", "Spotify"],
            self.start,
            self.end
        )

        self.assertEqual(summary, "Spent $1,234.50 across 4 expenses between Oct 5, 2026 – Oct 12, 2026.")
        self.assertEqual(insights, [
            "Top category: Food ($120.00).",
            "Biggest change vs prev: Food (+100%).",
            "Recurring merchants: Netflix, Spotify",
        ])

    def test_empty_sources_produce_no_insights(self):
        summary, insights = self.builder.build(Decimal(0), 0, [], [], [], self.start, self.end)

        self.assertEqual(summary, "Spent $0.00 across 0 expenses between Oct 5, 2026 – Oct 12, 2026.")
        self.assertEqual(insights, [])

    def test_negative_delta_and_truncated_merchants(self):
        _, insights = self.builder.build(
            Decimal("10"),
            1,
            [],
            [CategoryDelta(Category.TRANSPORT, -0.5)],
            ["A", "B", "C", "D"],
            self.start,
            self.end
        )

        self.assertEqual(insights, [
            "Biggest change vs prev: Transport (-50%).",
            "Recurring merchants: A, B, C…",
        ])

    def test_currency_code(self):
        summary, _ = NarrativeBuilder("EUR").build(Decimal("9.5"), 1, [], [], [], self.start, self.end)

        self.assertTrue(summary.startswith("Spent €9.50 across 1 expenses"))


if __name__ == "__main__":
    unittest.main()
