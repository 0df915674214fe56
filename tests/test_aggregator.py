"""Tests for expense aggregation."""
import unittest
from datetime import datetime
from decimal import Decimal

from spendlens.analysis.aggregator import AggregationEngine, NEW_SPENDING_DELTA
from spendlens.analysis.models import Category, ExpenseRecord


def expense(amount, category=None, day=1, merchant=None):
    return ExpenseRecord(
        title="Test",
        amount=Decimal(amount),
        date=datetime(2026, 5, day),
        merchant=merchant,
        category=category
    )


class TestAggregationEngine(unittest.TestCase):
    """Test AggregationEngine functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.engine = AggregationEngine()

    def test_totals_use_exact_decimal_arithmetic(self):
        current = [expense("0.10", Category.FOOD), expense("0.20", Category.FOOD)]

        result = self.engine.aggregate(current, [])

        self.assertEqual(result.top_categories[0].total, Decimal("0.30"))
        self.assertEqual(result.total_current, Decimal("0.30"))
        self.assertEqual(result.current_count, 2)

    def test_missing_category_counts_as_other(self):
        current = [expense("12.00"), expense("3.00", Category.OTHER), expense("5.00", Category.RENT)]

        totals = self.engine.category_totals(current)

        self.assertEqual(totals, {Category.OTHER: Decimal("15.00"), Category.RENT: Decimal("5.00")})

    def test_top_categories_limited_and_sorted(self):
        amounts = [
            (Category.FOOD, "10"),
            (Category.TRANSPORT, "70"),
            (Category.SHOPPING, "30"),
            (Category.BILLS, "50"),
            (Category.HEALTH, "20"),
            (Category.EDUCATION, "60"),
            (Category.RENT, "40"),
        ]
        current = [expense(amount, category) for category, amount in amounts]

        result = self.engine.aggregate(current, [])

        self.assertEqual(len(result.top_categories), 5)
        self.assertEqual(
            [item.category for item in result.top_categories],
            [Category.TRANSPORT, Category.EDUCATION, Category.BILLS, Category.RENT, Category.SHOPPING]
        )
        self.assertEqual(result.total_current, Decimal("280"))

    def test_top_category_ties_keep_first_seen_order(self):
        current = [
            expense("25", Category.HEALTH),
            expense("25", Category.FOOD),
            expense("10", Category.BILLS),
        ]

        result = self.engine.aggregate(current, [])

        self.assertEqual(
            [item.category for item in result.top_categories],
            [Category.HEALTH, Category.FOOD, Category.BILLS]
        )

    def test_deltas(self):
        current = [
            expense("30.00", Category.FOOD),
            expense("10.00", Category.SHOPPING),
            expense("20.00", Category.BILLS),
        ]
        previous = [
            expense("20.00", Category.FOOD),
            expense("20.00", Category.BILLS),
            expense("8.00", Category.TRANSPORT),
        ]

        result = self.engine.aggregate(current, previous)
        deltas = {delta.category: delta.delta_pct for delta in result.deltas}

        self.assertAlmostEqual(deltas[Category.FOOD], 0.5)
        self.assertEqual(deltas[Category.SHOPPING], NEW_SPENDING_DELTA)
        self.assertEqual(deltas[Category.BILLS], 0.0)
        self.assertAlmostEqual(deltas[Category.TRANSPORT], -1.0)
        self.assertEqual(result.total_previous, Decimal("48.00"))

    def test_deltas_sorted_by_magnitude_with_enumeration_tiebreak(self):
        current = [expense("10.00", Category.SHOPPING), expense("15.00", Category.FOOD)]
        previous = [expense("5.00", Category.TRANSPORT), expense("10.00", Category.FOOD)]

        result = self.engine.aggregate(current, previous)

        # transport -100% and shopping +100% tie on magnitude; transport comes first in the enumeration
        self.assertEqual(
            [delta.category for delta in result.deltas],
            [Category.TRANSPORT, Category.SHOPPING, Category.FOOD]
        )

    def test_zero_vs_zero_is_no_change(self):
        result = self.engine.aggregate([expense("0.00", Category.HEALTH)], [expense("0.00", Category.HEALTH)])

        self.assertEqual(result.deltas[0].delta_pct, 0.0)

    def test_empty_inputs(self):
        result = self.engine.aggregate([], [])

        self.assertEqual(result.top_categories, ())
        self.assertEqual(result.deltas, ())
        self.assertEqual(result.total_current, Decimal(0))
        self.assertEqual(result.total_previous, Decimal(0))


if __name__ == "__main__":
    unittest.main()
