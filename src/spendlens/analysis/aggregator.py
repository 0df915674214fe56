"""Expense aggregation module."""
from decimal import Decimal
from collections import defaultdict
from typing import Dict, List, Sequence

from .models import AggregationResult, Category, CategoryDelta, CategoryTotal, ExpenseRecord
from spendlens.utils.logger import get_logger

logger = get_logger()

TOP_CATEGORY_LIMIT = 5

# Delta reported for a category with no spending in the previous period
NEW_SPENDING_DELTA = 1.0

_CATEGORY_ORDER = {category: index for index, category in enumerate(Category)}


class AggregationEngine:
    """Aggregates current and previous period expenses by category."""

    def __init__(self, top_limit: int = TOP_CATEGORY_LIMIT):
        self.top_limit = top_limit

    def aggregate(
        self,
        current: Sequence[ExpenseRecord],
        previous: Sequence[ExpenseRecord]
    ) -> AggregationResult:
        """
        Aggregate both periods into top categories and deltas.

        Args:
            current: Expenses in the current period
            previous: Expenses in the previous period

        Returns:
            AggregationResult object
        """
        totals = self.category_totals(current)
        prev_totals = self.category_totals(previous)

        # sorted() is stable, so equal totals keep first-seen order
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        top_categories = tuple(
            CategoryTotal(category=category, total=total)
            for category, total in ranked[:self.top_limit]
        )

        deltas = self._compute_deltas(totals, prev_totals)

        total_current = sum(totals.values(), Decimal(0))
        total_previous = sum(prev_totals.values(), Decimal(0))

        logger.info(
            f"Aggregated {len(current)} current and {len(previous)} previous expenses "
            f"into {len(totals)} categories (total {total_current}, previous {total_previous})"
        )

        return AggregationResult(
            top_categories=top_categories,
            deltas=deltas,
            total_current=total_current,
            total_previous=total_previous,
            current_count=len(current)
        )

    @staticmethod
    def category_totals(expenses: Sequence[ExpenseRecord]) -> Dict[Category, Decimal]:
        """Sum amounts per category in first-seen order; uncategorized counts as other."""
        totals: Dict[Category, Decimal] = defaultdict(Decimal)
        for expense in expenses:
            totals[expense.effective_category] += expense.amount
        return dict(totals)

    @staticmethod
    def _compute_deltas(
        totals: Dict[Category, Decimal],
        prev_totals: Dict[Category, Decimal]
    ) -> tuple:
        """Percentage change per category over the union of both periods."""
        categories = sorted(set(totals) | set(prev_totals), key=_CATEGORY_ORDER.__getitem__)

        deltas: List[CategoryDelta] = []
        for category in categories:
            current = totals.get(category, Decimal(0))
            previous = prev_totals.get(category, Decimal(0))
            if previous == 0:
                delta_pct = 0.0 if current == 0 else NEW_SPENDING_DELTA
            else:
                delta_pct = float(current / previous - 1)
            deltas.append(CategoryDelta(category=category, delta_pct=delta_pct))

        deltas.sort(key=lambda delta: abs(delta.delta_pct), reverse=True)
        return tuple(deltas)
