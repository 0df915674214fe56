"""Recurring merchant detection."""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Sequence

from .models import ExpenseRecord
from spendlens.utils.logger import get_logger

logger = get_logger()


class RecurringMerchantDetector:
    """Flags merchants with repeated, similarly-sized charges."""

    def __init__(
        self,
        relative_tolerance: Decimal = Decimal("0.05"),
        absolute_tolerance: Decimal = Decimal("1.0")
    ):
        """
        Initialize detector.

        Args:
            relative_tolerance: Allowed difference as a share of the larger amount
            absolute_tolerance: Minimum allowed difference in currency units
        """
        self.relative_tolerance = relative_tolerance
        self.absolute_tolerance = absolute_tolerance

    def detect(self, expenses: Sequence[ExpenseRecord]) -> List[str]:
        """
        Find recurring merchants in a period.

        Args:
            expenses: Current period expenses

        Returns:
            Unique merchant names, sorted alphabetically
        """
        grouped: Dict[str, List[Decimal]] = defaultdict(list)
        for expense in expenses:
            if expense.merchant and expense.merchant.strip():
                grouped[expense.merchant].append(expense.amount)

        recurring = [merchant for merchant, amounts in grouped.items() if self._has_similar_pair(amounts)]

        # Fallback: merchants charged at least twice
        if not recurring:
            recurring = [merchant for merchant, amounts in grouped.items() if len(amounts) >= 2]
            if recurring:
                logger.debug(f"No similar-amount merchants, using frequency fallback: {recurring}")

        return sorted(recurring)

    def _has_similar_pair(self, amounts: List[Decimal]) -> bool:
        """Check adjacent sorted amounts against max(absolute, relative * larger)."""
        ordered = sorted(amounts)
        for smaller, larger in zip(ordered, ordered[1:]):
            tolerance = max(self.absolute_tolerance, self.relative_tolerance * larger)
            if larger - smaller <= tolerance:
                return True
        return False
