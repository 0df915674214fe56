"""Rule-based summary and insight text."""
from datetime import datetime
from decimal import Decimal
from typing import List, Sequence, Tuple

from .models import CategoryDelta, CategoryTotal
from spendlens.utils.formatting import format_currency, format_date, format_percent

MAX_RECURRING_MENTIONS = 3


class NarrativeBuilder:
    """Renders deterministic narrative strings from aggregation output."""

    def __init__(self, currency_code: str = "USD"):
        self.currency_code = currency_code

    def build(
        self,
        total_current: Decimal,
        expense_count: int,
        top_categories: Sequence[CategoryTotal],
        deltas: Sequence[CategoryDelta],
        recurring: Sequence[str],
        period_start: datetime,
        period_end: datetime
    ) -> Tuple[str, List[str]]:
        """
        Build summary and insights.

        Returns:
            (summary, insights)
        """
        summary = (
            f"Spent {format_currency(total_current, self.currency_code)} across {expense_count} expenses "
            f"between {format_date(period_start)} – {format_date(period_end)}."
        )

        insights: List[str] = []
        if top_categories:
            top = top_categories[0]
            insights.append(
                f"Top category: {top.category.display_name} ({format_currency(top.total, self.currency_code)})."
            )
        if deltas:
            biggest = deltas[0]
            insights.append(
                f"Biggest change vs prev: {biggest.category.display_name} ({format_percent(biggest.delta_pct)})."
            )
        if recurring:
            names = ", ".join(recurring[:MAX_RECURRING_MENTIONS])
            suffix = "…" if len(recurring) > MAX_RECURRING_MENTIONS else ""
            insights.append(f"Recurring merchants: {names}{suffix}")

        return summary, insights
