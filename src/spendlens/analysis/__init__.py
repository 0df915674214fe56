"""Local spending analysis module."""
from .models import (
    Category,
    Source,
    ExpenseRecord,
    CategoryTotal,
    CategoryDelta,
    AggregationResult,
    AnalysisSnapshot
)
from .period import PeriodWindow, compute_window
from .aggregator import AggregationEngine, NEW_SPENDING_DELTA
from .recurring import RecurringMerchantDetector
from .narrative import NarrativeBuilder

__all__ = [
    "Category",
    "Source",
    "ExpenseRecord",
    "CategoryTotal",
    "CategoryDelta",
    "AggregationResult",
    "AnalysisSnapshot",
    "PeriodWindow",
    "compute_window",
    "AggregationEngine",
    "NEW_SPENDING_DELTA",
    "RecurringMerchantDetector",
    "NarrativeBuilder"
]
