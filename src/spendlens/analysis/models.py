"""Data models for spending analysis."""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class Category(str, Enum):
    """Fixed expense category enumeration (declaration order is significant)."""
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    BILLS = "bills"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    EDUCATION = "education"
    RENT = "rent"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_string(cls, raw: Optional[str]) -> Optional["Category"]:
        """Best-effort mapping from free text to a category; None if unknown."""
        if raw is None or not raw.strip():
            return None
        return _CATEGORY_ALIASES.get(raw.strip().lower())


_CATEGORY_ALIASES = {
    **{alias: Category.FOOD for alias in ("food", "dining", "groceries", "restaurant", "restaurants")},
    **{alias: Category.TRANSPORT for alias in ("transport", "travel", "commute", "uber", "lyft", "taxi", "fuel", "gas")},
    **{alias: Category.SHOPPING for alias in ("shopping", "retail", "amazon")},
    **{alias: Category.BILLS for alias in ("bills", "utilities", "mortgage", "phone", "electricity", "water")},
    **{alias: Category.ENTERTAINMENT for alias in ("entertainment", "movies", "music", "games")},
    **{alias: Category.HEALTH for alias in ("health", "healthcare", "medical", "pharmacy", "fitness", "gym")},
    **{alias: Category.EDUCATION for alias in ("education", "tuition", "courses", "books")},
    "rent": Category.RENT,
    **{alias: Category.OTHER for alias in ("other", "misc", "miscellaneous")},
}


class Source(str, Enum):
    """Expense provenance."""
    MANUAL = "manual"
    IMPORTED = "imported"


@dataclass(frozen=True)
class ExpenseRecord:
    """Expense as read from the expense store."""
    title: str
    amount: Decimal
    date: datetime
    merchant: Optional[str] = None
    category: Optional[Category] = None
    source: Source = Source.MANUAL
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def effective_category(self) -> Category:
        return self.category or Category.OTHER


@dataclass(frozen=True)
class CategoryTotal:
    category: Category
    total: Decimal


@dataclass(frozen=True)
class CategoryDelta:
    """Change of a category's total vs the previous period, as a ratio (0.25 == +25%)."""
    category: Category
    delta_pct: float


@dataclass(frozen=True)
class AggregationResult:
    """Aggregated current vs previous period data."""
    top_categories: Tuple[CategoryTotal, ...]
    deltas: Tuple[CategoryDelta, ...]
    total_current: Decimal
    total_previous: Decimal
    current_count: int = 0


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Persisted analysis result. Never mutated; only created or deleted."""
    period_start: datetime
    period_end: datetime
    top_categories: Tuple[CategoryTotal, ...]
    deltas: Tuple[CategoryDelta, ...]
    recurring_merchants: Tuple[str, ...]
    insights: Tuple[str, ...]
    summary: str
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
