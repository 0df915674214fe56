"""Data models for AI insight generation."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Tuple

from pydantic import BaseModel, Field

from spendlens.analysis.models import CategoryDelta, CategoryTotal


@dataclass(frozen=True)
class AnalysisContext:
    """Request payload for a single AI insight call."""
    total_spending: Decimal
    top_categories: Tuple[CategoryTotal, ...]
    deltas: Tuple[CategoryDelta, ...]
    recurring_merchants: Tuple[str, ...]
    period_start: datetime
    period_end: datetime
    previous_period_spending: Decimal


class AnalysisResult(BaseModel):
    """Pydantic schema for the AI response."""
    summary: str = Field(description="Brief 1-2 sentence overview of the spending period")
    insights: List[str] = Field(description="Concise, specific observations")
    recommendations: List[str] = Field(description="Actionable suggestions")
    tone: Literal["positive", "neutral", "cautionary"]
