"""AI insight generation module."""
from .models import AnalysisContext, AnalysisResult
from .insight_generator import AIInsightGenerator, STRICT_SCHEMA_HINT

__all__ = ["AnalysisContext", "AnalysisResult", "AIInsightGenerator", "STRICT_SCHEMA_HINT"]
