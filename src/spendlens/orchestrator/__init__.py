"""Analysis orchestration module."""
from .processor import AnalysisOrchestrator, AnalysisOutcome, RunResult

__all__ = ["AnalysisOrchestrator", "AnalysisOutcome", "RunResult"]
