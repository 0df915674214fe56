"""Analysis run orchestration.

One pipeline serves both entry points. Auto runs replace every stored
snapshot with the new one; manual runs append to the history. Runs on the
same orchestrator are serialized so the replace step of one auto run never
interleaves with another run.
"""
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence

import requests

from spendlens.analysis.aggregator import AggregationEngine
from spendlens.analysis.models import AggregationResult, AnalysisSnapshot, ExpenseRecord
from spendlens.analysis.narrative import NarrativeBuilder
from spendlens.analysis.period import PeriodWindow, compute_window
from spendlens.analysis.recurring import RecurringMerchantDetector
from spendlens.config.manager import Config
from spendlens.config.settings import AppSettings, get_settings
from spendlens.llm.insight_generator import AIInsightGenerator
from spendlens.llm.models import AnalysisContext
from spendlens.utils.exceptions import LLMError
from spendlens.utils.logger import get_logger, set_run_context

logger = get_logger()


class AnalysisOutcome(str, Enum):
    RULE_BASED = "rule_based"
    USED_AI = "used_ai"
    USED_FALLBACK = "used_fallback"


@dataclass
class RunResult:
    snapshot: AnalysisSnapshot
    outcome: AnalysisOutcome


class AnalysisOrchestrator:
    """Orchestrates the flow: window -> aggregation -> AI or narrative -> snapshot store."""

    def __init__(
        self,
        expense_store,
        snapshot_store,
        settings: AppSettings = None,
        generator_factory: Callable[[Config], AIInsightGenerator] = None,
        on_fallback: Optional[Callable[[], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
        session: requests.Session = None
    ):
        """
        Initialize orchestrator.

        Args:
            expense_store: Source of expense records (``fetch_all``)
            snapshot_store: Destination of snapshots (``insert``, ``replace_all``)
            settings: Application settings
            generator_factory: Builds the AI generator for a run's config
            on_fallback: Called once whenever AI insights fail and rule-based ones are used
            clock: Returns the reference instant for each run
            session: HTTP session shared by default-built generators
        """
        self.expense_store = expense_store
        self.snapshot_store = snapshot_store
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.generator_factory = generator_factory or self._default_generator
        self.on_fallback = on_fallback
        self.clock = clock

        self.engine = AggregationEngine(top_limit=self.settings.top_category_limit)
        self.detector = RecurringMerchantDetector()
        self._run_lock = threading.Lock()

    def run_auto_analysis(self, config: Config, expenses: Sequence[ExpenseRecord] = None) -> RunResult:
        """Analyze the fixed auto window and leave exactly one snapshot in the store."""
        return self._run(self.settings.auto_window_days, config, expenses, replace_existing=True)

    def run_analysis(
        self,
        window_days: int,
        config: Config,
        expenses: Sequence[ExpenseRecord] = None
    ) -> RunResult:
        """Analyze a user-chosen window and add a snapshot to the history."""
        return self._run(window_days, config, expenses, replace_existing=False)

    def _run(
        self,
        window_days: int,
        config: Config,
        expenses: Optional[Sequence[ExpenseRecord]],
        replace_existing: bool
    ) -> RunResult:
        with self._run_lock:
            set_run_context(uuid.uuid4().hex[:8])
            try:
                return self._execute(window_days, config, expenses, replace_existing)
            finally:
                set_run_context(None)

    def _execute(
        self,
        window_days: int,
        config: Config,
        expenses: Optional[Sequence[ExpenseRecord]],
        replace_existing: bool
    ) -> RunResult:
        now = self.clock()
        window = compute_window(now, window_days)
        mode = "auto" if replace_existing else "manual"
        logger.info(
            f"Starting {mode} analysis: {window.period_start:%Y-%m-%d %H:%M} to "
            f"{window.period_end:%Y-%m-%d %H:%M} ({window_days} days)"
        )

        if expenses is None:
            expenses = self.expense_store.fetch_all()
        current = [e for e in expenses if window.contains_current(e.date)]
        previous = [e for e in expenses if window.contains_previous(e.date)]

        aggregation = self.engine.aggregate(current, previous)
        recurring = tuple(self.detector.detect(current))

        if not config.use_ai:
            snapshot = self._rule_based_snapshot(window, aggregation, recurring, config, now)
            self._persist(snapshot, replace_existing)
            return RunResult(snapshot, AnalysisOutcome.RULE_BASED)

        context = AnalysisContext(
            total_spending=aggregation.total_current,
            top_categories=aggregation.top_categories,
            deltas=aggregation.deltas,
            recurring_merchants=recurring,
            period_start=window.period_start,
            period_end=window.period_end,
            previous_period_spending=aggregation.total_previous
        )

        try:
            ai_result = self.generator_factory(config).generate(context)
        except LLMError as e:
            logger.warning(f"AI analysis unavailable, falling back to rule-based insights: {e}")
            if self.on_fallback:
                self.on_fallback()
            snapshot = self._rule_based_snapshot(window, aggregation, recurring, config, now)
            self._persist(snapshot, replace_existing)
            return RunResult(snapshot, AnalysisOutcome.USED_FALLBACK)

        logger.info(f"AI analysis succeeded (tone: {ai_result.tone})")
        snapshot = self._build_snapshot(
            window,
            aggregation,
            recurring,
            insights=ai_result.insights + ai_result.recommendations,
            summary=ai_result.summary,
            created_at=now
        )
        self._persist(snapshot, replace_existing)
        return RunResult(snapshot, AnalysisOutcome.USED_AI)

    def _rule_based_snapshot(
        self,
        window: PeriodWindow,
        aggregation: AggregationResult,
        recurring: tuple,
        config: Config,
        created_at: datetime
    ) -> AnalysisSnapshot:
        summary, insights = NarrativeBuilder(config.currency_code).build(
            aggregation.total_current,
            aggregation.current_count,
            aggregation.top_categories,
            aggregation.deltas,
            recurring,
            window.period_start,
            window.period_end
        )
        return self._build_snapshot(window, aggregation, recurring, insights, summary, created_at)

    @staticmethod
    def _build_snapshot(
        window: PeriodWindow,
        aggregation: AggregationResult,
        recurring: tuple,
        insights: List[str],
        summary: str,
        created_at: datetime
    ) -> AnalysisSnapshot:
        return AnalysisSnapshot(
            period_start=window.period_start,
            period_end=window.period_end,
            top_categories=aggregation.top_categories,
            deltas=aggregation.deltas,
            recurring_merchants=recurring,
            insights=tuple(insights),
            summary=summary,
            created_at=created_at
        )

    def _persist(self, snapshot: AnalysisSnapshot, replace_existing: bool) -> None:
        """Hand the snapshot to the store; storage errors propagate to the caller."""
        if replace_existing:
            removed = self.snapshot_store.replace_all(snapshot)
            logger.info(f"Stored snapshot {snapshot.id} (replaced {removed})")
        else:
            self.snapshot_store.insert(snapshot)
            logger.info(f"Stored snapshot {snapshot.id}")

    def _default_generator(self, config: Config) -> AIInsightGenerator:
        return AIInsightGenerator(
            api_key=config.openai_api_key,
            settings=self.settings,
            session=self.session,
            currency_code=config.currency_code
        )
