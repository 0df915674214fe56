"""In-memory stores for tests and ephemeral sessions."""
import threading
from typing import List

from spendlens.analysis.models import AnalysisSnapshot, ExpenseRecord


class InMemoryExpenseStore:
    def __init__(self, expenses: List[ExpenseRecord] = None):
        self._expenses: List[ExpenseRecord] = list(expenses or [])
        self._lock = threading.Lock()

    def fetch_all(self) -> List[ExpenseRecord]:
        with self._lock:
            return sorted(self._expenses, key=lambda e: e.date)

    def insert(self, expense: ExpenseRecord) -> None:
        with self._lock:
            self._expenses.append(expense)

    def delete(self, expense_id: str) -> bool:
        with self._lock:
            remaining = [e for e in self._expenses if e.id != expense_id]
            removed = len(remaining) != len(self._expenses)
            self._expenses = remaining
            return removed

    def delete_all(self) -> int:
        with self._lock:
            count = len(self._expenses)
            self._expenses = []
            return count


class InMemorySnapshotStore:
    def __init__(self):
        self._snapshots: List[AnalysisSnapshot] = []
        self._lock = threading.Lock()

    def fetch_all(self) -> List[AnalysisSnapshot]:
        """Newest first."""
        with self._lock:
            return sorted(self._snapshots, key=lambda s: s.created_at, reverse=True)

    def insert(self, snapshot: AnalysisSnapshot) -> None:
        with self._lock:
            self._snapshots.append(snapshot)

    def delete_all(self) -> int:
        with self._lock:
            count = len(self._snapshots)
            self._snapshots = []
            return count

    def replace_all(self, snapshot: AnalysisSnapshot) -> int:
        with self._lock:
            count = len(self._snapshots)
            self._snapshots = [snapshot]
            return count
