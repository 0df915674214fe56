"""SQLite-backed expense and snapshot stores."""
import json
import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import List

from spendlens.analysis.models import (
    AnalysisSnapshot,
    Category,
    CategoryDelta,
    CategoryTotal,
    ExpenseRecord,
    Source
)
from spendlens.utils.exceptions import StorageError
from spendlens.utils.logger import get_logger

logger = get_logger()


class SQLiteExpenseStore:
    """Expense records in a local SQLite database."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self):
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS expenses (
                        id TEXT PRIMARY KEY,
                        title TEXT NOT NULL,
                        amount TEXT NOT NULL,
                        date TEXT NOT NULL,
                        merchant TEXT,
                        category TEXT,
                        source TEXT NOT NULL
                    )
                """)
                cursor.execute("CREATE INDEX IF NOT EXISTS idx_expense_date ON expenses(date)")
                conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to open database {self.db_path}: {e}") from e

    def fetch_all(self) -> List[ExpenseRecord]:
        """Return every expense, oldest first."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT id, title, amount, date, merchant, category, source FROM expenses ORDER BY date"
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to fetch expenses: {e}") from e

        return [
            ExpenseRecord(
                id=r[0],
                title=r[1],
                amount=Decimal(r[2]),
                date=datetime.fromisoformat(r[3]),
                merchant=r[4],
                category=Category(r[5]) if r[5] else None,
                source=Source(r[6])
            )
            for r in rows
        ]

    def insert(self, expense: ExpenseRecord) -> None:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    INSERT INTO expenses (id, title, amount, date, merchant, category, source)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    expense.id,
                    expense.title,
                    str(expense.amount),
                    expense.date.isoformat(),
                    expense.merchant,
                    expense.category.value if expense.category else None,
                    expense.source.value
                ))
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to insert expense {expense.id}: {e}") from e

    def delete(self, expense_id: str) -> bool:
        """Delete one expense; returns False if it did not exist."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete expense {expense_id}: {e}") from e

    def delete_all(self) -> int:
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM expenses")
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete expenses: {e}") from e


class SQLiteSnapshotStore:
    """Analysis snapshots in a local SQLite database."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self):
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS snapshots (
                        id TEXT PRIMARY KEY,
                        created_at TEXT NOT NULL,
                        period_start TEXT NOT NULL,
                        period_end TEXT NOT NULL,
                        top_categories TEXT NOT NULL,
                        deltas TEXT NOT NULL,
                        recurring_merchants TEXT NOT NULL,
                        insights TEXT NOT NULL,
                        summary TEXT NOT NULL
                    )
                """)
                cursor.execute("CREATE INDEX IF NOT EXISTS idx_snapshot_created ON snapshots(created_at)")
                conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to open database {self.db_path}: {e}") from e

    def fetch_all(self) -> List[AnalysisSnapshot]:
        """Return every snapshot, newest first."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    SELECT id, created_at, period_start, period_end, top_categories,
                           deltas, recurring_merchants, insights, summary
                    FROM snapshots ORDER BY created_at DESC
                """)
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to fetch snapshots: {e}") from e

        return [self._row_to_snapshot(r) for r in rows]

    def insert(self, snapshot: AnalysisSnapshot) -> None:
        try:
            with sqlite3.connect(self.db_path) as conn:
                self._insert(conn, snapshot)
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to insert snapshot {snapshot.id}: {e}") from e

    def delete_all(self) -> int:
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM snapshots")
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete snapshots: {e}") from e

    def replace_all(self, snapshot: AnalysisSnapshot) -> int:
        """Delete every snapshot and insert ``snapshot`` in one transaction."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM snapshots")
                deleted = cursor.rowcount
                self._insert(conn, snapshot)
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to replace snapshots with {snapshot.id}: {e}") from e

        logger.debug(f"Replaced {deleted} snapshot(s) with {snapshot.id}")
        return deleted

    @staticmethod
    def _insert(conn: sqlite3.Connection, snapshot: AnalysisSnapshot) -> None:
        conn.execute("""
            INSERT INTO snapshots
            (id, created_at, period_start, period_end, top_categories,
             deltas, recurring_merchants, insights, summary)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            snapshot.id,
            snapshot.created_at.isoformat(),
            snapshot.period_start.isoformat(),
            snapshot.period_end.isoformat(),
            json.dumps([
                {"category": item.category.value, "total": str(item.total)}
                for item in snapshot.top_categories
            ]),
            json.dumps([
                {"category": delta.category.value, "delta_pct": delta.delta_pct}
                for delta in snapshot.deltas
            ]),
            json.dumps(list(snapshot.recurring_merchants), ensure_ascii=False),
            json.dumps(list(snapshot.insights), ensure_ascii=False),
            snapshot.summary
        ))

    @staticmethod
    def _row_to_snapshot(r) -> AnalysisSnapshot:
        # r: (id, created_at, period_start, period_end, top_categories, deltas, recurring, insights, summary)
        return AnalysisSnapshot(
            id=r[0],
            created_at=datetime.fromisoformat(r[1]),
            period_start=datetime.fromisoformat(r[2]),
            period_end=datetime.fromisoformat(r[3]),
            top_categories=tuple(
                CategoryTotal(category=Category(item["category"]), total=Decimal(item["total"]))
                for item in json.loads(r[4])
            ),
            deltas=tuple(
                CategoryDelta(category=Category(item["category"]), delta_pct=item["delta_pct"])
                for item in json.loads(r[5])
            ),
            recurring_merchants=tuple(json.loads(r[6])),
            insights=tuple(json.loads(r[7])),
            summary=r[8]
        )
