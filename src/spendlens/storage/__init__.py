"""Expense and snapshot storage module.

Stores are duck-typed. Expense stores provide ``fetch_all``, ``insert``,
``delete`` and ``delete_all``; snapshot stores provide ``fetch_all``,
``insert``, ``delete_all`` and ``replace_all``.
"""
from .sqlite_store import SQLiteExpenseStore, SQLiteSnapshotStore
from .memory import InMemoryExpenseStore, InMemorySnapshotStore
from .maintenance import reset_all_data

__all__ = [
    "SQLiteExpenseStore",
    "SQLiteSnapshotStore",
    "InMemoryExpenseStore",
    "InMemorySnapshotStore",
    "reset_all_data"
]
