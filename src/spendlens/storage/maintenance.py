"""Data reset operations."""
from spendlens.utils.logger import get_logger

logger = get_logger()


def reset_all_data(expense_store, snapshot_store) -> int:
    """
    Delete every expense and every analysis snapshot.

    Args:
        expense_store: Store exposing ``delete_all()``
        snapshot_store: Store exposing ``delete_all()``

    Returns:
        Number of expenses removed
    """
    expenses_removed = expense_store.delete_all()
    snapshots_removed = snapshot_store.delete_all()
    logger.info(f"Reset data: removed {expenses_removed} expenses and {snapshots_removed} snapshots")
    return expenses_removed
