"""Current/previous period window computation."""
from dataclasses import dataclass
from datetime import datetime, timedelta

from spendlens.utils.exceptions import InvalidWindowError


@dataclass(frozen=True)
class PeriodWindow:
    """Two equal-length, contiguous ranges: previous immediately precedes current."""
    period_start: datetime
    period_end: datetime
    prev_start: datetime
    prev_end: datetime

    def contains_current(self, ts: datetime) -> bool:
        return self.period_start <= ts <= self.period_end

    def contains_previous(self, ts: datetime) -> bool:
        return self.prev_start <= ts <= self.prev_end


def compute_window(now: datetime, window_days: int) -> PeriodWindow:
    """
    Compute the current and previous windows ending at ``now``.

    Args:
        now: Reference instant (end of the current window)
        window_days: Length of each window in days

    Returns:
        PeriodWindow

    Raises:
        InvalidWindowError: If window_days is not positive
    """
    if window_days <= 0:
        raise InvalidWindowError(f"Window length must be positive, got {window_days} days")

    length = timedelta(days=window_days)
    period_start = now - length
    return PeriodWindow(
        period_start=period_start,
        period_end=now,
        prev_start=period_start - length,
        prev_end=period_start
    )
