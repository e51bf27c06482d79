"""Time-window helpers shared by the component calculators."""

from datetime import datetime, timedelta
from typing import Iterable, List

from nexoscore.domain.entities import TransactionEvent


def in_trailing_window(
    transactions: Iterable[TransactionEvent],
    as_of: datetime,
    days: int,
) -> List[TransactionEvent]:
    """Transactions logged within the last ``days`` days up to ``as_of``."""
    since = as_of - timedelta(days=days)
    return [t for t in transactions if t.created_at >= since]


def in_window_range(
    transactions: Iterable[TransactionEvent],
    as_of: datetime,
    start_days_ago: int,
    end_days_ago: int,
) -> List[TransactionEvent]:
    """
    Transactions between ``end_days_ago`` (inclusive) and ``start_days_ago``
    (exclusive) days before ``as_of``.

    ``in_window_range(txs, now, 30, 60)`` is the 30-day window preceding the
    trailing 30 days.
    """
    start = as_of - timedelta(days=end_days_ago)
    end = as_of - timedelta(days=start_days_ago)
    return [t for t in transactions if start <= t.created_at < end]


def total_sales(transactions: Iterable[TransactionEvent]) -> int:
    """Sum of cash and credit sale amounts."""
    return sum(t.amount for t in transactions if t.is_sale)


def monthly_sales(
    transactions: Iterable[TransactionEvent],
    as_of: datetime,
    days: int = 30,
) -> int:
    """Sales over the trailing window; the base of the credit limit."""
    return total_sales(in_trailing_window(transactions, as_of, days))


def format_compact(amount: float) -> str:
    """Format an amount as 1.2M / 350K / 900."""
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"{round(amount / 1_000)}K"
    return str(round(amount))
