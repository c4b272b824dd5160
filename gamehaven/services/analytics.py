"""
Sales analytics for the admin dashboard.

Aggregates transactions over a time range into revenue figures.
"""

from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel

from gamehaven.models.base import utc_now
from gamehaven.models.transaction import Transaction


class TimeRange(str, Enum):
    """Dashboard time filters."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class SalesSummary(BaseModel):
    time_range: TimeRange = TimeRange.ALL
    total_revenue: float = 0.0
    total_transactions: int = 0
    average_transaction: float = 0.0


def in_range(moment: datetime, time_range: TimeRange, now: datetime) -> bool:
    """
    Whether ``moment`` falls in the calendar period of ``now``.

    WEEK uses ISO weeks (Monday to Sunday).
    """
    if time_range == TimeRange.ALL:
        return True
    if time_range == TimeRange.TODAY:
        return moment.date() == now.date()
    if time_range == TimeRange.WEEK:
        return moment.isocalendar()[:2] == now.isocalendar()[:2]
    if time_range == TimeRange.MONTH:
        return (moment.year, moment.month) == (now.year, now.month)
    raise ValueError(f"Unknown time range: {time_range}")


class SalesAnalytics:
    """Pure aggregation over already-loaded transactions."""

    @staticmethod
    def filter(
        transactions: Iterable[Transaction],
        time_range: TimeRange = TimeRange.ALL,
        now: Optional[datetime] = None
    ) -> List[Transaction]:
        now = now or utc_now()
        return [tx for tx in transactions if in_range(tx.date, time_range, now)]

    @classmethod
    def summarize(
        cls,
        transactions: Iterable[Transaction],
        time_range: TimeRange = TimeRange.ALL,
        now: Optional[datetime] = None
    ) -> SalesSummary:
        """
        Revenue, count and average transaction value for a time range.

        Args:
            transactions: Transactions to aggregate
            time_range: Calendar period to keep
            now: Reference time (defaults to the current UTC time)

        Returns:
            SalesSummary; the average is 0.0 when nothing matched

        Example:
            >>> SalesAnalytics.summarize(txs, TimeRange.MONTH).total_revenue
            65000.0
        """
        selected = cls.filter(transactions, time_range, now)
        revenue = sum(tx.total_price for tx in selected)
        count = len(selected)
        return SalesSummary(
            time_range=time_range,
            total_revenue=revenue,
            total_transactions=count,
            average_transaction=revenue / count if count else 0.0,
        )
