"""
Tests for sales aggregation over time ranges.
"""

from datetime import datetime

import pytest

from gamehaven.models import Transaction
from gamehaven.services.analytics import SalesAnalytics, TimeRange, in_range


# Wednesday
NOW = datetime(2026, 10, 14, 15, 0)


def tx(total: float, date: datetime) -> Transaction:
    return Transaction(user_id=1, total_price=total, date=date)


@pytest.fixture
def transactions() -> list[Transaction]:
    return [
        tx(25000.0, datetime(2026, 10, 14, 9, 0)),   # today
        tx(40000.0, datetime(2026, 10, 12, 18, 0)),  # Monday, same ISO week
        tx(15000.0, datetime(2026, 10, 1, 12, 0)),   # same month
        tx(10000.0, datetime(2025, 10, 14, 12, 0)),  # a year ago
    ]


class TestInRange:

    @pytest.mark.parametrize(
        "moment,time_range,expected",
        [
            (datetime(2026, 10, 14, 0, 0), TimeRange.TODAY, True),
            (datetime(2026, 10, 13, 23, 59), TimeRange.TODAY, False),
            (datetime(2026, 10, 12, 0, 0), TimeRange.WEEK, True),
            (datetime(2026, 10, 11, 23, 59), TimeRange.WEEK, False),
            (datetime(2026, 10, 1, 0, 0), TimeRange.MONTH, True),
            (datetime(2025, 10, 20, 0, 0), TimeRange.MONTH, False),
            (datetime(1999, 1, 1, 0, 0), TimeRange.ALL, True),
        ],
    )
    def test_calendar_periods(self, moment, time_range, expected):
        assert in_range(moment, time_range, NOW) is expected


class TestSalesAnalytics:

    @pytest.mark.parametrize(
        "time_range,revenue,count",
        [
            (TimeRange.TODAY, 25000.0, 1),
            (TimeRange.WEEK, 65000.0, 2),
            (TimeRange.MONTH, 80000.0, 3),
            (TimeRange.ALL, 90000.0, 4),
        ],
    )
    def test_summarize(self, transactions, time_range, revenue, count):
        summary = SalesAnalytics.summarize(transactions, time_range, now=NOW)

        assert summary.time_range == time_range
        assert summary.total_revenue == pytest.approx(revenue)
        assert summary.total_transactions == count
        assert summary.average_transaction == pytest.approx(revenue / count)

    def test_summarize_empty(self):
        summary = SalesAnalytics.summarize([], TimeRange.WEEK, now=NOW)

        assert summary.total_revenue == 0.0
        assert summary.total_transactions == 0
        assert summary.average_transaction == 0.0

    def test_filter_keeps_order(self, transactions):
        selected = SalesAnalytics.filter(transactions, TimeRange.WEEK, now=NOW)

        assert [t.total_price for t in selected] == [25000.0, 40000.0]
