"""
Transaction facade: checkout recording, sales history and analytics.
"""

from typing import Optional, Sequence

from gamehaven.core.database import Database
from gamehaven.models.transaction import Transaction, TransactionDetail
from gamehaven.repositories.transaction import TransactionRepository
from gamehaven.repositories.transaction_detail import TransactionDetailRepository
from gamehaven.services.analytics import SalesAnalytics, SalesSummary, TimeRange
from gamehaven.services.live_query import LiveQuery
from gamehaven.services.purchase import PurchaseService


class TransactionFacade:
    """
    Records purchases and exposes sales data as live streams.

    Attributes:
        database: Storage handle
    """

    def __init__(self, database: Database):
        self.database = database

    def all_transactions(self) -> LiveQuery[list[Transaction]]:
        return LiveQuery(
            self.database, ("transactions",),
            lambda session: TransactionRepository(session).get_all_transactions(),
            name="all_transactions"
        )

    def transactions_by_user(self, user_id: int) -> LiveQuery[list[Transaction]]:
        return LiveQuery(
            self.database, ("transactions",),
            lambda session: TransactionRepository(session).get_transactions_by_user(user_id),
            name="transactions_by_user"
        )

    def details(self, transaction_id: int) -> LiveQuery[list[TransactionDetail]]:
        return LiveQuery(
            self.database, ("transaction_details",),
            lambda session: TransactionDetailRepository(session).get_details_by_transaction(
                transaction_id
            ),
            name="transaction_details"
        )

    def sales_summary(self, time_range: TimeRange = TimeRange.ALL) -> LiveQuery[SalesSummary]:
        """Live revenue figures for the admin dashboard."""
        return self.all_transactions().map(
            lambda transactions: SalesAnalytics.summarize(transactions, time_range),
            name="sales_summary"
        )

    async def insert_transaction(
        self,
        transaction: Transaction,
        details: Sequence[TransactionDetail]
    ) -> int:
        """
        Record a completed purchase atomically.

        Returns:
            The generated transaction id
        """
        async with self.database.session() as session:
            return await PurchaseService(session).record_purchase(transaction, details)

    async def get_transaction_by_id(self, transaction_id: int) -> Optional[Transaction]:
        async with self.database.session() as session:
            return await TransactionRepository(session).get_transaction_by_id(transaction_id)
