"""
Transaction repository for recorded sales.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gamehaven.models.transaction import Transaction


class TransactionRepository:
    """
    Repository for transaction data access.

    Transactions are written once by the purchase flow and never updated.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, transaction: Transaction) -> int:
        """
        Insert a transaction.

        Args:
            transaction: New transaction (its id is assigned by the store)

        Returns:
            The generated transaction id
        """
        self.session.add(transaction)
        await self.session.flush()
        return transaction.id

    async def get_all_transactions(self) -> list[Transaction]:
        """Get all transactions, most recent first."""
        stmt = select(Transaction).order_by(Transaction.date.desc(), Transaction.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_transactions_by_user(self, user_id: int) -> list[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.date.desc(), Transaction.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_transaction_by_id(self, transaction_id: int) -> Optional[Transaction]:
        return await self.session.get(Transaction, transaction_id)

    async def get_transactions_since(self, moment: datetime) -> list[Transaction]:
        """
        Transactions dated at or after ``moment``, most recent first.
        """
        stmt = (
            select(Transaction)
            .where(Transaction.date >= moment)
            .order_by(Transaction.date.desc(), Transaction.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
