"""
Transaction detail repository for purchase line items.
"""

from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from gamehaven.models.transaction import TransactionDetail


class TransactionDetailRepository:
    """
    Repository for transaction line items.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, detail: TransactionDetail) -> TransactionDetail:
        self.session.add(detail)
        await self.session.flush()
        return detail

    async def insert_all(self, details: Iterable[TransactionDetail]) -> list[TransactionDetail]:
        """
        Insert several line items at once.

        Args:
            details: Line items already stamped with their transaction id

        Returns:
            The inserted line items with generated ids
        """
        rows = list(details)
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    async def get_details_by_transaction(self, transaction_id: int) -> list[TransactionDetail]:
        stmt = (
            select(TransactionDetail)
            .where(TransactionDetail.transaction_id == transaction_id)
            .order_by(TransactionDetail.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, detail: TransactionDetail) -> bool:
        stmt = delete(TransactionDetail).where(TransactionDetail.id == detail.id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
