"""
Download history repository for the append-only download log.
"""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gamehaven.models.download_history import DownloadHistory


class DownloadHistoryRepository:
    """
    Repository for download history data access.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, history: DownloadHistory) -> DownloadHistory:
        """Append one download event."""
        self.session.add(history)
        await self.session.flush()
        return history

    async def get_history_by_user(self, user_id: int) -> list[DownloadHistory]:
        stmt = (
            select(DownloadHistory)
            .where(DownloadHistory.user_id == user_id)
            .order_by(DownloadHistory.download_date.desc(), DownloadHistory.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_history_by_game(self, game_id: int) -> list[DownloadHistory]:
        stmt = (
            select(DownloadHistory)
            .where(DownloadHistory.game_id == game_id)
            .order_by(DownloadHistory.download_date.desc(), DownloadHistory.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_history_by_user_and_game(
        self,
        user_id: int,
        game_id: int
    ) -> Optional[DownloadHistory]:
        """
        Most recent download of a game by a user.

        Returns:
            The latest DownloadHistory row, or None
        """
        stmt = (
            select(DownloadHistory)
            .where(
                DownloadHistory.user_id == user_id,
                DownloadHistory.game_id == game_id
            )
            .order_by(DownloadHistory.download_date.desc(), DownloadHistory.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, history_id: int) -> bool:
        result = await self.session.execute(
            delete(DownloadHistory).where(DownloadHistory.id == history_id)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def get_download_count(self, user_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(DownloadHistory)
            .where(DownloadHistory.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
