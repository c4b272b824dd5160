"""
Purchased game repository for ownership records and download state.
"""

from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gamehaven.models.purchased_game import DownloadStatus, PurchasedGame


class PurchasedGameRepository:
    """
    Repository for purchased game data access.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, purchased_game: PurchasedGame) -> PurchasedGame:
        """
        Insert an ownership record, replacing the row with the same id.
        """
        persistent = await self.session.merge(purchased_game)
        await self.session.flush()
        return persistent

    async def update(self, purchased_game: PurchasedGame) -> Optional[PurchasedGame]:
        if (
            purchased_game.id is None
            or await self.session.get(PurchasedGame, purchased_game.id) is None
        ):
            return None
        persistent = await self.session.merge(purchased_game)
        await self.session.flush()
        return persistent

    async def delete(self, purchased_game: PurchasedGame) -> bool:
        stmt = delete(PurchasedGame).where(PurchasedGame.id == purchased_game.id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def get_purchased_games_by_user(self, user_id: int) -> list[PurchasedGame]:
        """Games owned by a user, most recent purchase first."""
        stmt = (
            select(PurchasedGame)
            .where(PurchasedGame.user_id == user_id)
            .order_by(PurchasedGame.purchase_date.desc(), PurchasedGame.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_purchased_game_by_id(self, purchased_game_id: int) -> Optional[PurchasedGame]:
        return await self.session.get(PurchasedGame, purchased_game_id)

    async def get_purchased_game_by_user_and_game(
        self,
        user_id: int,
        game_id: int
    ) -> Optional[PurchasedGame]:
        """
        Ownership lookup for a (user, game) pair.

        Returns:
            The earliest ownership record, or None if the user doesn't own
            the game
        """
        stmt = (
            select(PurchasedGame)
            .where(
                PurchasedGame.user_id == user_id,
                PurchasedGame.game_id == game_id
            )
            .order_by(PurchasedGame.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_download_status(
        self,
        purchased_game_id: int,
        status: DownloadStatus
    ) -> int:
        """
        Set the download status of one ownership record.

        Returns:
            Number of rows updated (0 when the id doesn't exist)
        """
        stmt = (
            update(PurchasedGame)
            .where(PurchasedGame.id == purchased_game_id)
            .values(download_status=DownloadStatus(status))
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def get_purchased_games_count(self, user_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(PurchasedGame)
            .where(PurchasedGame.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
