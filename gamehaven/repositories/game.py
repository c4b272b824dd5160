"""
Game repository for catalog CRUD, search and inventory statistics.
"""

from typing import Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gamehaven.models.game import Game


DEFAULT_LOW_STOCK_THRESHOLD = 5


class GameRepository:
    """
    Repository for game data access.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, game: Game) -> Game:
        """
        Insert a game, replacing the row with the same id if one exists.

        Returns:
            The persistent Game with its generated id
        """
        persistent = await self.session.merge(game)
        await self.session.flush()
        return persistent

    async def update(self, game: Game) -> Optional[Game]:
        """
        Update an existing game.

        Returns:
            The updated Game, or None if no row has that id
        """
        if game.id is None or await self.session.get(Game, game.id) is None:
            return None
        persistent = await self.session.merge(game)
        await self.session.flush()
        return persistent

    async def delete(self, game: Game) -> bool:
        """
        Delete a game.

        Line items and ownership records of the game go with it.

        Returns:
            True if a row was deleted, False if not found
        """
        return await self.delete_by_id(game.id)

    async def delete_by_id(self, game_id: int) -> bool:
        result = await self.session.execute(delete(Game).where(Game.id == game_id))
        await self.session.flush()
        return result.rowcount > 0

    async def get_all_games(self) -> list[Game]:
        """Get all games, newest first."""
        result = await self.session.execute(select(Game).order_by(Game.id.desc()))
        return list(result.scalars().all())

    async def get_game_by_id(self, game_id: int) -> Optional[Game]:
        return await self.session.get(Game, game_id)

    async def get_games_by_category(self, category: str) -> list[Game]:
        stmt = select(Game).where(Game.category == category).order_by(Game.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_total_games(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Game))
        return result.scalar_one()

    async def get_available_games(self) -> int:
        """Count games with stock left."""
        stmt = select(func.count()).select_from(Game).where(Game.stock > 0)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_out_of_stock_games(self) -> int:
        """
        Count games that can't be sold.

        Negative stock counts as out of stock, so available plus out of
        stock always equals the total.
        """
        stmt = select(func.count()).select_from(Game).where(Game.stock <= 0)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_total_inventory_value(self) -> float:
        """
        Sum of list prices across the catalog.

        Returns:
            Total price, 0.0 for an empty catalog
        """
        result = await self.session.execute(select(func.sum(Game.price)))
        total = result.scalar_one_or_none()
        return float(total) if total is not None else 0.0

    async def get_all_categories(self) -> list[str]:
        stmt = select(Game.category).distinct().order_by(Game.category)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search_games(self, search: str) -> list[Game]:
        """
        Case-insensitive substring search over title, developer and category.

        Args:
            search: Text to look for

        Returns:
            Matching games, newest first

        Example:
            >>> [g.title for g in await repo.search_games("cyber")]
            ['Cyber Jump']
        """
        stmt = (
            select(Game)
            .where(or_(
                Game.title.icontains(search, autoescape=True),
                Game.developer.icontains(search, autoescape=True),
                Game.category.icontains(search, autoescape=True),
            ))
            .order_by(Game.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_low_stock_games(
        self,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    ) -> list[Game]:
        """
        Games whose stock is at or below the threshold, lowest stock first.
        """
        stmt = (
            select(Game)
            .where(Game.stock <= low_stock_threshold)
            .order_by(Game.stock, Game.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
