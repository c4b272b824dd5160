"""
Game facade: catalog browsing, inventory statistics and admin edits.
"""

import logging
from typing import Optional

from gamehaven.core.database import Database
from gamehaven.models.game import Game
from gamehaven.repositories.game import DEFAULT_LOW_STOCK_THRESHOLD, GameRepository
from gamehaven.services.live_query import LiveQuery

logger = logging.getLogger(__name__)

TABLES = ("games",)


class GameFacade:
    """
    Exposes catalog queries as live streams and runs catalog writes.

    Attributes:
        database: Storage handle
        low_stock_threshold: Default threshold for low_stock_games()
    """

    def __init__(self, database: Database, low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD):
        self.database = database
        self.low_stock_threshold = low_stock_threshold

    def all_games(self) -> LiveQuery[list[Game]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: GameRepository(session).get_all_games(),
            name="all_games"
        )

    def search_games(self, search: str) -> LiveQuery[list[Game]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: GameRepository(session).search_games(search),
            name="search_games"
        )

    def games_by_category(self, category: str) -> LiveQuery[list[Game]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: GameRepository(session).get_games_by_category(category),
            name="games_by_category"
        )

    def categories(self) -> LiveQuery[list[str]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: GameRepository(session).get_all_categories(),
            name="categories"
        )

    def low_stock_games(self, threshold: Optional[int] = None) -> LiveQuery[list[Game]]:
        if threshold is None:
            threshold = self.low_stock_threshold
        return LiveQuery(
            self.database, TABLES,
            lambda session: GameRepository(session).get_low_stock_games(threshold),
            name="low_stock_games"
        )

    async def get_total_games(self) -> int:
        async with self.database.session() as session:
            return await GameRepository(session).get_total_games()

    async def get_available_games(self) -> int:
        async with self.database.session() as session:
            return await GameRepository(session).get_available_games()

    async def get_out_of_stock_games(self) -> int:
        async with self.database.session() as session:
            return await GameRepository(session).get_out_of_stock_games()

    async def get_total_inventory_value(self) -> float:
        async with self.database.session() as session:
            return await GameRepository(session).get_total_inventory_value()

    async def insert(self, game: Game) -> Game:
        async with self.database.session() as session:
            stored = await GameRepository(session).insert(game)
        logger.info("Game saved", extra={"game_id": stored.id})
        return stored

    async def update(self, game: Game) -> Optional[Game]:
        async with self.database.session() as session:
            return await GameRepository(session).update(game)

    async def delete(self, game: Game) -> bool:
        async with self.database.session() as session:
            deleted = await GameRepository(session).delete(game)
        logger.info("Game deleted", extra={"game_id": game.id, "deleted": deleted})
        return deleted

    async def get_by_id(self, game_id: int) -> Optional[Game]:
        async with self.database.session() as session:
            return await GameRepository(session).get_game_by_id(game_id)
