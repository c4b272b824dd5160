"""
Download history facade: the per-user and per-game download log.
"""

from typing import Optional

from gamehaven.core.database import Database
from gamehaven.models.download_history import DownloadHistory
from gamehaven.repositories.download_history import DownloadHistoryRepository
from gamehaven.services.live_query import LiveQuery

TABLES = ("download_history",)


class DownloadHistoryFacade:
    def __init__(self, database: Database):
        self.database = database

    def history_by_user(self, user_id: int) -> LiveQuery[list[DownloadHistory]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: DownloadHistoryRepository(session).get_history_by_user(user_id),
            name="history_by_user"
        )

    def history_by_game(self, game_id: int) -> LiveQuery[list[DownloadHistory]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: DownloadHistoryRepository(session).get_history_by_game(game_id),
            name="history_by_game"
        )

    async def insert(self, history: DownloadHistory) -> DownloadHistory:
        async with self.database.session() as session:
            return await DownloadHistoryRepository(session).insert(history)

    async def get_history_by_user_and_game(
        self,
        user_id: int,
        game_id: int
    ) -> Optional[DownloadHistory]:
        async with self.database.session() as session:
            return await DownloadHistoryRepository(session).get_history_by_user_and_game(
                user_id, game_id
            )

    async def get_download_count(self, user_id: int) -> int:
        async with self.database.session() as session:
            return await DownloadHistoryRepository(session).get_download_count(user_id)
