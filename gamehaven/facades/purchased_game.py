"""
Purchased game facade: the user's library and download progress.
"""

import logging
from typing import Optional

from gamehaven.core.database import Database
from gamehaven.core.logging_config import log_with_context
from gamehaven.models.base import utc_now
from gamehaven.models.download_history import DownloadHistory
from gamehaven.models.purchased_game import DownloadStatus, PurchasedGame
from gamehaven.repositories.download_history import DownloadHistoryRepository
from gamehaven.repositories.purchased_game import PurchasedGameRepository
from gamehaven.services.live_query import LiveQuery

logger = logging.getLogger(__name__)


class PurchasedGameFacade:
    """
    Exposes a user's owned games and tracks their download state.

    Attributes:
        database: Storage handle
    """

    def __init__(self, database: Database):
        self.database = database

    def purchased_games_by_user(self, user_id: int) -> LiveQuery[list[PurchasedGame]]:
        return LiveQuery(
            self.database, ("purchased_games",),
            lambda session: PurchasedGameRepository(session).get_purchased_games_by_user(user_id),
            name="purchased_games_by_user"
        )

    async def insert_purchased_game(self, purchased_game: PurchasedGame) -> PurchasedGame:
        async with self.database.session() as session:
            return await PurchasedGameRepository(session).insert(purchased_game)

    async def update_download_status(
        self,
        purchased_game_id: int,
        status: DownloadStatus
    ) -> Optional[PurchasedGame]:
        """
        Move an owned game to a new download status.

        Reaching DOWNLOADED or INSTALLED appends one DownloadHistory row
        for the owner and game, in the same unit of work. The status is
        set as given; callers only ever move it forward.

        Args:
            purchased_game_id: Ownership record to update
            status: New status

        Returns:
            The updated record, or None if the id doesn't exist
        """
        status = DownloadStatus(status)
        async with self.database.session() as session:
            purchased_games = PurchasedGameRepository(session)
            updated = await purchased_games.update_download_status(purchased_game_id, status)
            if not updated:
                return None

            purchased_game = await purchased_games.get_purchased_game_by_id(purchased_game_id)

            if status.is_complete:
                await DownloadHistoryRepository(session).insert(
                    DownloadHistory(
                        user_id=purchased_game.user_id,
                        game_id=purchased_game.game_id,
                        download_date=utc_now(),
                    )
                )

        log_with_context(
            logger,
            "info",
            f"Download status set to {status.value}",
            user_id=purchased_game.user_id,
            game_id=purchased_game.game_id,
        )
        return purchased_game

    async def is_game_purchased(self, user_id: int, game_id: int) -> bool:
        async with self.database.session() as session:
            owned = await PurchasedGameRepository(session).get_purchased_game_by_user_and_game(
                user_id, game_id
            )
        return owned is not None

    async def get_purchased_games_count(self, user_id: int) -> int:
        async with self.database.session() as session:
            return await PurchasedGameRepository(session).get_purchased_games_count(user_id)
