"""
GameHaven - application composition root.

Builds the storage handle, change feed, session store, seeder and facades
from Settings and hands them to the presentation layer. Nothing in the
package keeps global state; everything hangs off a GameHaven instance.
"""

import logging
from typing import Optional

from gamehaven.core.config import Settings, get_settings
from gamehaven.core.database import Database
from gamehaven.core.logging_config import setup_logging
from gamehaven.core.preferences import PreferenceFile
from gamehaven.facades import (
    DownloadHistoryFacade,
    GameFacade,
    PurchasedGameFacade,
    TransactionFacade,
    UserFacade,
)
from gamehaven.models.user import User
from gamehaven.services.event_publisher import EventPublisher
from gamehaven.services.seeder import DemoSeeder
from gamehaven.services.session_store import SessionStore, UserSession

logger = logging.getLogger(__name__)


class GameHaven:
    """
    Wired-up application.

    Attributes:
        settings: Loaded configuration
        database: Storage handle
        session_store: Persisted login session
        seeder: First-run demo seeder
        users / games / transactions / purchased_games / downloads: Facades

    Example:
        async with GameHaven.create() as app:
            user = await app.sign_in("farr@gmail.com", "123")
            async for games in app.games.all_games():
                ...
    """

    def __init__(self, settings: Settings, database: Database):
        self.settings = settings
        self.database = database

        self.session_store = SessionStore(settings.session_path)
        self.seeder = DemoSeeder(
            database,
            PreferenceFile(settings.init_flag_path),
            password_rounds=settings.password_hash_rounds,
        )

        self.users = UserFacade(database, password_rounds=settings.password_hash_rounds)
        self.games = GameFacade(database, low_stock_threshold=settings.low_stock_threshold)
        self.transactions = TransactionFacade(database)
        self.purchased_games = PurchasedGameFacade(database)
        self.downloads = DownloadHistoryFacade(database)

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        configure_logging: bool = True
    ) -> "GameHaven":
        """
        Build the application from settings.

        Args:
            settings: Configuration (defaults to get_settings())
            configure_logging: Install the root log handler

        Returns:
            GameHaven instance; call start() before use
        """
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(level=settings.log_level, json_format=settings.log_json)

        database = Database(
            settings.database_url,
            publisher=EventPublisher(),
            echo=settings.echo_sql,
        )
        return cls(settings, database)

    async def start(self, seed: bool = True) -> None:
        """
        Prepare the store: create or migrate the schema, then seed demo data.

        A destructive migration also resets the first-run flag so the wiped
        store gets its demo rows back.
        """
        wiped = await self.database.init_schema()
        if wiped:
            self.seeder.flags.clear()
        if seed:
            await self.seeder.seed_if_first_run()
        logger.info(f"{self.settings.project_name} started")

    async def close(self) -> None:
        await self.database.dispose()

    async def __aenter__(self) -> "GameHaven":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.close()

    async def sign_in(self, email: str, password: str) -> Optional[User]:
        """
        Check credentials and remember the user on success.

        Returns:
            The signed-in User, or None (the stored session is untouched)
        """
        user = await self.users.login(email, password)
        if user is not None:
            self.session_store.save_user_session(user)
        return user

    def sign_out(self) -> None:
        self.session_store.clear_session()

    def current_session(self) -> UserSession:
        return self.session_store.load()
