"""
First-run seeding of demo accounts and catalog entries.

A flag in a preference file records that seeding happened, so the demo
rows are inserted exactly once per installation.
"""

import logging
from typing import TYPE_CHECKING

from gamehaven.core.preferences import PreferenceFile
from gamehaven.models.base import utc_now
from gamehaven.models.game import Game
from gamehaven.models.user import User
from gamehaven.repositories.game import GameRepository
from gamehaven.repositories.user import UserRepository

if TYPE_CHECKING:
    from gamehaven.core.database import Database

logger = logging.getLogger(__name__)

FIRST_RUN_KEY = "first_run"


# Demo accounts; the admin signs in as farr@gmail.com / 123
DEFAULT_USERS = [
    {
        "username": "Farr",
        "email": "farr@gmail.com",
        "password": "123",
        "role": True,
    },
    {
        "username": "shir",
        "email": "shir@gmail.com",
        "password": "123",
        "role": False,
    },
]

DEFAULT_GAMES = [
    {
        "title": "Cyber Jump",
        "description": "Fast-paced cyber platformer game",
        "developer": "Farr Studio",
        "category": "Action",
        "price": 25000.0,
        "stock": 100,
        "file_url": "",
        "image_url": "https://www.cyberjump.eu/wp-content/uploads/2024/07/cjpozsonyw.jpg",
    },
    {
        "title": "Zombie Arena",
        "description": "Survival zombie shooter",
        "developer": "Shir Corp",
        "category": "Shooter",
        "price": 40000.0,
        "stock": 50,
        "file_url": "https://example.com/zombie-arena.apk",
        "image_url": "https://example.com/zombie-arena.jpg",
    },
    {
        "title": "Puzzle Quest",
        "description": "Relaxing brain puzzle game",
        "developer": "Indie Dev",
        "category": "Puzzle",
        "price": 15000.0,
        "stock": 200,
        "file_url": "https://example.com/puzzle.apk",
        "image_url": "https://example.com/puzzle.jpg",
    },
]


class DemoSeeder:
    """
    Inserts the demo users and games on first run.

    Attributes:
        database: Storage handle
        flags: Preference file holding the first-run flag
        password_rounds: bcrypt cost for the demo passwords
    """

    def __init__(
        self,
        database: "Database",
        flags: PreferenceFile,
        password_rounds: int = 12
    ):
        self.database = database
        self.flags = flags
        self.password_rounds = password_rounds

    def is_first_run(self) -> bool:
        return bool(self.flags.get(FIRST_RUN_KEY, True))

    async def seed_if_first_run(self) -> bool:
        """
        Seed the store unless it has been seeded before.

        The flag is only cleared after the rows are committed; a failed
        seeding is retried on the next start.

        Returns:
            True if demo rows were inserted, False if skipped
        """
        if not self.is_first_run():
            logger.info("Demo data already seeded. Skipping...")
            return False

        async with self.database.session() as session:
            users = UserRepository(session, password_rounds=self.password_rounds)
            games = GameRepository(session)

            for user_data in DEFAULT_USERS:
                await users.insert(User(photo=None, **user_data))

            for game_data in DEFAULT_GAMES:
                await games.insert(Game(release_date=utc_now(), **game_data))

        self.flags.set(FIRST_RUN_KEY, False)
        logger.info(
            "Demo data seeded",
            extra={"users": len(DEFAULT_USERS), "games": len(DEFAULT_GAMES)}
        )
        return True
