"""
User facade: account management, login and admin user statistics.
"""

import logging
from typing import Optional

from gamehaven.core.database import Database
from gamehaven.models.user import User
from gamehaven.repositories.user import UserRepository
from gamehaven.services.live_query import LiveQuery

logger = logging.getLogger(__name__)

TABLES = ("users",)


class UserFacade:
    """
    Exposes user queries as live streams and runs user writes.

    Attributes:
        database: Storage handle
        password_rounds: bcrypt cost for new passwords
    """

    def __init__(self, database: Database, password_rounds: int = 12):
        self.database = database
        self.password_rounds = password_rounds

    def _repo(self, session) -> UserRepository:  # noqa: ANN001
        return UserRepository(session, password_rounds=self.password_rounds)

    def all_users(self) -> LiveQuery[list[User]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: self._repo(session).get_all_users(),
            name="all_users"
        )

    def search_users(self, search: str) -> LiveQuery[list[User]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: self._repo(session).search_users(search),
            name="search_users"
        )

    def users_by_role(self, is_admin: bool) -> LiveQuery[list[User]]:
        return LiveQuery(
            self.database, TABLES,
            lambda session: self._repo(session).get_users_by_role(is_admin),
            name="users_by_role"
        )

    async def get_total_users(self) -> int:
        async with self.database.session() as session:
            return await self._repo(session).get_total_users()

    async def get_total_regular_users(self) -> int:
        async with self.database.session() as session:
            return await self._repo(session).get_total_regular_users()

    async def get_total_admin_users(self) -> int:
        async with self.database.session() as session:
            return await self._repo(session).get_total_admin_users()

    async def insert(self, user: User) -> User:
        async with self.database.session() as session:
            stored = await self._repo(session).insert(user)
        logger.info("User saved", extra={"user_id": stored.id})
        return stored

    async def update(self, user: User) -> Optional[User]:
        async with self.database.session() as session:
            return await self._repo(session).update(user)

    async def delete(self, user: User) -> bool:
        async with self.database.session() as session:
            deleted = await self._repo(session).delete(user)
        logger.info("User deleted", extra={"user_id": user.id, "deleted": deleted})
        return deleted

    async def login(self, email: str, password: str) -> Optional[User]:
        async with self.database.session() as session:
            user = await self._repo(session).login(email, password)
        if user is None:
            logger.info("Login rejected")
        return user

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        async with self.database.session() as session:
            return await self._repo(session).get_user_by_id(user_id)
