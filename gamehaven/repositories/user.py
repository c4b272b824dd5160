"""
User repository for account CRUD, login and admin statistics.

Provides data access layer for the User model. Plaintext passwords handed
in by callers are hashed before they reach the store.
"""

from typing import Optional

from sqlalchemy import delete, func, inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gamehaven.core.security import get_password_hash, verify_password
from gamehaven.models.user import User


class UserRepository:
    """
    Repository for user data access.

    Provides async CRUD operations, credential checks and counts used by
    the admin dashboard.

    Attributes:
        session: SQLAlchemy async session for database operations
        password_rounds: bcrypt cost used when hashing new passwords
    """

    def __init__(self, session: AsyncSession, password_rounds: int = 12):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            password_rounds: bcrypt cost factor for new password hashes
        """
        self.session = session
        self.password_rounds = password_rounds

    def _hash_password(self, user: User) -> None:
        if user.password is not None:
            user.password = get_password_hash(user.password, rounds=self.password_rounds)

    @staticmethod
    def _password_changed(user: User, stored: User) -> bool:
        if user is stored:
            return inspect(user).attrs.password.history.has_changes()
        return user.password != stored.password

    async def insert(self, user: User) -> User:
        """
        Insert a user, replacing the row with the same id if one exists.

        Args:
            user: User to store; ``password`` is plaintext and always hashed

        Returns:
            The persistent User with its generated id

        Example:
            >>> user = await repo.insert(User(
            ...     username="Farr", email="farr@gmail.com",
            ...     password="123", role=True
            ... ))
            >>> user.id
            1
        """
        self._hash_password(user)
        persistent = await self.session.merge(user)
        await self.session.flush()
        return persistent

    async def update(self, user: User) -> Optional[User]:
        """
        Update an existing user.

        The password is hashed only when it differs from the stored hash,
        so a user loaded from the store can be saved back unchanged.

        Args:
            user: User carrying the id of the row to update

        Returns:
            The updated User, or None if no row has that id
        """
        if user.id is None:
            return None
        stored = await self.session.get(User, user.id)
        if stored is None:
            return None
        if self._password_changed(user, stored):
            self._hash_password(user)
        persistent = await self.session.merge(user)
        await self.session.flush()
        return persistent

    async def delete(self, user: User) -> bool:
        """
        Delete a user.

        The store removes the user's transactions (and their line items)
        and purchased games; download history rows are left in place.

        Returns:
            True if a row was deleted, False if not found
        """
        return await self.delete_by_id(user.id)

    async def delete_by_id(self, user_id: int) -> bool:
        stmt = delete(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def get_all_users(self) -> list[User]:
        """
        Get all users, newest first.

        Returns:
            List of User instances ordered by id descending
        """
        stmt = select(User).order_by(User.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """
        Retrieve a user by ID.

        Returns:
            User instance if found, None otherwise
        """
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email).order_by(User.id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def login(self, email: str, password: str) -> Optional[User]:
        """
        Look up the user with exactly this email and password.

        Comparison is exact and case-sensitive for both values. Email is
        not unique, so every account with the email is tried in id order
        and the first whose password verifies wins.

        Args:
            email: Login email
            password: Plaintext password as typed

        Returns:
            Matching User, or None

        Example:
            >>> await repo.login("farr@gmail.com", "123")
            User(id=1, username='Farr', role=True)
            >>> await repo.login("farr@gmail.com", "wrong") is None
            True
        """
        stmt = select(User).where(User.email == email).order_by(User.id)
        result = await self.session.execute(stmt)
        for candidate in result.scalars().all():
            if verify_password(password, candidate.password):
                return candidate
        return None

    async def get_total_users(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(User))
        return result.scalar_one()

    async def get_total_regular_users(self) -> int:
        stmt = select(func.count()).select_from(User).where(User.role.is_(False))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_total_admin_users(self) -> int:
        stmt = select(func.count()).select_from(User).where(User.role.is_(True))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def search_users(self, search: str) -> list[User]:
        """
        Case-insensitive substring search over username and email.

        Args:
            search: Text to look for

        Returns:
            Matching users, newest first
        """
        stmt = (
            select(User)
            .where(or_(
                User.username.icontains(search, autoescape=True),
                User.email.icontains(search, autoescape=True),
            ))
            .order_by(User.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_users_by_role(self, is_admin: bool) -> list[User]:
        stmt = select(User).where(User.role.is_(is_admin)).order_by(User.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
