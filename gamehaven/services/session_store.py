"""
Persisted login session.

Keeps the identity of the signed-in user across restarts as one JSON
document. The store is a plain state holder: no validation, no expiry.
"""

import logging
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ValidationError

from gamehaven.core.preferences import PreferenceFile
from gamehaven.models.user import User

logger = logging.getLogger(__name__)


class UserSession(BaseModel):
    """
    Identity of the signed-in user.

    Attributes:
        user_id: Id of the user, -1 when logged out
        username: Display name
        email: Login email
        is_admin: Role flag
        is_logged_in: Whether a user is signed in
    """
    user_id: int = -1
    username: str = ""
    email: str = ""
    is_admin: bool = False
    is_logged_in: bool = False

    @classmethod
    def for_user(cls, user: User) -> "UserSession":
        return cls(
            user_id=user.id,
            username=user.username,
            email=user.email,
            is_admin=bool(user.role),
            is_logged_in=True,
        )


class SessionStore:
    """
    File-backed holder of the current UserSession.

    Attributes:
        file: Underlying JSON preference file
    """

    def __init__(self, path: Union[str, Path]):
        self.file = PreferenceFile(path)

    def save(self, session: UserSession) -> None:
        self.file.replace(session.model_dump())

    def save_user_session(self, user: User) -> UserSession:
        """
        Remember ``user`` as the signed-in user.

        Returns:
            The stored session
        """
        session = UserSession.for_user(user)
        self.save(session)
        logger.info("Session saved", extra={"user_id": session.user_id})
        return session

    def load(self) -> UserSession:
        """
        Current session; a logged-out session when nothing usable is stored.
        """
        data = self.file.read_all()
        if not data:
            return UserSession()
        try:
            return UserSession.model_validate(data)
        except ValidationError:
            logger.warning(f"Ignoring malformed session file {self.file.path}")
            return UserSession()

    def is_logged_in(self) -> bool:
        return self.load().is_logged_in

    def clear_session(self) -> None:
        """Log out: forget everything stored."""
        self.file.clear()
        logger.info("Session cleared")
