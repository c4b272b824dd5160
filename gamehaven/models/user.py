"""
User model for store customers and administrators.
"""

from sqlalchemy import Boolean, Column, Index, String
from sqlalchemy.orm import relationship

from gamehaven.models.base import Base, IntegerIdMixin, ModelMixin


class User(Base, IntegerIdMixin, ModelMixin):
    """
    Store account, either a regular customer or an administrator.

    Attributes:
        id: Auto-generated primary key
        username: Display name
        email: Login key (not unique at storage level)
        password: bcrypt hash of the account password
        role: True for administrators, False for regular users
        photo: Optional profile picture location

    Security considerations:
        - Never log or expose password
        - Repositories hash plaintext passwords before they are stored
    """

    __tablename__ = "users"

    username = Column(
        String,
        nullable=False,
        doc="Display name"
    )

    email = Column(
        String,
        nullable=False,
        doc="Login key; uniqueness is not enforced by the store"
    )

    password = Column(
        String,
        nullable=False,
        doc="bcrypt hash of the account password"
    )

    role = Column(
        Boolean,
        nullable=False,
        default=False,
        doc="True for administrators"
    )

    photo = Column(
        String,
        nullable=True,
        doc="Optional profile picture location"
    )

    # Relationships (rows are removed by the store's ON DELETE CASCADE)
    transactions = relationship(
        "Transaction",
        back_populates="user",
        passive_deletes=True
    )

    purchased_games = relationship(
        "PurchasedGame",
        back_populates="user",
        passive_deletes=True
    )

    __table_args__ = (
        Index("idx_users_email", "email"),
    )

    @property
    def is_admin(self) -> bool:
        return bool(self.role)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r}, role={self.role!r})"
