"""
Ownership records and download state.
"""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from gamehaven.models.base import Base, IntegerIdMixin, ModelMixin, utc_now


class DownloadStatus(str, enum.Enum):
    """Download/install progress of an owned game."""
    NOT_DOWNLOADED = "NOT_DOWNLOADED"
    DOWNLOADING = "DOWNLOADING"
    DOWNLOADED = "DOWNLOADED"
    INSTALLED = "INSTALLED"

    @property
    def is_complete(self) -> bool:
        """True once the package is on the device."""
        return self in (DownloadStatus.DOWNLOADED, DownloadStatus.INSTALLED)


class PurchasedGame(Base, IntegerIdMixin, ModelMixin):
    """
    A game owned by a user, created once per completed transaction line.

    Attributes:
        id: Auto-generated primary key
        user_id: Foreign key to User (deleted with the user)
        game_id: Foreign key to Game (deleted with the game)
        purchase_date: When the owning transaction completed
        transaction_id: Id of the transaction that granted ownership
        download_status: Progress of the download/install on the device
    """

    __tablename__ = "purchased_games"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="Foreign key to User"
    )

    game_id = Column(
        Integer,
        ForeignKey("games.id", ondelete="CASCADE"),
        nullable=False,
        doc="Foreign key to Game"
    )

    purchase_date = Column(
        DateTime,
        nullable=False,
        default=utc_now,
        doc="UTC timestamp of the purchase"
    )

    transaction_id = Column(
        Integer,
        nullable=False,
        doc="Transaction that granted ownership"
    )

    download_status = Column(
        Enum(DownloadStatus, name="download_status", native_enum=False),
        nullable=False,
        default=DownloadStatus.NOT_DOWNLOADED,
        doc="Download/install progress"
    )

    # Relationships
    user = relationship("User", back_populates="purchased_games")
    game = relationship("Game", back_populates="purchased_games")

    __table_args__ = (
        Index("idx_purchased_games_user_game", "user_id", "game_id"),
        Index("idx_purchased_games_transaction", "transaction_id"),
    )

    def __repr__(self) -> str:
        return (
            f"PurchasedGame(id={self.id!r}, user_id={self.user_id!r}, "
            f"game_id={self.game_id!r}, download_status={self.download_status!r})"
        )
