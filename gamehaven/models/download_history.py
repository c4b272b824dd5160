"""
Append-only log of completed downloads.
"""

from sqlalchemy import Column, DateTime, Index, Integer

from gamehaven.models.base import Base, IntegerIdMixin, ModelMixin, utc_now


class DownloadHistory(Base, IntegerIdMixin, ModelMixin):
    """
    One row per download-completion event.

    user_id and game_id are plain references without foreign key
    constraints: history outlives the user or game it mentions.

    Attributes:
        id: Auto-generated primary key
        user_id: Id of the user who downloaded
        game_id: Id of the downloaded game
        download_date: When the download completed
    """

    __tablename__ = "download_history"

    user_id = Column(Integer, nullable=False, doc="Id of the downloading user")

    game_id = Column(Integer, nullable=False, doc="Id of the downloaded game")

    download_date = Column(
        DateTime,
        nullable=False,
        default=utc_now,
        doc="UTC timestamp of the completed download"
    )

    __table_args__ = (
        Index("idx_download_history_user", "user_id"),
        Index("idx_download_history_game", "game_id"),
    )
