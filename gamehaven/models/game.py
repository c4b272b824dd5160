"""
Game model for the store catalog.
"""

from sqlalchemy import Column, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from gamehaven.models.base import Base, IntegerIdMixin, ModelMixin


class Game(Base, IntegerIdMixin, ModelMixin):
    """
    Catalog entry that users can buy and download.

    Attributes:
        id: Auto-generated primary key
        title: Game title
        description: Store page description
        developer: Studio or author
        category: Genre label (free text)
        price: Current list price
        release_date: Optional release timestamp
        stock: Copies available for sale (expected >= 0, not enforced)
        file_url: Download location of the game package
        image_url: Cover image location
    """

    __tablename__ = "games"

    title = Column(String, nullable=False, doc="Game title")

    description = Column(Text, nullable=False, default="", doc="Store page description")

    developer = Column(String, nullable=False, default="", doc="Studio or author")

    category = Column(String, nullable=False, default="", doc="Genre label")

    price = Column(Float, nullable=False, default=0.0, doc="Current list price")

    release_date = Column(DateTime, nullable=True, doc="Optional release timestamp")

    stock = Column(Integer, nullable=False, default=0, doc="Copies available for sale")

    file_url = Column(String, nullable=False, default="", doc="Download location")

    image_url = Column(String, nullable=False, default="", doc="Cover image location")

    # Relationships
    transaction_details = relationship(
        "TransactionDetail",
        back_populates="game",
        passive_deletes=True
    )

    purchased_games = relationship(
        "PurchasedGame",
        back_populates="game",
        passive_deletes=True
    )

    __table_args__ = (
        Index("idx_games_category", "category"),
        Index("idx_games_stock", "stock"),
    )

    @property
    def in_stock(self) -> bool:
        return (self.stock or 0) > 0

    def __repr__(self) -> str:
        return f"Game(id={self.id!r}, title={self.title!r}, stock={self.stock!r})"
