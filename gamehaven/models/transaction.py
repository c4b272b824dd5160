"""
Sales models: a transaction and its line items.

A transaction is one completed checkout by a user; each line item
(TransactionDetail) records the game bought, the price paid and the
quantity.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from gamehaven.models.base import Base, IntegerIdMixin, ModelMixin, utc_now


class Transaction(Base, IntegerIdMixin, ModelMixin):
    """
    Completed purchase by a user.

    Attributes:
        id: Auto-generated primary key
        user_id: Foreign key to User (deleted with the user)
        total_price: Amount charged; expected to equal the sum of
            price * qty over the details, not enforced
        date: When the purchase completed
    """

    __tablename__ = "transactions"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="Foreign key to User"
    )

    total_price = Column(
        Float,
        nullable=False,
        default=0.0,
        doc="Amount charged for the whole purchase"
    )

    date = Column(
        DateTime,
        nullable=False,
        default=utc_now,
        doc="UTC timestamp of the purchase"
    )

    # Relationships
    user = relationship("User", back_populates="transactions")

    details = relationship(
        "TransactionDetail",
        back_populates="transaction",
        passive_deletes=True
    )

    __table_args__ = (
        Index("idx_transactions_user", "user_id"),
        Index("idx_transactions_date", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"Transaction(id={self.id!r}, user_id={self.user_id!r}, "
            f"total_price={self.total_price!r})"
        )


class TransactionDetail(Base, IntegerIdMixin, ModelMixin):
    """
    One line item of a transaction.

    Attributes:
        id: Auto-generated primary key
        transaction_id: Foreign key to Transaction (deleted with it)
        game_id: Foreign key to Game (deleted with it)
        price: Snapshot of Game.price at purchase time
        qty: Quantity bought
    """

    __tablename__ = "transaction_details"

    transaction_id = Column(
        Integer,
        ForeignKey("transactions.id", ondelete="CASCADE"),
        nullable=False,
        doc="Foreign key to Transaction"
    )

    game_id = Column(
        Integer,
        ForeignKey("games.id", ondelete="CASCADE"),
        nullable=False,
        doc="Foreign key to Game"
    )

    price = Column(
        Float,
        nullable=False,
        doc="Unit price paid (snapshot of Game.price)"
    )

    qty = Column(
        Integer,
        nullable=False,
        default=1,
        doc="Quantity bought"
    )

    # Relationships
    transaction = relationship("Transaction", back_populates="details")
    game = relationship("Game", back_populates="transaction_details")

    __table_args__ = (
        Index("idx_transaction_details_transaction", "transaction_id"),
        Index("idx_transaction_details_game", "game_id"),
    )

    @property
    def subtotal(self) -> float:
        return (self.price or 0.0) * (self.qty or 0)

    def __repr__(self) -> str:
        return (
            f"TransactionDetail(id={self.id!r}, transaction_id={self.transaction_id!r}, "
            f"game_id={self.game_id!r}, qty={self.qty!r})"
        )
