"""
Purchase recording service.

Turns a completed payment into stored rows: the transaction, its line
items and one ownership record per line item. Everything runs on the
caller's session, so the facade's unit of work makes it all-or-nothing.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from gamehaven.core.logging_config import log_with_context
from gamehaven.models.game import Game
from gamehaven.models.purchased_game import DownloadStatus, PurchasedGame
from gamehaven.models.transaction import Transaction, TransactionDetail
from gamehaven.repositories.purchased_game import PurchasedGameRepository
from gamehaven.repositories.transaction import TransactionRepository
from gamehaven.repositories.transaction_detail import TransactionDetailRepository

logger = logging.getLogger(__name__)


@dataclass
class PurchaseLine:
    """
    A game in the cart, priced at checkout time.

    Attributes:
        game_id: Game being bought
        price: Unit price snapshot
        qty: Quantity
    """
    game_id: int
    price: float
    qty: int = 1

    @classmethod
    def from_game(cls, game: Game, qty: int = 1) -> "PurchaseLine":
        """Snapshot the game's current price."""
        return cls(game_id=game.id, price=game.price, qty=qty)

    def to_detail(self) -> TransactionDetail:
        """Pending line item; the transaction id is stamped on recording."""
        return TransactionDetail(game_id=self.game_id, price=self.price, qty=self.qty)


def total_of(details: Iterable[TransactionDetail]) -> float:
    """Sum of price * qty over line items."""
    return sum(detail.price * detail.qty for detail in details)


class PurchaseService:
    """
    Records completed purchases.

    Attributes:
        session: Session of the enclosing unit of work
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.transactions = TransactionRepository(session)
        self.details = TransactionDetailRepository(session)
        self.purchased_games = PurchasedGameRepository(session)

    async def record_purchase(
        self,
        transaction: Transaction,
        details: Sequence[TransactionDetail]
    ) -> int:
        """
        Store a transaction, its line items and the resulting ownership.

        Steps:
        1. Insert the transaction and read back its generated id
        2. Stamp that id on every pending line item
        3. Bulk-insert the line items
        4. Insert one PurchasedGame per line item (NOT_DOWNLOADED,
           purchase date = transaction date)

        The total price is stored as given; it is not checked against the
        line items.

        Args:
            transaction: New transaction (id unset)
            details: Pending line items (transaction id unset)

        Returns:
            The generated transaction id

        Example:
            >>> tx_id = await service.record_purchase(
            ...     Transaction(user_id=1, total_price=40000.0),
            ...     [TransactionDetail(game_id=2, price=40000.0, qty=1)]
            ... )
        """
        transaction_id = await self.transactions.insert(transaction)

        for detail in details:
            detail.transaction_id = transaction_id

        await self.details.insert_all(details)

        for detail in details:
            await self.purchased_games.insert(
                PurchasedGame(
                    user_id=transaction.user_id,
                    game_id=detail.game_id,
                    purchase_date=transaction.date,
                    transaction_id=transaction_id,
                    download_status=DownloadStatus.NOT_DOWNLOADED,
                )
            )

        log_with_context(
            logger,
            "info",
            "Purchase recorded",
            user_id=transaction.user_id,
            transaction_id=transaction_id,
            count=len(details),
        )
        return transaction_id
