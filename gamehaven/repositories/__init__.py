"""
Repository layer for data access.

Provides data access abstractions following the Repository pattern,
isolating database access from the facades. Repositories flush but never
commit; the caller's unit of work decides when changes become durable.
"""

from gamehaven.repositories.user import UserRepository
from gamehaven.repositories.game import GameRepository
from gamehaven.repositories.transaction import TransactionRepository
from gamehaven.repositories.transaction_detail import TransactionDetailRepository
from gamehaven.repositories.purchased_game import PurchasedGameRepository
from gamehaven.repositories.download_history import DownloadHistoryRepository

__all__ = [
    "UserRepository",
    "GameRepository",
    "TransactionRepository",
    "TransactionDetailRepository",
    "PurchasedGameRepository",
    "DownloadHistoryRepository",
]
