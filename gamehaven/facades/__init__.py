"""
Application facades.

Thin wrappers the presentation layer calls: each write runs in its own
unit of work and every list query comes back as a LiveQuery.
"""

from gamehaven.facades.user import UserFacade
from gamehaven.facades.game import GameFacade
from gamehaven.facades.transaction import TransactionFacade
from gamehaven.facades.purchased_game import PurchasedGameFacade
from gamehaven.facades.download_history import DownloadHistoryFacade

__all__ = [
    "UserFacade",
    "GameFacade",
    "TransactionFacade",
    "PurchasedGameFacade",
    "DownloadHistoryFacade",
]
