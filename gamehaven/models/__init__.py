"""
SQLAlchemy ORM models for GameHaven.

This module exports all database models and the declarative base.
Import models from this module to ensure they're registered with SQLAlchemy.
"""

from gamehaven.models.base import Base, IntegerIdMixin, ModelMixin, utc_now
from gamehaven.models.user import User
from gamehaven.models.game import Game
from gamehaven.models.transaction import Transaction, TransactionDetail
from gamehaven.models.purchased_game import PurchasedGame, DownloadStatus
from gamehaven.models.download_history import DownloadHistory

# Bumped on every change to the table shapes; a mismatch wipes the store
SCHEMA_VERSION = 4

__all__ = [
    # Base classes
    "Base",
    "IntegerIdMixin",
    "ModelMixin",
    "utc_now",
    "SCHEMA_VERSION",
    # Models
    "User",
    "Game",
    "Transaction",
    "TransactionDetail",
    "PurchasedGame",
    "DownloadStatus",
    "DownloadHistory",
]
