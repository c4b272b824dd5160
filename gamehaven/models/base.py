"""
Base models and mixins for SQLAlchemy ORM.

Provides the declarative base, the integer primary key mixin and common
utilities for all catalog models.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, Integer
from sqlalchemy.orm import declarative_base


# SQLAlchemy declarative base for all ORM models
Base = declarative_base()


class IntegerIdMixin:
    """
    Mixin that adds an auto-incrementing integer primary key.

    Attributes:
        id: Primary key generated by the store on insert
    """

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Auto-generated primary key"
    )


def utc_now() -> datetime:
    """
    Get the current UTC time as a naive datetime.

    Returns:
        Naive datetime in UTC (SQLite keeps no timezone information)
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ModelMixin:
    """
    Mixin providing common model utilities.

    Adds helper methods for serialization and representation.
    """

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model instance to dictionary.

        Returns:
            Dictionary with all column values

        Note:
            Only includes columns, not relationships.
        """
        return {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
        }

    def __repr__(self) -> str:
        attrs = ", ".join(
            f"{key}={repr(value)}"
            for key, value in self.to_dict().items()
            if key in ["id", "title", "username", "user_id", "game_id"]
        )
        return f"{self.__class__.__name__}({attrs})"
