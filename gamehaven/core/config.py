"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration management with validation,
loading settings from environment variables (prefix ``GAMEHAVEN_``) and
.env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
ASYNC_SQLITE_SCHEME = "sqlite+aiosqlite"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables, e.g.
    ``GAMEHAVEN_DATABASE_URL=sqlite+aiosqlite:///./store.db``.
    """

    project_name: str = Field(
        default="GameHaven",
        description="Project name used in log output"
    )

    # Database Configuration (local SQLite file)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/gamehaven.db",
        description="Database connection URL (local SQLite store)"
    )
    data_directory: str = Field(
        default="./data",
        description="Directory holding the session and first-run preference files"
    )
    echo_sql: bool = Field(
        default=False,
        description="Log every SQL statement (debug only)"
    )

    # Key-value stores
    session_file: str = Field(
        default="user_session.json",
        description="File name of the persisted login session"
    )
    init_flag_file: str = Field(
        default="init_db.json",
        description="File name of the first-run seeding flag store"
    )

    # Catalog
    low_stock_threshold: int = Field(
        default=5,
        ge=0,
        description="Stock level at or below which a game counts as low stock"
    )

    # Security
    password_hash_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor for stored passwords"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=True,
        description="Emit structured JSON logs (False for plain text)"
    )

    model_config = SettingsConfigDict(
        env_prefix="GAMEHAVEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """
        Validate database URL format.

        The store is a local SQLite file (or in-memory for tests) opened
        through the async aiosqlite driver. A plain ``sqlite://`` URL is
        rewritten to use that driver.
        """
        if not v or v.strip() == "":
            raise ValueError("DATABASE_URL is required and cannot be empty")

        if v.startswith("sqlite://"):
            v = ASYNC_SQLITE_SCHEME + "://" + v[len("sqlite://"):]

        if not v.startswith(ASYNC_SQLITE_SCHEME + "://"):
            raise ValueError(
                f"DATABASE_URL must start with one of: sqlite, {ASYNC_SQLITE_SCHEME}. "
                f"Got: {v[:20]}..."
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}"
            )
        return level

    @property
    def session_path(self) -> Path:
        return Path(self.data_directory) / self.session_file

    @property
    def init_flag_path(self) -> Path:
        return Path(self.data_directory) / self.init_flag_file


@lru_cache
def get_settings() -> Settings:
    """
    Return the process-wide settings, loaded once on first use.

    The composition root passes the result down; library code never calls
    this itself.
    """
    return Settings()
