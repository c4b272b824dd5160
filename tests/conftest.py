"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- In-memory storage handle and session fixtures
- A fully wired application fixture
"""

import os
import sys
from pathlib import Path

import pytest


# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ["GAMEHAVEN_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["GAMEHAVEN_PASSWORD_HASH_ROUNDS"] = "4"
os.environ["GAMEHAVEN_LOG_JSON"] = "false"

# Add project root to path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Cheapest bcrypt cost
TEST_HASH_ROUNDS = 4


@pytest.fixture
def anyio_backend():
    """
    Configure anyio backend for async tests.

    Returns:
        str: Backend name ("asyncio")
    """
    return "asyncio"


@pytest.fixture
def test_settings(tmp_path):
    """
    Settings pointing at an in-memory store and a temporary data directory.
    """
    from gamehaven.core.config import Settings

    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        data_directory=str(tmp_path / "data"),
        password_hash_rounds=TEST_HASH_ROUNDS,
        log_json=False,
    )


@pytest.fixture(scope="function")
async def database():
    """
    Provide an initialized in-memory storage handle.

    Creates the schema before the test and disposes the engine after.
    """
    from gamehaven.core.database import Database

    db = Database("sqlite+aiosqlite:///:memory:")
    await db.init_schema()

    yield db

    await db.dispose()


@pytest.fixture(scope="function")
async def async_session(database):
    """
    Provide one unit-of-work session for repository tests.

    The session is committed when the test finishes.
    """
    async with database.session() as session:
        yield session


@pytest.fixture(scope="function")
async def app(test_settings):
    """
    Provide a started GameHaven application without demo data.
    """
    from gamehaven.main import GameHaven

    application = GameHaven.create(test_settings, configure_logging=False)
    await application.start(seed=False)

    yield application

    await application.close()


@pytest.fixture(scope="function")
async def seeded_app(test_settings):
    """
    Provide a started GameHaven application with the demo users and games.
    """
    from gamehaven.main import GameHaven

    application = GameHaven.create(test_settings, configure_logging=False)
    await application.start(seed=True)

    yield application

    await application.close()


@pytest.fixture
def password_rounds():
    """bcrypt cost for repositories built directly in tests."""
    return TEST_HASH_ROUNDS
