"""
Database configuration and session management.

Provides the storage handle: SQLAlchemy async engine setup, the session
factory, unit-of-work sessions, schema versioning and change tracking
that feeds live queries.
"""

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Optional, Set

from sqlalchemy import MetaData, event, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from gamehaven.core.exceptions import StorageError
from gamehaven.models import SCHEMA_VERSION, Base
from gamehaven.services.event_publisher import ChangeType, EventPublisher

logger = logging.getLogger(__name__)

# Key in Session.info holding the changes recorded since the last commit
CHANGES_KEY = "gamehaven.changes"


def is_memory_url(database_url: str) -> bool:
    return ":memory:" in database_url or database_url.rstrip("/").endswith(":")


def get_async_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    For SQLite:
    - Enables check_same_thread=False for async compatibility
    - Uses StaticPool for in-memory stores (one shared connection)
    - Turns on foreign key enforcement so cascades happen in the store
    - Sets WAL mode for file-backed stores

    Args:
        database_url: SQLAlchemy URL of the store
        echo: Log every SQL statement

    Returns:
        Configured AsyncEngine instance
    """
    in_memory = is_memory_url(database_url)

    engine_kwargs = {
        "echo": echo,
        "connect_args": {"check_same_thread": False},
    }

    # An in-memory database lives only as long as its connection
    if in_memory:
        engine_kwargs["poolclass"] = StaticPool

    engine = create_async_engine(database_url, **engine_kwargs)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


class ChangeTrackingSession(Session):
    """Session whose writes are recorded for the change feed."""


def _record(session: Session, table: str, change: ChangeType) -> None:
    changes = session.info.setdefault(CHANGES_KEY, defaultdict(set))
    changes[table].add(change)


@event.listens_for(ChangeTrackingSession, "after_flush")
def _record_flush(session, flush_context):  # noqa: ANN001
    for obj in session.new:
        _record(session, obj.__table__.name, ChangeType.INSERT)
    for obj in session.dirty:
        if session.is_modified(obj, include_collections=False):
            _record(session, obj.__table__.name, ChangeType.UPDATE)
    for obj in session.deleted:
        _record(session, obj.__table__.name, ChangeType.DELETE)


@event.listens_for(ChangeTrackingSession, "do_orm_execute")
def _record_statement(orm_execute_state):  # noqa: ANN001
    if orm_execute_state.is_select:
        return
    statement = orm_execute_state.statement
    table = getattr(statement, "table", None)
    if table is None:
        return
    if orm_execute_state.is_insert:
        change = ChangeType.INSERT
    elif orm_execute_state.is_update:
        change = ChangeType.UPDATE
    elif orm_execute_state.is_delete:
        change = ChangeType.DELETE
    else:
        return
    _record(orm_execute_state.session, table.name, change)


@event.listens_for(ChangeTrackingSession, "after_rollback")
def _discard_changes(session):  # noqa: ANN001
    session.info.pop(CHANGES_KEY, None)


def cascade_dependents(metadata: MetaData) -> Dict[str, Set[str]]:
    """
    Map each table to the tables whose rows it deletes by ON DELETE CASCADE.

    Args:
        metadata: Metadata holding the table definitions

    Returns:
        Dependent table names keyed by parent table name
    """
    dependents: Dict[str, Set[str]] = defaultdict(set)
    for table in metadata.tables.values():
        for fk in table.foreign_keys:
            if (fk.ondelete or "").upper() == "CASCADE":
                dependents[fk.column.table.name].add(table.name)
    return dependents


def expand_cascades(
    changes: Dict[str, Set[ChangeType]],
    dependents: Dict[str, Set[str]]
) -> Dict[str, Set[ChangeType]]:
    """
    Add a DELETE change for every table reached by cascading deletes.

    Args:
        changes: Recorded changes keyed by table
        dependents: Output of cascade_dependents()

    Returns:
        New mapping including the cascaded tables
    """
    expanded = {table: set(kinds) for table, kinds in changes.items()}
    pending = [table for table, kinds in changes.items() if ChangeType.DELETE in kinds]
    while pending:
        parent = pending.pop()
        for child in dependents.get(parent, ()):
            kinds = expanded.setdefault(child, set())
            if ChangeType.DELETE not in kinds:
                kinds.add(ChangeType.DELETE)
                pending.append(child)
    return expanded


class Database:
    """
    Storage handle owned by the composition root.

    Bundles the engine, the session factory and the change feed. Every
    unit of work goes through session(): it commits on success, rolls
    back and raises StorageError on storage failure, and publishes the
    committed table changes.

    Attributes:
        engine: Async SQLAlchemy engine
        publisher: Change feed for live queries
        session_maker: Factory for AsyncSession objects
    """

    def __init__(
        self,
        database_url: str,
        publisher: Optional[EventPublisher] = None,
        echo: bool = False
    ):
        self.database_url = database_url
        self.publisher = publisher or EventPublisher()

        if not is_memory_url(database_url):
            db_path = database_url.split(":///", 1)[-1]
            if db_path:
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.engine = get_async_engine(database_url, echo=echo)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            sync_session_class=ChangeTrackingSession,
            expire_on_commit=False,  # Don't expire objects after commit
            autoflush=False,
        )

        # A StaticPool hands every session the same connection, so units
        # of work must not interleave on it
        self._connection_lock: Optional[asyncio.Lock] = (
            asyncio.Lock() if is_memory_url(database_url) else None
        )

        self._dependents = cascade_dependents(Base.metadata)

    async def init_schema(self) -> bool:
        """
        Create the schema, wiping the store when its version is stale.

        The schema version lives in SQLite's ``user_version``. A store that
        already holds tables under another version is dropped completely
        (destructive migration) before the current tables are created.

        Returns:
            True if existing data was discarded, False otherwise
        """
        wiped = False
        try:
            async with self.engine.begin() as conn:
                version = (await conn.exec_driver_sql("PRAGMA user_version")).scalar_one()
                existing = await conn.run_sync(
                    lambda sync_conn: inspect(sync_conn).get_table_names()
                )

                if existing and version != SCHEMA_VERSION:
                    logger.warning(
                        f"Schema version {version} != {SCHEMA_VERSION}, "
                        f"dropping {len(existing)} tables"
                    )
                    await conn.run_sync(_drop_all_tables)
                    wiped = True

                await conn.run_sync(Base.metadata.create_all)
                await conn.exec_driver_sql(f"PRAGMA user_version = {int(SCHEMA_VERSION)}")
        except SQLAlchemyError as e:
            raise StorageError(f"Schema initialization failed: {e}") from e

        logger.info(
            "Schema ready",
            extra={"schema_version": SCHEMA_VERSION, "wiped": wiped}
        )
        return wiped

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Run one unit of work.

        Yields:
            AsyncSession; committed when the block exits normally

        Raises:
            StorageError: If the store fails; the work is rolled back

        Example:
            async with database.session() as session:
                games = await GameRepository(session).get_all_games()
        """
        if self._connection_lock is None:
            async with self._unit_of_work() as session:
                yield session
        else:
            async with self._connection_lock:
                async with self._unit_of_work() as session:
                    yield session

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncIterator[AsyncSession]:
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Unit of work rolled back: {e}")
                raise StorageError(str(e)) from e
            except BaseException:
                await session.rollback()
                raise
            changes = session.info.pop(CHANGES_KEY, None)

        if changes:
            await self.publisher.publish_changes(
                expand_cascades(changes, self._dependents)
            )

    async def check_connection(self) -> bool:
        """
        Check if the store is reachable.

        Returns:
            True if a trivial query succeeds, False otherwise
        """
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except StorageError:
            return False

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


def _drop_all_tables(sync_conn) -> None:  # noqa: ANN001
    reflected = MetaData()
    reflected.reflect(bind=sync_conn)
    reflected.drop_all(bind=sync_conn)
