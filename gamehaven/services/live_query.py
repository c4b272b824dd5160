"""
Continuously-updating query results.

A LiveQuery pairs a query with the tables it reads. Streaming it yields
the current result immediately and then a fresh full result after every
committed change to one of those tables.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, AsyncGenerator, AsyncIterator, Awaitable, Callable, Generic, Iterable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

if TYPE_CHECKING:
    from gamehaven.core.database import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class LiveQuery(Generic[T]):
    """
    Query whose result is re-delivered whenever its tables change.

    Attributes:
        tables: Table names the query reads
        name: Label used in log output

    Example:
        live = LiveQuery(database, ["games"], lambda s: GameRepository(s).get_all_games())
        async for games in live:
            render(games)
    """

    def __init__(
        self,
        database: "Database",
        tables: Iterable[str],
        fetch: Callable[[AsyncSession], Awaitable[T]],
        name: str = "query"
    ):
        self._database = database
        self._fetch = fetch
        self.tables = frozenset(tables)
        self.name = name

    async def get(self) -> T:
        """
        Run the query once.

        Returns:
            The current result
        """
        async with self._database.session() as session:
            return await self._fetch(session)

    async def stream(self) -> AsyncGenerator[T, None]:
        """
        Yield the current result, then a new one after every change.

        Changes that arrive while a result is being produced are coalesced
        into a single re-run. The subscription is dropped when the
        consumer closes the generator.

        Yields:
            Full query results
        """
        async with self._database.publisher.subscription(self.tables) as queue:
            yield await self.get()
            while True:
                await queue.get()
                while not queue.empty():
                    queue.get_nowait()
                logger.debug(f"Re-running live query {self.name}")
                yield await self.get()

    def __aiter__(self) -> AsyncIterator[T]:
        return self.stream()

    def map(self, transform: Callable[[T], R], name: str = "") -> "LiveQuery[R]":
        """
        Derive a live query that transforms every result.

        Args:
            transform: Plain function applied to each result

        Returns:
            LiveQuery over the same tables
        """
        async def fetch(session: AsyncSession) -> R:
            return transform(await self._fetch(session))

        return LiveQuery(self._database, self.tables, fetch, name=name or self.name)


async def next_result(stream: AsyncGenerator[T, None], timeout: float = 5.0) -> T:
    """
    Wait for the next result of a live stream.

    Args:
        stream: Generator returned by LiveQuery.stream()
        timeout: Seconds to wait before giving up

    Raises:
        asyncio.TimeoutError: If nothing arrives in time
    """
    return await asyncio.wait_for(stream.__anext__(), timeout=timeout)
