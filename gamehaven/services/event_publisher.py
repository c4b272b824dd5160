"""
Event Publisher Service for table-change notifications.

This module provides a pub/sub system that tells live queries when the
rows behind them changed. Events are published after every committed unit
of work, one per touched table and change kind:
- Rows inserted (insert)
- Rows updated (update)
- Rows deleted, including rows removed by ON DELETE CASCADE (delete)

Uses asyncio.Queue for in-memory event distribution. One publisher is
owned by the storage handle; nothing here is global.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Iterable, List, Mapping, Optional, Set

from gamehaven.models.base import utc_now

logger = logging.getLogger(__name__)


class ChangeType(str, Enum):
    """Kinds of row changes."""
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class TableChangedEvent:
    """
    Notification that rows of a table changed.

    Attributes:
        table: Table name (e.g. "games")
        change: Kind of change (see ChangeType)
        timestamp: Event creation timestamp
    """
    table: str
    change: ChangeType
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = utc_now()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to a JSON-friendly dictionary.

        Returns:
            Dict with table, change and ISO timestamp
        """
        event_dict = asdict(self)
        if isinstance(event_dict.get("timestamp"), datetime):
            event_dict["timestamp"] = event_dict["timestamp"].isoformat()
        if isinstance(event_dict.get("change"), ChangeType):
            event_dict["change"] = event_dict["change"].value
        return event_dict


class EventPublisher:
    """
    In-memory event publisher using asyncio.Queue.

    Subscribers register one queue for a set of tables and receive every
    event published for any of them. A subscriber that falls behind loses
    events once its queue is full; live queries only need to know that
    something changed, so a single queued event is enough.
    """

    def __init__(self, queue_size: int = 100):
        """
        Initialize the event publisher.

        Args:
            queue_size: Maximum number of undelivered events per subscriber
        """
        self._queue_size = queue_size

        # Active subscriber queues keyed by table name; a queue watching
        # several tables appears under each of them
        self._subscribers: Dict[str, List[asyncio.Queue]] = {}

        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def subscription(
        self,
        tables: Iterable[str]
    ) -> AsyncIterator["asyncio.Queue[TableChangedEvent]"]:
        """
        Register a queue for the given tables for the duration of the block.

        Args:
            tables: Table names to watch

        Yields:
            Queue receiving TableChangedEvent objects

        Example:
            async with publisher.subscription(["games"]) as queue:
                event = await queue.get()
        """
        watched = sorted(set(tables))
        queue: asyncio.Queue[TableChangedEvent] = asyncio.Queue(maxsize=self._queue_size)

        async with self._lock:
            for table in watched:
                self._subscribers.setdefault(table, []).append(queue)

        logger.debug(f"New subscriber for tables={watched}")

        try:
            yield queue
        finally:
            async with self._lock:
                for table in watched:
                    queues = self._subscribers.get(table)
                    if not queues:
                        continue
                    try:
                        queues.remove(queue)
                    except ValueError:
                        # Queue already removed
                        pass
                    if not queues:
                        del self._subscribers[table]
            logger.debug(f"Removed subscriber for tables={watched}")

    async def subscribe(self, tables: Iterable[str]) -> AsyncGenerator[TableChangedEvent, None]:
        """
        Subscribe to change events for the given tables.

        Args:
            tables: Table names to watch

        Yields:
            TableChangedEvent objects as they are published

        Example:
            async for event in publisher.subscribe(["users"]):
                print(f"Received: {event.change} on {event.table}")
        """
        async with self.subscription(tables) as queue:
            while True:
                yield await queue.get()

    async def publish(self, event: TableChangedEvent) -> int:
        """
        Publish an event to all subscribers of its table.

        Non-blocking; if a queue is full, the event is dropped for that
        subscriber.

        Args:
            event: Event to publish

        Returns:
            Number of subscribers that received the event
        """
        async with self._lock:
            subscribers = list(self._subscribers.get(event.table, []))

        if not subscribers:
            logger.debug(f"No subscribers for table={event.table}, event dropped")
            return 0

        delivered = 0
        for queue in subscribers:
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.debug(
                    f"Subscriber queue full for table={event.table}, "
                    f"event dropped (change={event.change.value})"
                )

        logger.debug(
            f"Published change={event.change.value} to {delivered} subscribers "
            f"for table={event.table}"
        )
        return delivered

    async def publish_changes(self, changes: Mapping[str, Set[ChangeType]]) -> int:
        """
        Publish one event per table and change kind.

        Args:
            changes: Change kinds keyed by table name

        Returns:
            Total number of deliveries
        """
        delivered = 0
        for table in sorted(changes):
            for change in sorted(changes[table], key=lambda c: c.value):
                delivered += await self.publish(TableChangedEvent(table=table, change=change))
        return delivered

    def get_subscriber_count(self, table: Optional[str] = None) -> int:
        """
        Get number of active subscriptions.

        Args:
            table: If provided, return count for that table.
                If None, return total count across all tables.

        Returns:
            Number of active subscriber queues
        """
        if table:
            return len(self._subscribers.get(table, []))

        return len({id(queue) for queues in self._subscribers.values() for queue in queues})
