"""In-process change feed for row-insert events.

Writers call :meth:`ChangeFeed.publish_insert` after committing; subscribers
register an async callback for a ``(table, key)`` channel, e.g. ``("messages",
<group_id>)``. Delivery is fire-and-forget on the running event loop.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

InsertCallback = Callable[[dict[str, Any]], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class Subscription:
    table: str
    key: str
    callback: InsertCallback = field(compare=False, repr=False)
    id: int = 0

    @property
    def channel(self) -> str:
        return f"{self.table}:{self.key}"


class ChangeFeed:
    """Tracks subscribers per channel and fans insert events out to them."""

    def __init__(self) -> None:
        self._channels: dict[tuple[str, str], dict[int, Subscription]] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def subscribe(self, table: str, key: Any, callback: InsertCallback) -> Subscription:
        subscription = Subscription(table=table, key=str(key), callback=callback, id=next(self._ids))
        async with self._lock:
            self._channels.setdefault((table, str(key)), {})[subscription.id] = subscription
        logger.debug("Subscribed %s (#%s)", subscription.channel, subscription.id)
        return subscription

    async def unsubscribe(self, subscription: Subscription) -> None:
        async with self._lock:
            self._discard(subscription)

    def _discard(self, subscription: Subscription) -> None:
        channel_key = (subscription.table, subscription.key)
        group = self._channels.get(channel_key)
        if group is None:
            return
        group.pop(subscription.id, None)
        if not group:
            self._channels.pop(channel_key, None)

    def subscriber_count(self, table: str, key: Any) -> int:
        return len(self._channels.get((table, str(key)), {}))

    def total_subscribers(self) -> int:
        return sum(len(group) for group in self._channels.values())

    def publish_insert(self, table: str, key: Any, record: dict[str, Any]) -> bool:
        """Schedule delivery of ``record``; returns False when no loop is running."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; dropping %s:%s insert event", table, key)
            return False
        loop.create_task(self._dispatch(table, str(key), record))
        return True

    async def _dispatch(self, table: str, key: str, record: dict[str, Any]) -> None:
        async with self._lock:
            targets = list(self._channels.get((table, key), {}).values())
        for subscription in targets:
            try:
                await subscription.callback(record)
            except Exception:
                logger.exception("Realtime subscriber on %s failed; dropping it", subscription.channel)
                async with self._lock:
                    self._discard(subscription)


change_feed = ChangeFeed()


__all__ = ["ChangeFeed", "InsertCallback", "Subscription", "change_feed"]
