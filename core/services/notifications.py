# =============================================================================
# core/services/notifications.py - Notification Channel
# =============================================================================
# The explicit message channel editors emit notifications into. Consumers:
# - HTTP routes collect what an operation emitted and return it in the response
# - the WebSocket stream subscribes a queue and forwards every message
#
# Usage:
#   channel = NotificationChannel(ttl_seconds=5)
#   with channel.collect() as emitted:
#       await editor.submit()
#   return {"notifications": emitted}
# =============================================================================

import asyncio
import logging
from collections import deque
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from core.models.notification import Notification, NotificationLevel
from lib.utils import utc_now

logger = logging.getLogger(__name__)

# Open collect() blocks of the running task, as (channel, bucket) pairs
_collecting: ContextVar[tuple] = ContextVar("notification_collectors", default=())


class NotificationChannel:
    """
    Fan-out channel for admin notifications.

    `emit` is synchronous and never fails: a notification that nobody
    collects or subscribes to is only kept in the short recent history.

    Collection is scoped to the asyncio task that opened the `collect()`
    block, so concurrent requests on one channel each get only their own
    notifications. Subscribers receive everything.
    """

    def __init__(self, ttl_seconds: int | None = 5, history_size: int = 50):
        self.ttl_seconds = ttl_seconds
        self.recent: deque[Notification] = deque(maxlen=history_size)
        self._queues: set[asyncio.Queue] = set()

    # -------------------------------------------------------------------------
    # Producers
    # -------------------------------------------------------------------------

    def emit(
        self,
        level: NotificationLevel,
        title: str,
        message: str,
        resource: str | None = None,
    ) -> Notification:
        notification = Notification.build(
            level=level,
            title=title,
            message=message,
            resource=resource,
            ttl_seconds=self.ttl_seconds,
        )
        self.recent.append(notification)

        for channel, bucket in _collecting.get():
            if channel is self:
                bucket.append(notification)
        for queue in self._queues:
            queue.put_nowait(notification)

        logger.debug(f"Notification [{notification.level}] {title}: {message}")
        return notification

    def success(self, message: str, resource: str | None = None, title: str = "Success") -> Notification:
        return self.emit(NotificationLevel.SUCCESS, title, message, resource)

    def error(self, message: str, resource: str | None = None, title: str = "Error") -> Notification:
        return self.emit(NotificationLevel.ERROR, title, message, resource)

    def info(self, message: str, resource: str | None = None, title: str = "Info") -> Notification:
        return self.emit(NotificationLevel.INFO, title, message, resource)

    # -------------------------------------------------------------------------
    # Consumers
    # -------------------------------------------------------------------------

    @contextmanager
    def collect(self) -> Iterator[list[Notification]]:
        """Capture what this task emits on the channel while the block runs."""
        bucket: list[Notification] = []
        token = _collecting.set(_collecting.get() + ((self, bucket),))
        try:
            yield bucket
        finally:
            _collecting.reset(token)

    def subscribe(self) -> asyncio.Queue:
        """Register a queue receiving every future notification."""
        queue: asyncio.Queue = asyncio.Queue()
        self._queues.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._queues.discard(queue)

    def pending(self) -> list[Notification]:
        """Recent notifications that have not expired yet, oldest first."""
        now = utc_now()
        return [n for n in self.recent if n.expires_at is None or n.expires_at > now]

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)
