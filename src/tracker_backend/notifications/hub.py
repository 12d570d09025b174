"""
In-process publish/subscribe hub for task change events.

One NotificationHub is created at application start and handed to every
service and push session that needs it. Publishers never wait on
subscribers: every subscription owns a bounded queue and a slow consumer
loses its oldest pending messages instead of applying back-pressure.
"""

import asyncio
import logging
import threading
from typing import List, Optional
from pydantic import BaseModel

from tracker_backend.settings import settings

logger = logging.getLogger(__name__)


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Subscription:
    """Consumer side of the hub, one per connected client."""

    def __init__(self, hub: "NotificationHub", maxsize: int, loop: Optional[asyncio.AbstractEventLoop]):
        self._hub = hub
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._loop = loop
        self.dropped = 0
        self.closed = False

    def _deliver(self, message: str) -> None:
        # Runs on the subscriber's own loop (or inline without one).
        if self.closed:
            return
        if self._queue.full():
            try:
                self._queue.get_nowait()
                self.dropped += 1
            except asyncio.QueueEmpty:
                pass
        self._queue.put_nowait(message)

    async def receive(self) -> str:
        return await self._queue.get()

    def receive_nowait(self) -> Optional[str]:
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        self._hub.unsubscribe(self)


class NotificationHub:
    """
    Broadcasts serialized events to every current subscriber.

    subscribe, unsubscribe and publish may be called from any thread. A
    subscription created inside a running event loop receives its messages
    on that loop; publishers on other threads hand messages over with
    ``call_soon_threadsafe``.
    """

    def __init__(self, queue_size: Optional[int] = None):
        self.queue_size = queue_size or settings.NOTIFICATION_QUEUE_SIZE
        self._subscribers: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self) -> Subscription:
        subscription = Subscription(self, self.queue_size, _running_loop())
        with self._lock:
            self._subscribers.append(subscription)
        logger.debug(f"Subscriber added, {self.subscriber_count} active")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.closed = True
        with self._lock:
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)
        logger.debug(f"Subscriber removed, {self.subscriber_count} active")

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, message: str) -> int:
        """
        Hand a message to every current subscriber without waiting.

        Args:
            message: Serialized event

        Returns:
            Number of subscribers the message was handed to
        """
        with self._lock:
            subscribers = list(self._subscribers)

        current_loop = _running_loop()
        delivered = 0

        for subscription in subscribers:
            loop = subscription._loop
            if loop is None or loop is current_loop:
                subscription._deliver(message)
                delivered += 1
                continue
            try:
                loop.call_soon_threadsafe(subscription._deliver, message)
                delivered += 1
            except RuntimeError:
                # Loop already closed; the session is gone.
                logger.debug("Dropping subscriber bound to a closed event loop")
                self.unsubscribe(subscription)

        return delivered

    def publish_event(self, event: BaseModel) -> int:
        """
        Serialize and publish an event. Failures are logged, never raised.
        """
        try:
            return self.publish(event.model_dump_json())
        except Exception as e:
            logger.warning(f"Failed to publish {type(event).__name__}: {e}")
            return 0
