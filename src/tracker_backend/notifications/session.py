import asyncio
import logging
from enum import Enum
from typing import Optional
from fastapi import WebSocket

from tracker_backend.notifications.hub import NotificationHub, Subscription

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    connecting = "Connecting"
    open = "Open"
    closed = "Closed"


class TransportSession:
    """
    Bridges one WebSocket client to the notification hub.

    The channel is one-way: hub events go out as text frames, inbound
    content frames are ignored. Whichever of the two loops stops first
    cancels the other.
    """

    def __init__(self, websocket: WebSocket, hub: NotificationHub):
        self.websocket = websocket
        self.hub = hub
        self.state = SessionState.connecting
        self.subscription: Optional[Subscription] = None

    async def run(self) -> None:
        # Subscribe before the handshake completes so nothing published
        # after the client sees the connection open is missed.
        self.subscription = self.hub.subscribe()
        try:
            await self.websocket.accept()
        except Exception:
            self._close()
            raise

        self.state = SessionState.open
        logger.info("Push session opened")

        send_task = asyncio.create_task(self._send_loop())
        receive_task = asyncio.create_task(self._receive_loop())
        tasks = {send_task, receive_task}

        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    logger.warning(f"Push session loop failed: {task.exception()}")
        finally:
            # Leave the hub first, the wait below can itself be cancelled.
            self._close()
            logger.info("Push session closed")
            for task in tasks:
                task.cancel()
            await asyncio.wait(tasks)

    async def _send_loop(self) -> None:
        while True:
            message = await self.subscription.receive()
            try:
                await self.websocket.send_text(message)
            except Exception as e:
                logger.debug(f"Send to push client failed: {e}")
                return

    async def _receive_loop(self) -> None:
        while True:
            try:
                message = await self.websocket.receive()
            except Exception as e:
                logger.debug(f"Receive from push client failed: {e}")
                return

            if message["type"] == "websocket.disconnect":
                return
            logger.debug("Ignoring inbound push channel frame")

    def _close(self) -> None:
        if self.subscription is not None:
            self.subscription.close()
        self.state = SessionState.closed
