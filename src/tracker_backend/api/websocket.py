from fastapi import APIRouter, Depends, WebSocket

from .dependencies import get_notification_hub
from ..notifications.hub import NotificationHub
from ..notifications.session import TransportSession

websocket_router = APIRouter(tags=["notifications"])


@websocket_router.websocket("/ws")
async def task_events(websocket: WebSocket, hub: NotificationHub = Depends(get_notification_hub)):
    """Push channel streaming task change events to the client"""
    await TransportSession(websocket, hub).run()
