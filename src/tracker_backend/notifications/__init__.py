from .hub import NotificationHub, Subscription
from .session import TransportSession, SessionState

__all__ = [
    'NotificationHub',
    'Subscription',
    'TransportSession',
    'SessionState',
]
