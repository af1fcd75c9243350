"""Push channel: fans JSON events out to connected WebSocket clients."""

from datetime import datetime, timezone
from typing import Any, Dict, Protocol, Set

import structlog

logger = structlog.get_logger(__name__)


class Connection(Protocol):
    async def send_json(self, data: Any) -> None:
        ...


class NotificationBroadcaster:
    """Owns the subscriber registry. Delivery is best effort."""

    def __init__(self):
        self._subscribers: Set[Connection] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, connection: Connection) -> None:
        self._subscribers.add(connection)
        logger.info("WebSocket subscribed", subscribers=len(self._subscribers))

    def unsubscribe(self, connection: Connection) -> None:
        self._subscribers.discard(connection)
        logger.info("WebSocket unsubscribed", subscribers=len(self._subscribers))

    async def publish(self, event_type: str, payload: Dict[str, Any]) -> int:
        """Send {"type": event_type, **payload} to every subscriber.

        A subscriber whose send fails is dropped. Returns the number of
        successful deliveries.
        """
        message = {
            "type": event_type,
            **payload,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        delivered = 0
        for connection in list(self._subscribers):
            try:
                await connection.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning("Dropping unreachable subscriber", event_type=event_type, error=str(e))
                self._subscribers.discard(connection)
        logger.debug("Event published", event_type=event_type, delivered=delivered)
        return delivered


broadcaster = NotificationBroadcaster()


def get_broadcaster() -> NotificationBroadcaster:
    return broadcaster
