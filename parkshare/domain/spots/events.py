"""
Spot change feed.

In-process observer registry keyed by spot id. Services publish after their
transaction commits; subscribers get ``callback(event)`` with a SpotEvent.
When Redis is configured every event is also mirrored to the
``spots:{spot_id}`` pub/sub channel so other processes can follow along.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from threading import Lock
from typing import Callable, Optional

from ...rate_limiter import get_redis_client
from ...shared.validators import utcnow

logger = logging.getLogger(__name__)

SPOT_CREATED = "spot.created"
SPOT_UPDATED = "spot.updated"
SPOT_DELETED = "spot.deleted"
BOOKING_CREATED = "booking.created"
BOOKING_UPDATED = "booking.updated"


@dataclass
class SpotEvent:
    spot_id: int
    kind: str
    payload: dict = field(default_factory=dict)
    occurred_at: str = field(default_factory=lambda: utcnow().isoformat())


Callback = Callable[[SpotEvent], None]


class SpotEventBus:
    def __init__(self):
        self._subscribers: dict[int, list[Callback]] = {}
        self._lock = Lock()

    def on_change(self, spot_id: int, callback: Callback) -> Callable[[], None]:
        """Subscribe to changes of one spot. Returns an unsubscribe function."""
        with self._lock:
            self._subscribers.setdefault(spot_id, []).append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(spot_id, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._subscribers.pop(spot_id, None)

        return unsubscribe

    def subscriber_count(self, spot_id: int) -> int:
        with self._lock:
            return len(self._subscribers.get(spot_id, []))

    def publish(self, spot_id: int, kind: str, payload: Optional[dict] = None) -> SpotEvent:
        event = SpotEvent(spot_id=spot_id, kind=kind, payload=payload or {})

        with self._lock:
            callbacks = list(self._subscribers.get(spot_id, []))

        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"❌ Spot {spot_id} subscriber failed on {kind}: {e}")

        self._mirror_to_redis(event)
        return event

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()

    @staticmethod
    def _mirror_to_redis(event: SpotEvent) -> None:
        client = get_redis_client()
        if client is None:
            return
        try:
            client.publish(f"spots:{event.spot_id}", json.dumps(asdict(event), default=str))
        except Exception as e:
            logger.warning(f"⚠️ Failed to mirror {event.kind} for spot {event.spot_id} to Redis: {e}")


spot_events = SpotEventBus()
