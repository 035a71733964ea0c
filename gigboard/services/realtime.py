"""
In-process publish/subscribe hub for realtime domain events.
State lives in this process only; handlers run on the publishing thread.
"""
import logging
import threading
from typing import Any, Callable

from gigboard.core.security import generate_id

logger = logging.getLogger(__name__)

EventFilter = Callable[[Any], bool]
EventHandler = Callable[[Any], None]


class EventHub:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: dict[str, tuple[EventFilter | None, EventHandler]] = {}

    def subscribe(self, event_filter: EventFilter | None, handler: EventHandler) -> str:
        """Register ``handler`` for events accepted by ``event_filter``. Returns an unsubscribe token."""
        token = generate_id()
        with self._lock:
            self._subscriptions[token] = (event_filter, handler)
        return token

    def unsubscribe(self, token: str) -> bool:
        with self._lock:
            return self._subscriptions.pop(token, None) is not None

    def publish(self, event: Any) -> int:
        """
        Deliver ``event`` to every matching subscriber. A failing filter or
        handler is logged and skipped. Returns how many handlers ran cleanly.
        """
        with self._lock:
            subscriptions = list(self._subscriptions.items())
        delivered = 0
        for token, (event_filter, handler) in subscriptions:
            try:
                if event_filter is not None and not event_filter(event):
                    continue
                handler(event)
                delivered += 1
            except Exception as e:
                logger.exception("Realtime subscriber %s failed on %s: %s", token, type(event).__name__, e)
        logger.debug("Published %s to %d subscriber(s)", type(event).__name__, delivered)
        return delivered

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def clear(self) -> None:
        with self._lock:
            self._subscriptions.clear()


hub = EventHub()
