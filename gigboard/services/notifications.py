"""
Per-viewer notification inboxes fed by the realtime hub.
Inboxes are kept in-process and reset on restart.
"""
import logging
import threading
from collections import deque

from gigboard.config import settings
from gigboard.core.errors import InvalidEvent
from gigboard.services.events import recipient_of
from gigboard.services.notification_router import NotificationPayload, route_notification
from gigboard.services.realtime import EventHub, hub as default_hub

logger = logging.getLogger(__name__)


class NotificationInbox:
    def __init__(self, viewer_id: str, hub: EventHub, maxlen: int = 50):
        self.viewer_id = viewer_id
        self._hub = hub
        self._lock = threading.Lock()
        self._queue: deque[NotificationPayload] = deque(maxlen=maxlen)
        self._token: str | None = None

    @property
    def active(self) -> bool:
        return self._token is not None

    def start(self) -> None:
        if self._token is None:
            self._token = self._hub.subscribe(self._addressed_to_viewer, self._on_event)

    def stop(self) -> None:
        if self._token is not None:
            self._hub.unsubscribe(self._token)
            self._token = None

    def _addressed_to_viewer(self, event) -> bool:
        return recipient_of(event) == self.viewer_id

    def _on_event(self, event) -> None:
        try:
            payload = route_notification(event, self.viewer_id)
        except InvalidEvent as e:
            logger.warning("Dropping invalid %s for %s: %s", type(event).__name__, self.viewer_id, e.message)
            return
        if payload is None:
            return
        with self._lock:
            self._queue.append(payload)

    def drain(self) -> list[NotificationPayload]:
        with self._lock:
            items = list(self._queue)
            self._queue.clear()
        return items

    def pending_count(self) -> int:
        with self._lock:
            return len(self._queue)


_registry_lock = threading.Lock()
_inboxes: dict[str, NotificationInbox] = {}


def inbox_for(viewer_id: str, hub: EventHub | None = None) -> NotificationInbox:
    """Return the viewer's inbox, creating and subscribing it on first use."""
    with _registry_lock:
        inbox = _inboxes.get(viewer_id)
        if inbox is None:
            inbox = NotificationInbox(viewer_id, hub or default_hub, maxlen=settings.notification_inbox_size)
            inbox.start()
            _inboxes[viewer_id] = inbox
        return inbox


def close_all() -> int:
    """Unsubscribe and forget every inbox. Returns how many were closed."""
    with _registry_lock:
        inboxes = list(_inboxes.values())
        _inboxes.clear()
    for inbox in inboxes:
        inbox.stop()
    return len(inboxes)
