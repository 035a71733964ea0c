"""
Client-side view state for lists that are refetched while the user edits
filters or removes items.

``begin_request``/``commit`` implement "last request wins": a result is only
applied if no newer request was started after it, regardless of the order in
which responses arrive. ``remove_tentatively`` removes an item locally before
the store confirms, and ``Tentative.revert`` puts it back where it was.

This is a helper library for clients of the feed and applicant endpoints,
such as a Python UI or a test harness. No server route uses it; the server
stays stateless per request.
"""
import logging
import threading
from typing import Any

logger = logging.getLogger(__name__)


def _item_id(item: Any) -> str:
    return str(item.id)


class Tentative:
    """A local removal awaiting confirmation from the store."""

    def __init__(self, state: "FeedState", item: Any, index: int):
        self._state = state
        self.item = item
        self.index = index
        self.settled = False

    def confirm(self) -> bool:
        if self.settled:
            return False
        self.settled = True
        return True

    def revert(self) -> bool:
        """Put the item back at its old position (clamped). Returns False if already settled."""
        if self.settled:
            return False
        self.settled = True
        self._state._restore(self.item, self.index)
        return True


class FeedState:
    def __init__(self, items: list | None = None):
        self._lock = threading.Lock()
        self._items: list = list(items or [])
        self._generation = 0

    @property
    def items(self) -> list:
        with self._lock:
            return list(self._items)

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def begin_request(self) -> int:
        """Start a fetch; the returned token must be passed to ``commit``."""
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._generation

    def commit(self, token: int, items: list) -> bool:
        """Apply a fetch result unless a newer request has started since."""
        with self._lock:
            if token != self._generation:
                logger.debug("Discarding stale result token=%d current=%d", token, self._generation)
                return False
            self._items = list(items)
            return True

    def remove_tentatively(self, item_id: str) -> Tentative | None:
        with self._lock:
            for index, item in enumerate(self._items):
                if _item_id(item) == str(item_id):
                    del self._items[index]
                    return Tentative(self, item, index)
        return None

    def _restore(self, item: Any, index: int) -> None:
        with self._lock:
            if any(_item_id(existing) == _item_id(item) for existing in self._items):
                return
            self._items.insert(min(index, len(self._items)), item)
