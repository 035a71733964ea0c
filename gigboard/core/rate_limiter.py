import threading
import time
from contextlib import contextmanager


class InMemoryRateLimiter:
    """
    Fixed-window counter per key (client ip + path).
    State is per process; a multi-instance deployment needs a shared store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: dict[str, tuple[int, float]] = {}

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """
        Returns (allowed, retry_after_seconds).
        """
        now = time.time()
        with self._lock:
            count, window_start = self._state.get(key, (0, now))
            if now - window_start >= window_seconds:
                count = 0
                window_start = now
            if count >= limit:
                retry_after = max(1, int(window_seconds - (now - window_start)))
                return False, retry_after
            self._state[key] = (count + 1, window_start)
            return True, 0

    def reset(self) -> None:
        with self._lock:
            self._state.clear()


class InFlightGuard:
    """
    Set of keys with an operation currently running.
    ``hold(key)`` yields False when the key is already held, so a second
    submission of the same action is refused instead of racing the first.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys: set[str] = set()

    def acquire(self, key: str) -> bool:
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def release(self, key: str) -> None:
        with self._lock:
            self._keys.discard(key)

    def is_held(self, key: str) -> bool:
        with self._lock:
            return key in self._keys

    @contextmanager
    def hold(self, key: str):
        acquired = self.acquire(key)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(key)


rate_limiter = InMemoryRateLimiter()
hire_guard = InFlightGuard()
