"""
In-process cache of API collections.

- `get` returns the cached value, fetching it on first use.
- `refresh` refetches unless the key is inside its throttle window.
- Concurrent loads of one key share a single in-flight fetch.
- `patch` applies an optimistic local edit without a round trip.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional

from fintools.logger_config import logger


class _Entry:
    __slots__ = ("value", "fetched_at")

    def __init__(self, value: Any, fetched_at: float):
        self.value = value
        self.fetched_at = fetched_at


class _Flight:
    __slots__ = ("done", "value", "error")

    def __init__(self):
        self.done = threading.Event()
        self.value: Any = None
        self.error: Optional[BaseException] = None


class ResourceCache:
    def __init__(
        self,
        throttle: Optional[Dict[str, float]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._throttle = dict(throttle or {})
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, _Entry] = {}
        self._inflight: Dict[str, _Flight] = {}
        # bumped by invalidate so a fetch started earlier cannot repopulate the key
        self._generation: Dict[str, int] = {}

    def peek(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            return entry.value if entry else None

    def get(self, key: str, fetch: Callable[[], Any]) -> Any:
        with self._lock:
            entry = self._entries.get(key)
        if entry is not None:
            return entry.value
        return self._load(key, fetch)

    def refresh(self, key: str, fetch: Callable[[], Any], force: bool = False) -> Any:
        """Refetch `key`; inside its throttle window the cached value is returned instead."""
        if not force:
            window = self._throttle.get(key)
            with self._lock:
                entry = self._entries.get(key)
            if entry is not None and window and self._clock() - entry.fetched_at < window:
                logger.debug(f"Refresh of '{key}' throttled")
                return entry.value
        return self._load(key, fetch)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._generation[key] = self._generation.get(key, 0) + 1

    def patch(self, key: str, fn: Callable[[Any], Any]) -> Any:
        """Apply `fn` to the cached value in place; a missing key is left missing."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            entry.value = fn(entry.value)
            return entry.value

    def _load(self, key: str, fetch: Callable[[], Any]) -> Any:
        with self._lock:
            flight = self._inflight.get(key)
            leader = flight is None
            if leader:
                flight = self._inflight[key] = _Flight()
            generation = self._generation.get(key, 0)

        if not leader:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            value = fetch()
        except Exception as exc:
            flight.error = exc
            logger.warning(f"Fetching '{key}' failed: {exc}")
            raise
        else:
            flight.value = value
            with self._lock:
                if self._generation.get(key, 0) == generation:
                    self._entries[key] = _Entry(value, self._clock())
            return value
        finally:
            with self._lock:
                self._inflight.pop(key, None)
            flight.done.set()
