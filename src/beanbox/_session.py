from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30 * 60.0  # seconds of inactivity


@runtime_checkable
class SessionStore(Protocol):
    def get(self, key: Hashable) -> object | None: ...

    def put(self, key: Hashable, value: object) -> None: ...

    def clear(self) -> None: ...


class Session:
    """Thread-safe mapping whose entries expire after a period of inactivity.

    Every successful `get` refreshes the idle clock of the entry. Expired
    entries are dropped lazily when touched, or all at once by `purge()`.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout <= 0:
            msg = f"Session timeout must be positive, got {timeout!r}"
            raise ValueError(msg)
        self.timeout = timeout
        self._clock = clock
        self._entries: dict[Hashable, tuple[object, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> object | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, last_access = entry
            if now - last_access > self.timeout:
                logger.debug("session entry %r expired", key)
                del self._entries[key]
                return None

            self._entries[key] = (value, now)
            return value

    def peek(self, key: Hashable) -> object | None:
        """Like `get`, but leaves the idle clock of the entry untouched."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now - entry[1] > self.timeout:
                return None
            return entry[0]

    def put(self, key: Hashable, value: object) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock())

    def purge(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, last_access) in self._entries.items() if now - last_access > self.timeout]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("purged %d expired session entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        self.purge()
        with self._lock:
            return len(self._entries)
