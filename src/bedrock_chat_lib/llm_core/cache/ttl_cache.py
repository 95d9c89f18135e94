"""Generic in-memory cache with a single, wholesale expiry timestamp."""

import time
from typing import Callable, Dict, Generic, Mapping, Optional, TypeVar

from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class TTLCache(Generic[T]):
    """
    Key/value cache whose entries share one expiry timestamp.

    The cache is valid while it holds at least one entry and the expiry has not
    passed. ``set_all`` replaces the whole map and restarts the TTL, which is how
    the catalogue is refreshed. Concurrent refreshes are not coordinated; the
    last writer wins.
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            name: Label used in log messages.
            ttl_seconds: Lifetime of a populated cache in seconds.
            clock: Monotonic time source, injectable for tests.
        """
        self.name = name
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, T] = {}
        self._expiry: float = 0.0

    def is_valid(self) -> bool:
        return bool(self._entries) and self._clock() < self._expiry

    def get(self, key: str) -> Optional[T]:
        if not self.is_valid():
            return None
        return self._entries.get(key)

    def get_all(self) -> Dict[str, T]:
        """Returns a copy of all entries, or an empty dict once expired."""
        if not self.is_valid():
            return {}
        return dict(self._entries)

    def set(self, key: str, value: T) -> None:
        self._entries[key] = value
        if len(self._entries) == 1:
            # first entry starts the clock
            self._expiry = self._clock() + self.ttl_seconds

    def set_all(self, entries: Mapping[str, T]) -> None:
        self._entries = dict(entries)
        self._expiry = self._clock() + self.ttl_seconds
        logger.info(
            "[%s cache] Cached %d entries, expires in %ss", self.name, len(self._entries), self.ttl_seconds
        )

    def clear(self) -> None:
        self._entries = {}
        self._expiry = 0.0
        logger.info("[%s cache] Cache cleared", self.name)

    def size(self) -> int:
        return len(self._entries) if self.is_valid() else 0
