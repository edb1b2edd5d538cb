"""In-process implementation of CacheStore.

Entries expire lazily: they are checked on read and swept on every write,
never by a background timer. When a write leaves the cache above capacity
the single oldest-inserted entry is evicted (insertion order, not access
order).

Not safe for preemptive multi-threading. Under a threaded host wrap
``get``/``set`` in a lock so the expiry check and eviction stay atomic.
"""

import json
import re
import time
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from wolfram_knowledge.entities import CacheEntryEntity
from wolfram_knowledge.utils.logger import get_logger

logger = get_logger(__name__)

V = TypeVar("V")

DEFAULT_TTL = 3600  # 1 hour
DEFAULT_MAX_ENTRIES = 200

_WHITESPACE = re.compile(r"\s+")


def normalize_input(text: str) -> str:
    """Trim and collapse whitespace so equivalent inputs share a key."""
    return _WHITESPACE.sub(" ", text).strip()


def build_cache_key(operation: str, text: str, options: Mapping[str, Any] | None = None) -> str:
    """Build a deterministic cache key.

    Options are serialized with sorted keys so that two calls with the same
    semantic inputs always collide. ``None``-valued options are ignored.

    Args:
        operation: Logical operation name (``query``, ``solve``, ...)
        text: Raw input text
        options: Extra request parameters that change the result

    Returns:
        Key of the form ``operation:input`` or ``operation:input:{json}``

    Example:
        ```python
        build_cache_key("solve", " x + 3 = 7 ")    # "solve:x + 3 = 7"
        build_cache_key("query", "pi", {"units": "metric"})
        # 'query:pi:{"units":"metric"}'
        ```
    """
    key = f"{operation}:{normalize_input(text)}"
    cleaned = {k: v for k, v in (options or {}).items() if v is not None}
    if cleaned:
        key += ":" + json.dumps(cleaned, sort_keys=True, separators=(",", ":"), default=str)
    return key


class InMemoryCacheRepository(Generic[V]):
    """Bounded TTL cache kept in a plain insertion-ordered dict.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        cache: InMemoryCacheRepository[str] = InMemoryCacheRepository.create()
        cache.set("solve:x + 3 = 7", "x = 4")
        cache.get("solve:x + 3 = 7")  # "x = 4"
        ```
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache repository.

        Args:
            ttl: Lifetime of every entry in seconds.
            max_entries: Capacity bound enforced after each write.
            clock: Time source in seconds. Injectable for tests.
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntryEntity[V]] = {}

    @classmethod
    def create(
        cls,
        ttl: float | None = None,
        max_entries: int | None = None,
    ) -> "InMemoryCacheRepository[V]":
        """Factory method to create a repository with default policy.

        Args:
            ttl: Entry TTL in seconds. If None, one hour.
            max_entries: Capacity. If None, 200.

        Returns:
            Configured InMemoryCacheRepository
        """
        return cls(
            ttl=ttl or DEFAULT_TTL,
            max_entries=max_entries or DEFAULT_MAX_ENTRIES,
        )

    def get(self, key: str) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None

        return entry.value

    def set(self, key: str, value: V) -> None:
        # An overwrite counts as a fresh insertion for eviction order
        self._entries.pop(key, None)
        self._entries[key] = CacheEntryEntity(
            key=key,
            value=value,
            created_at=self._clock(),
            ttl=self._ttl,
        )

        self.sweep()

        if len(self._entries) > self._max_entries:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
            logger.debug("Cache full, evicted oldest entry: %s", oldest_key)

    def sweep(self) -> int:
        """Delete every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def keys(self) -> list[str]:
        """Keys in insertion order, oldest first."""
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._max_entries
