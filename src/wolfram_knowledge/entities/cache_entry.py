"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntryEntity(Generic[V]):
    """Domain entity for one cached remote result.

    Attributes:
        key: Deterministic cache key (operation, input, options)
        value: The cached result
        created_at: Clock reading when the entry was stored (seconds)
        ttl: Lifetime in seconds
    """

    key: str
    value: V
    created_at: float
    ttl: float

    def age(self, now: float) -> float:
        return now - self.created_at

    def is_expired(self, now: float) -> bool:
        """An entry is gone once its age reaches its ttl."""
        return self.age(now) >= self.ttl
