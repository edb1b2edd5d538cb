"""Result cache protocol.

Defines the interface for a keyed store of remote results with a single
expiry and capacity policy shared by every stored value type.
"""

from typing import Protocol, TypeVar, runtime_checkable

V = TypeVar("V")


@runtime_checkable
class CacheStore(Protocol[V]):
    """Protocol for result cache backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        from wolfram_knowledge.protocols import CacheStore

        cache: CacheStore[QueryResult] = InMemoryCacheRepository()
        ```
    """

    def get(self, key: str) -> V | None:
        """Return the live value for ``key``.

        Args:
            key: Cache key built by ``build_cache_key``

        Returns:
            The cached value, or None if absent or expired
        """
        ...

    def set(self, key: str, value: V) -> None:
        """Store a value under the backend's default TTL.

        Args:
            key: Cache key built by ``build_cache_key``
            value: A successful remote result
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete one entry.

        Returns:
            True if an entry was removed
        """
        ...

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        ...

    @property
    def size(self) -> int:
        """Number of entries currently held (expired ones included until swept)."""
        ...
