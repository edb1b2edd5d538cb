"""Domain entities for internal representation.

These are pure frozen dataclasses owned by the repositories. Remote payloads
and API contracts live in ``models`` and ``dto`` respectively.
"""

from .cache_entry import CacheEntryEntity
from .conversation_handle import ConversationHandle

__all__ = ["CacheEntryEntity", "ConversationHandle"]
