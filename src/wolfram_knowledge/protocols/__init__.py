"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the in-process stores for another backend
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from wolfram_knowledge.protocols import CacheStore, ConversationStore

    cache: CacheStore = InMemoryCacheRepository()
    conversations: ConversationStore = InMemoryConversationRepository()
    ```
"""

from .cache_store import CacheStore
from .conversation_store import ConversationStore

__all__ = [
    "CacheStore",
    "ConversationStore",
]
