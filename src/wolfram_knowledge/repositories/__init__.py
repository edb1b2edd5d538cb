"""Repository layer for data access.

This layer wraps everything stateful or remote behind narrow interfaces:
- the Wolfram|Alpha HTTP gateway
- the in-process result cache (CacheStore)
- the in-process conversation handle store (ConversationStore)

The stores are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from wolfram_knowledge.protocols import CacheStore, ConversationStore

from .conversation_repository import InMemoryConversationRepository
from .memory_cache_repository import InMemoryCacheRepository, build_cache_key, normalize_input
from .wolfram_client import WolframClient, WolframEndpoint, to_data_url

__all__ = [
    "CacheStore",
    "ConversationStore",
    "InMemoryCacheRepository",
    "InMemoryConversationRepository",
    "WolframClient",
    "WolframEndpoint",
    "build_cache_key",
    "normalize_input",
    "to_data_url",
]
