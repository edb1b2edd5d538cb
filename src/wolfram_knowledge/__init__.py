"""Wolfram Knowledge - Wolfram|Alpha computational knowledge for conversational agents.

This package provides a layered architecture around the Wolfram|Alpha APIs:

Layers:
    - protocols: Interface contracts (CacheStore, ConversationStore)
    - repositories: HTTP gateway and in-process stores
    - services: Business logic (caching, retries, conversations, extraction)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)
    - models: Remote result models

Usage:
    ```python
    from wolfram_knowledge.services import WolframService

    service = WolframService.create()
    answer = await service.solve_math("x + 3 = 7")
    ```

For HTTP API:
    ```python
    from wolfram_knowledge.api.app import create_app
    ```
"""

from wolfram_knowledge.config import Settings, get_settings, is_configured
from wolfram_knowledge.dto import ActionRequest, ActionResult, ConversationRequest
from wolfram_knowledge.entities import CacheEntryEntity, ConversationHandle
from wolfram_knowledge.exceptions import (
    ConfigurationError,
    InvalidQueryError,
    WolframAPIError,
    WolframError,
)
from wolfram_knowledge.handlers import ActionHandler
from wolfram_knowledge.models import (
    AnalysisResult,
    ConversationResult,
    QueryResult,
    ServiceStats,
    ShortAnswerResult,
    SimpleAnswerResult,
    SpokenAnswerResult,
)
from wolfram_knowledge.protocols import CacheStore, ConversationStore
from wolfram_knowledge.repositories import (
    InMemoryCacheRepository,
    InMemoryConversationRepository,
    WolframClient,
    WolframEndpoint,
    build_cache_key,
)
from wolfram_knowledge.services import WolframService

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "is_configured",
    # Errors
    "WolframError",
    "ConfigurationError",
    "InvalidQueryError",
    "WolframAPIError",
    # Protocols (interfaces)
    "CacheStore",
    "ConversationStore",
    # Services (business logic)
    "WolframService",
    # Handlers (HTTP)
    "ActionHandler",
    # Repositories (gateway and stores)
    "WolframClient",
    "WolframEndpoint",
    "InMemoryCacheRepository",
    "InMemoryConversationRepository",
    "build_cache_key",
    # Entities (domain models)
    "CacheEntryEntity",
    "ConversationHandle",
    # Remote results
    "QueryResult",
    "ShortAnswerResult",
    "SpokenAnswerResult",
    "SimpleAnswerResult",
    "ConversationResult",
    "AnalysisResult",
    "ServiceStats",
    # DTOs (API contracts)
    "ActionRequest",
    "ActionResult",
    "ConversationRequest",
]
