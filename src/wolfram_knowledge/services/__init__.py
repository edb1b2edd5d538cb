"""Service layer for business logic.

This layer contains the core orchestration: caching, retries through the
gateway, conversation continuity and result extraction. Services depend on
protocols (interfaces), not concrete store implementations, making them
testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Gateway / stores)

Usage:
    ```python
    from wolfram_knowledge.services import WolframService

    # Using factory method (recommended)
    service = WolframService.create()

    # Or manual creation
    service = WolframService(client=client, cache=cache, conversations=store, settings=settings)
    ```
"""

from . import formatter
from .wolfram_service import CachedValue, WolframService

__all__ = [
    "CachedValue",
    "WolframService",
    "formatter",
]
