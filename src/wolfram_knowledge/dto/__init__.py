"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Remote payload models live in ``wolfram_knowledge.models``; internal state
uses the entities package.
"""

from .requests import ActionRequest, ConversationRequest, QuickAnswerRequest
from .responses import ActionResult, ClearResponse, HealthCheckResponse, StatsResponse

__all__ = [
    "ActionRequest",
    "ConversationRequest",
    "QuickAnswerRequest",
    "ActionResult",
    "ClearResponse",
    "HealthCheckResponse",
    "StatsResponse",
]
