"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """Result of one action, in the host's action-chaining shape.

    ``values`` are merged into the host's conversation state; ``data`` is the
    action-specific payload later actions may read.
    """

    success: bool = Field(True, description="Whether the action produced a usable result")
    text: str = Field("", description="Text to display to the user")
    values: dict[str, Any] = Field(default_factory=dict, description="Values to merge into host state")
    data: dict[str, Any] = Field(default_factory=dict, description="Action-specific payload")
    error: str | None = Field(None, description="Error description when success is false")


class StatsResponse(BaseModel):
    """Response DTO for service diagnostics."""

    cache_size: int = Field(..., description="Number of cached results", ge=0)
    active_conversations: int = Field(..., description="Users with a live conversation thread", ge=0)
    config: dict[str, Any] = Field(..., description="Effective units, location and result cap")


class ClearResponse(BaseModel):
    """Response DTO for cache and conversation clearing."""

    success: bool = Field(..., description="Whether anything was removed")
    message: str = Field(..., description="Human-readable status message")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    configured: bool = Field(..., description="Whether a Wolfram|Alpha credential is configured")
