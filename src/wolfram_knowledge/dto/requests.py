"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field, field_validator

from wolfram_knowledge.config import QUERY_OPTIONS


class ActionRequest(BaseModel):
    """Request DTO for single-input actions (query, compute, solve, ...).

    ``input`` is the query string the host already extracted from the
    conversation (a question, expression, equation, topic or dataset).
    """

    input: str = Field(..., description="Query text extracted by the host", min_length=1)
    options: dict[str, str | int | float | bool] | None = Field(
        None,
        description="Extra query parameters for full queries (podstate, units, location, scanner, format)",
    )

    @field_validator("options")
    @classmethod
    def _only_query_options(cls, value: dict[str, str | int | float | bool] | None):
        unknown = sorted(set(value or {}) - set(QUERY_OPTIONS))
        if unknown:
            raise ValueError(f"Unsupported query options: {', '.join(unknown)}")
        return value


class QuickAnswerRequest(BaseModel):
    """Request DTO for the short/spoken answer action."""

    input: str = Field(..., description="Question to answer in one line", min_length=1)
    spoken: bool = Field(False, description="Return a spoken sentence instead of a short answer")


class ConversationRequest(BaseModel):
    """Request DTO for a conversational turn."""

    input: str = Field(..., description="The user's utterance", min_length=1)
    user_id: str = Field(..., description="Opaque host user id owning the conversation", min_length=1)
    max_chars: int = Field(2000, description="Upper bound on the reply length", ge=1, le=10000)
