"""Result models for the Wolfram|Alpha sub-APIs.

Every result is an immutable value produced by one gateway call, or derived
from one by the formatter. Full query payloads are parsed leniently: the API
sends a bare object where a list is expected when there is only one item,
and ``error`` may be a boolean or an object.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return value


class Image(BaseModel):
    """Image rendering of a subpod."""

    src: str = ""
    alt: str = ""
    title: str = ""
    width: int | None = None
    height: int | None = None

    model_config = {"frozen": True, "extra": "allow"}


class Subpod(BaseModel):
    """One plain-text fragment of a pod."""

    title: str = ""
    plaintext: str | None = None
    img: Image | None = None

    model_config = {"frozen": True, "extra": "allow"}


class Pod(BaseModel):
    """A titled section of a full query result."""

    title: str = ""
    scanner: str = ""
    id: str = ""
    position: int | None = None
    error: bool | dict[str, Any] = False
    numsubpods: int = 0
    primary: bool = False
    subpods: list[Subpod] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "allow"}

    @field_validator("subpods", mode="before")
    @classmethod
    def _coerce_subpods(cls, value: Any) -> Any:
        return _as_list(value)

    @property
    def plaintexts(self) -> list[str]:
        """Non-empty plain-text fragments, in order."""
        return [s.plaintext for s in self.subpods if s.plaintext]


class AssumptionValue(BaseModel):
    """One interpretation offered by an assumption."""

    name: str = ""
    desc: str = ""
    input: str = ""

    model_config = {"frozen": True, "extra": "allow"}


class Assumption(BaseModel):
    """An interpretation the remote service made about the input."""

    type: str = ""
    word: str | None = None
    template: str | None = None
    values: list[AssumptionValue] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "allow"}

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_values(cls, value: Any) -> Any:
        return _as_list(value)


class QueryWarning(BaseModel):
    """A warning attached to a full query result."""

    text: str = ""

    model_config = {"frozen": True, "extra": "allow"}

    @model_validator(mode="before")
    @classmethod
    def _lift_nested_text(cls, data: Any) -> Any:
        # Warnings arrive keyed by kind, e.g. {"spellcheck": {"text": ...}}
        if isinstance(data, dict) and "text" not in data:
            for nested in data.values():
                if isinstance(nested, dict) and nested.get("text"):
                    return {**data, "text": nested["text"]}
        return data


class QueryResult(BaseModel):
    """Full multi-section result of the query API."""

    success: bool = False
    error: bool | dict[str, Any] | str | None = None
    numpods: int = 0
    pods: list[Pod] = Field(default_factory=list)
    assumptions: list[Assumption] = Field(default_factory=list)
    warnings: list[QueryWarning] = Field(default_factory=list)
    inputstring: str | None = None
    timing: float | None = None

    model_config = {"frozen": True, "extra": "allow"}

    @field_validator("pods", "assumptions", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("warnings", mode="before")
    @classmethod
    def _coerce_warnings(cls, value: Any) -> Any:
        # A single warnings object may carry several kinds at once
        if isinstance(value, dict):
            return [{kind: body} for kind, body in value.items()] if "text" not in value else [value]
        return _as_list(value)

    @property
    def error_message(self) -> str | None:
        """Human-readable error reported by the remote, if any."""
        if isinstance(self.error, dict):
            return str(self.error.get("msg") or self.error)
        if isinstance(self.error, str):
            return self.error
        return None


class ShortAnswerResult(BaseModel):
    """Single plain-text answer from the short answer API."""

    answer: str = ""
    success: bool
    error: str | None = None

    model_config = {"frozen": True}


class SpokenAnswerResult(BaseModel):
    """Natural-language sentence from the spoken answer API."""

    spoken: str = ""
    success: bool
    error: str | None = None

    model_config = {"frozen": True}


class SimpleAnswerResult(BaseModel):
    """Image answer from the simple API, as a base64 data URL."""

    image: str
    content_type: str = "image/gif"

    model_config = {"frozen": True}


class ConversationResult(BaseModel):
    """Reply from the conversational/LLM API."""

    conversation_id: str | None = Field(None, alias="conversationID")
    result: str | None = None
    host: str | None = None
    s: str | None = None
    error: str | None = None
    expired: bool = False

    model_config = {"frozen": True, "extra": "allow", "populate_by_name": True}


class AnalysisResult(BaseModel):
    """Statistics extracted from a full query: pod title -> text fragments."""

    input: str
    results: dict[str, list[str]] = Field(default_factory=dict)
    error: str | None = None

    model_config = {"frozen": True}


class ServiceStats(BaseModel):
    """Diagnostics snapshot of the service."""

    cache_size: int
    active_conversations: int
    config: dict[str, Any]
