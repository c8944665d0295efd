"""Shared message shapes for the chat relay."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Provider(str, Enum):
    """Which upstream answered a chat request."""

    GOOGLE = "google"
    OPENAI = "openai"
    NONE = "none"


class ChatMessage(BaseModel):
    """One turn of a conversation, in the provider-agnostic shape."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> Any:
        # null turns become empty text; numbers are sent as their text form
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ChatRequest(BaseModel):
    """Body of POST /api/chat.

    Conversation order is the list order. Callers conventionally start with a
    single system message; this is not enforced.
    """

    messages: List[ChatMessage] = Field(min_length=1)


class ChatReply(BaseModel):
    """Body of a successful POST /api/chat response."""

    message: ChatMessage
    provider: Provider


class HealthStatus(BaseModel):
    ok: bool = True
    provider: Provider
    python: str


class IntentReceipt(BaseModel):
    status: Literal["received"] = "received"
    intent: Any


class ErrorBody(BaseModel):
    error: str


def to_wire(messages: List[ChatMessage]) -> List[Dict[str, str]]:
    """Plain role/content dicts, in order."""
    return [{"role": m.role, "content": m.content} for m in messages]
