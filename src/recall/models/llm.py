"""LLM provider models shared by embedding and chat backends."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ProviderEnum(str, Enum):
    """Supported embedding/chat backends."""

    OLLAMA = "ollama"
    GEMINI = "gemini"


class ChatMessage(BaseModel):
    """A single message in a chat exchange."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class ChatOptions(BaseModel):
    """Per-request chat options.

    Attributes:
        model: Override the configured chat model for this request.
        format: ``"json"`` asks the backend for a JSON-constrained response.
    """

    model: str | None = None
    format: Literal["json"] | None = None


class ChatResponse(BaseModel):
    """Text returned by a chat backend."""

    content: str = Field(default="")
