"""Provider boundary for embeddings and chat completions.

The vector store and ingestion code depend only on these protocols, so any
backend (or a test double) that implements them can be injected.
"""

from typing import Protocol, runtime_checkable

from recall.models.llm import ChatMessage, ChatOptions, ChatResponse


@runtime_checkable
class Embedder(Protocol):
    """Turns text into a fixed-dimension vector."""

    async def embed(self, text: str) -> list[float]:
        """Embed one text.

        Raises:
            EmbeddingError: If the backend fails.
        """
        ...


@runtime_checkable
class Completer(Protocol):
    """Produces a chat completion for a message list."""

    async def chat(
        self, messages: list[ChatMessage], options: ChatOptions | None = None
    ) -> ChatResponse:
        """Complete a conversation.

        Raises:
            CompletionError: If the backend fails.
        """
        ...
