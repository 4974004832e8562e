"""Semantic Kernel adapters for the Embedder and Completer protocols.

The adapters wrap already-constructed SK services, so they work with any
connector (Ollama, Google AI, OpenAI) and can be exercised in tests with
mocked services. Backend selection lives in ``recall.lib.providers.factory``.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from semantic_kernel.contents import ChatHistory

from recall.lib.errors import CompletionError, EmbeddingError
from recall.models.llm import ChatMessage, ChatOptions, ChatResponse

if TYPE_CHECKING:
    from semantic_kernel.connectors.ai.prompt_execution_settings import (
        PromptExecutionSettings,
    )

logger = logging.getLogger(__name__)

SettingsFactory = Callable[[ChatOptions], "PromptExecutionSettings"]
ServiceFactory = Callable[[str], Any]


class SKEmbedder:
    """Embedder backed by an SK text-embedding service.

    Example:
        >>> from semantic_kernel.connectors.ai.ollama import OllamaTextEmbedding
        >>> embedder = SKEmbedder(
        ...     OllamaTextEmbedding(ai_model_id="nomic-embed-text"), "ollama"
        ... )
        >>> vector = await embedder.embed("hello")
    """

    def __init__(
        self, service: Any, provider: str, timeout: float | None = None
    ) -> None:
        """Initialize the embedder.

        Args:
            service: SK service exposing ``generate_embeddings(texts)``.
            provider: Backend name used in error messages.
            timeout: Seconds before a request is abandoned; None waits forever.
        """
        self._service = service
        self.provider = provider
        self._timeout = timeout

    async def embed(self, text: str) -> list[float]:
        """Embed one text.

        Args:
            text: Text to embed.

        Returns:
            The embedding as a list of floats.

        Raises:
            EmbeddingError: If the service fails, times out or returns nothing.
        """
        try:
            embeddings = await asyncio.wait_for(
                self._service.generate_embeddings([text]), timeout=self._timeout
            )
        except TimeoutError as e:
            raise EmbeddingError(
                self.provider, f"embedding timed out after {self._timeout}s"
            ) from e
        except Exception as e:
            logger.debug(f"Embedding request failed: {e}", exc_info=True)
            raise EmbeddingError(self.provider, str(e)) from e

        if embeddings is None or len(embeddings) == 0:
            raise EmbeddingError(self.provider, "no embedding returned")

        vector = [float(x) for x in embeddings[0]]
        if not vector:
            raise EmbeddingError(self.provider, "empty embedding returned")
        return vector


class SKCompleter:
    """Completer backed by an SK chat-completion service.

    Execution settings are built per request by ``settings_factory`` so that
    provider-specific knobs (JSON mode) can follow ``ChatOptions``. When a
    request names a different model and a ``service_factory`` is available,
    a service for that model is created once and reused by this instance.
    """

    def __init__(
        self,
        service: Any,
        provider: str,
        settings_factory: SettingsFactory,
        model: str | None = None,
        service_factory: ServiceFactory | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the completer.

        Args:
            service: SK service exposing ``get_chat_message_contents``.
            provider: Backend name used in error messages.
            settings_factory: Builds execution settings from chat options.
            model: Model id served by ``service``.
            service_factory: Creates a service for another model id.
            timeout: Seconds before a request is abandoned; None waits forever.
        """
        self._service = service
        self.provider = provider
        self._settings_factory = settings_factory
        self.model = model
        self._service_factory = service_factory
        self._timeout = timeout
        self._model_services: dict[str, Any] = {}

    def _service_for(self, model: str | None) -> Any:
        """Return the service that serves ``model``."""
        if not model or model == self.model or self._service_factory is None:
            return self._service
        if model not in self._model_services:
            logger.debug(f"Creating {self.provider} chat service for model {model}")
            self._model_services[model] = self._service_factory(model)
        return self._model_services[model]

    @staticmethod
    def _build_history(messages: list[ChatMessage]) -> ChatHistory:
        history = ChatHistory()
        for message in messages:
            if message.role == "system":
                history.add_system_message(message.content)
            elif message.role == "assistant":
                history.add_assistant_message(message.content)
            else:
                history.add_user_message(message.content)
        return history

    async def chat(
        self, messages: list[ChatMessage], options: ChatOptions | None = None
    ) -> ChatResponse:
        """Complete a conversation.

        Args:
            messages: Conversation so far, oldest first.
            options: Per-request model override and response format.

        Returns:
            The assistant's reply; empty content if the service returned none.

        Raises:
            CompletionError: If the service fails or times out.
        """
        options = options or ChatOptions()
        service = self._service_for(options.model)
        settings = self._settings_factory(options)
        history = self._build_history(messages)

        try:
            result = await asyncio.wait_for(
                service.get_chat_message_contents(
                    chat_history=history, settings=settings
                ),
                timeout=self._timeout,
            )
        except TimeoutError as e:
            raise CompletionError(
                self.provider, f"chat timed out after {self._timeout}s"
            ) from e
        except Exception as e:
            logger.debug(f"Chat request failed: {e}", exc_info=True)
            raise CompletionError(self.provider, str(e)) from e

        if not result:
            return ChatResponse(content="")
        return ChatResponse(content=str(result[0].content or ""))
