"""Answer questions with retrieved context.

The router decides whether a query needs retrieval; retrieved document text
is appended to the system prompt under a "Relevant Context" heading. If
retrieval fails, the question is still answered without context.
"""

import logging
from dataclasses import dataclass, field

from recall.config.defaults import ASK_CONTEXT_LIMIT
from recall.lib.errors import EmbeddingError
from recall.lib.memory_router import MemoryRouter, MemoryType
from recall.lib.providers.base import Completer
from recall.lib.vector_store import SearchResult, VectorStore
from recall.models.llm import ChatMessage, ChatResponse

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a personal assistant answering questions about the user, "
    "using the context provided. Give short answers that stay on point. "
    "Be helpful, concise, and authentic to the context provided."
)

CONTEXT_HEADER = "\n\nRelevant Context:\n"
CONTEXT_SEPARATOR = "\n---\n"


@dataclass
class Answer:
    """A reply together with how it was produced."""

    response: ChatResponse
    memory: MemoryType
    context: list[SearchResult] = field(default_factory=list)


def build_system_prompt(base_prompt: str, results: list[SearchResult]) -> str:
    """Append retrieved document contents to the system prompt."""
    if not results:
        return base_prompt
    retrieved = CONTEXT_SEPARATOR.join(r.document.content for r in results)
    return f"{base_prompt}{CONTEXT_HEADER}{retrieved}"


class Responder:
    """Routes a question, retrieves context and asks the chat model."""

    def __init__(
        self,
        store: VectorStore,
        completer: Completer,
        router: MemoryRouter | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        context_limit: int = ASK_CONTEXT_LIMIT,
    ) -> None:
        self.store = store
        self._completer = completer
        self.router = router or MemoryRouter()
        self.system_prompt = system_prompt
        self.context_limit = context_limit

    async def answer(
        self, query: str, history: list[ChatMessage] | None = None
    ) -> Answer:
        """Answer a question.

        Conversational queries skip retrieval.

        Args:
            query: The user's question.
            history: Earlier turns, oldest first.

        Returns:
            The reply with its routing decision and retrieved context.

        Raises:
            CompletionError: If the chat model fails.
        """
        memory = await self.router.route(query)
        logger.debug(f"Routed query to {memory.value}")

        results: list[SearchResult] = []
        if memory != MemoryType.CONVERSATIONAL:
            try:
                results = await self.store.search(query, self.context_limit)
            except EmbeddingError as e:
                logger.error(f"Failed to retrieve context: {e}")
            else:
                logger.info(f"Retrieved {len(results)} documents for context")

        messages = [
            ChatMessage(
                role="system", content=build_system_prompt(self.system_prompt, results)
            ),
            *(history or []),
            ChatMessage(role="user", content=query),
        ]
        response = await self._completer.chat(messages)
        return Answer(response=response, memory=memory, context=results)
