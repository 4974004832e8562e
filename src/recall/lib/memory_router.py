"""Classify a query into the memory it should be answered from."""

import logging
import re
from enum import Enum

from recall.lib.errors import ProviderError
from recall.lib.providers.base import Completer
from recall.models.llm import ChatMessage

logger = logging.getLogger(__name__)


class MemoryType(str, Enum):
    """Memory partitions a query can be routed to."""

    DYNAMIC = "DYNAMIC_MEMORY"  # activity and health data
    STATIC = "STATIC_MEMORY"  # resume, projects, knowledge
    CONVERSATIONAL = "CONVERSATIONAL_MEMORY"  # small talk, chat context


CONVERSATIONAL_KEYWORDS = (
    "hi",
    "hello",
    "hey",
    "how are you",
    "good morning",
    "good evening",
    "thanks",
    "thank you",
)

# Greetings only count as whole words at the start of the query
CONVERSATIONAL_PATTERN = re.compile(
    r"^(?:" + "|".join(re.escape(k) for k in CONVERSATIONAL_KEYWORDS) + r")\b"
)

DYNAMIC_KEYWORDS = (
    "run",
    "running",
    "ran",
    "swim",
    "swimming",
    "swam",
    "bike",
    "biking",
    "cycled",
    "activity",
    "workout",
    "heart rate",
    "pace",
    "calories",
    "strava",
    "health",
)

ROUTER_PROMPT_TEMPLATE = """You are a router. Classify the user's intent into \
one of three categories:
1. DYNAMIC_MEMORY: Questions about recent physical activities, Strava, health \
metrics, workouts.
2. CONVERSATIONAL_MEMORY: Greetings, small talk, referencing previous \
immediate context in current chat.
3. STATIC_MEMORY: Questions about professional background, skills, projects, \
resume, technical knowledge, opinions, or general facts about the user.

Input: "{query}"

Return ONLY the category name (DYNAMIC_MEMORY, CONVERSATIONAL_MEMORY, or \
STATIC_MEMORY). Do not add any explanation.
"""


class MemoryRouter:
    """Routes queries by keyword matching or by asking the chat model.

    Activity keywords match as substrings, so short keywords match inside
    longer words ("ran" matches "grand"). Greetings must be whole words at
    the start of the query, so "history of my roles" is not small talk.
    LLM routing falls back to keywords when the backend fails.

    Example:
        >>> await MemoryRouter().route("How was my run today?")
        <MemoryType.DYNAMIC: 'DYNAMIC_MEMORY'>
    """

    def __init__(self, completer: Completer | None = None, use_llm: bool = False):
        """Initialize the router.

        Args:
            completer: Chat backend; required for LLM routing.
            use_llm: Route with the chat model instead of keywords.

        Raises:
            ValueError: If ``use_llm`` is set without a completer.
        """
        if use_llm and completer is None:
            raise ValueError("LLM routing requires a completer")
        self._completer = completer
        self.use_llm = use_llm

    async def route(self, query: str) -> MemoryType:
        """Pick the memory partition for a query."""
        if self.use_llm and self._completer is not None:
            return await self._route_with_llm(query, self._completer)
        return self.route_with_keywords(query)

    @staticmethod
    def route_with_keywords(query: str) -> MemoryType:
        """Classify a query with the fixed keyword lists."""
        lower_query = query.lower()

        if CONVERSATIONAL_PATTERN.match(lower_query):
            return MemoryType.CONVERSATIONAL

        if any(k in lower_query for k in DYNAMIC_KEYWORDS):
            return MemoryType.DYNAMIC

        return MemoryType.STATIC

    async def _route_with_llm(self, query: str, completer: Completer) -> MemoryType:
        prompt = ROUTER_PROMPT_TEMPLATE.format(query=query)

        try:
            response = await completer.chat(
                [ChatMessage(role="user", content=prompt)]
            )
        except ProviderError as e:
            logger.error(f"Router LLM failed, falling back to keywords: {e}")
            return self.route_with_keywords(query)

        content = response.content.strip().upper()
        for memory_type in (
            MemoryType.DYNAMIC,
            MemoryType.CONVERSATIONAL,
            MemoryType.STATIC,
        ):
            if memory_type.value in content:
                return memory_type

        logger.debug(f"Unrecognized router response {content!r}, using static")
        return MemoryType.STATIC
