"""LLM-backed extraction of structured metadata from free-form text.

Notes, logs and plain text rarely carry headings, so the structure analyzer
has little to work with. The converter asks the chat model for a compact
JSON summary (title, summary, topics, entities, action items) that is
stored next to the regular chunks.
"""

import json
import logging
from typing import Any

from recall.lib.errors import ProviderError
from recall.lib.providers.base import Completer
from recall.models.llm import ChatMessage, ChatOptions

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT_TEMPLATE = """You are an expert data extractor for a JSON-based \
vector database.
Extract the key entities, summaries, and intents from the following \
unstructured text, and return a VALID JSON object.
Do not include any markdown formatting or introductory text. Just the raw \
JSON string.

Ensure your response exactly follows this structure:
{{
  "title": "A short descriptive title",
  "summary": "1-2 sentence summary of this text",
  "topics": ["topic1", "topic2"],
  "key_entities": [
    {{"name": "entity name", "type": "Person/Organization/Concept/Tool", \
"description": "brief description"}}
  ],
  "action_items": ["action 1", "action 2"]
}}

Text:
{text}
"""


def extract_json_object(content: str) -> dict[str, Any]:
    """Parse the JSON object embedded in a model response.

    Models sometimes wrap JSON in markdown fences or prose; everything
    before the first ``{`` and after the last ``}`` is discarded.

    Args:
        content: Raw model output.

    Returns:
        The parsed object.

    Raises:
        ValueError: If no JSON object can be parsed.

    Example:
        >>> extract_json_object('```json\\n{"title": "x"}\\n```')
        {'title': 'x'}
    """
    start = content.find("{")
    end = content.rfind("}")
    if start != -1 and end > start:
        content = content[start : end + 1]

    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class UnstructuredConverter:
    """Extracts title, summary and entities from unstructured text."""

    def __init__(self, completer: Completer) -> None:
        self._completer = completer

    async def extract_structured_data(
        self, text: str, filename: str
    ) -> dict[str, Any] | None:
        """Ask the chat model for a structured summary of text.

        Args:
            text: File contents.
            filename: Source name, used for logging.

        Returns:
            The extracted mapping, or None if the request or parsing failed.
        """
        logger.info(f"Extracting structured entities for {filename}")
        prompt = EXTRACTION_PROMPT_TEMPLATE.format(text=text)

        try:
            response = await self._completer.chat(
                [ChatMessage(role="user", content=prompt)],
                ChatOptions(format="json"),
            )
            return extract_json_object(response.content)
        except (ProviderError, ValueError) as e:
            logger.error(f"Structured extraction failed for {filename}: {e}")
            return None


def format_metadata_document(filename: str, data: dict[str, Any]) -> str:
    """Render extracted metadata as a searchable text document."""
    topics = data.get("topics") or []
    return (
        f"Metadata for {filename}:\n"
        f"Title: {data.get('title', '')}\n"
        f"Summary: {data.get('summary', '')}\n"
        f"Topics: {', '.join(str(t) for t in topics)}"
    )
