"""Default configuration values for Recall."""

import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "recall.yaml"

# Ollama provider defaults
OLLAMA_DEFAULTS: dict[str, str | None] = {
    "endpoint": "http://127.0.0.1:11434",
    "chat_model": "llama3",
    "embedding_model": "nomic-embed-text",
    "api_key": None,
}

# Gemini (Google AI) provider defaults
GEMINI_DEFAULTS: dict[str, str | None] = {
    "endpoint": None,
    "chat_model": "gemini-2.0-flash",
    "embedding_model": "text-embedding-004",
    "api_key": None,
}

PROVIDER_DEFAULTS: dict[str, dict[str, str | None]] = {
    "ollama": OLLAMA_DEFAULTS,
    "gemini": GEMINI_DEFAULTS,
}

# Environment variables that override recall.yaml, mapped to dotted config paths
ENV_OVERRIDES: dict[str, str] = {
    "RECALL_LLM_PROVIDER": "llm.provider",
    "RECALL_LLM_ENDPOINT": "llm.endpoint",
    "RECALL_GEMINI_API_KEY": "llm.api_key",
    "RECALL_DATA_DIR": "storage.data_dir",
}

# Searches during 'recall ask' pull more context than plain search
ASK_CONTEXT_LIMIT = 10


def get_provider_default(provider: str, key: str) -> str | None:
    """Look up a provider default.

    Args:
        provider: Provider name ("ollama" or "gemini").
        key: Setting name, e.g. "chat_model".

    Returns:
        The default value, or None when the provider or key is unknown.
    """
    defaults = PROVIDER_DEFAULTS.get(provider)
    if defaults is None:
        logger.warning(f"No defaults known for provider '{provider}'")
        return None
    return defaults.get(key)
