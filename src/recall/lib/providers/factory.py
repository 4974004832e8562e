"""Build Embedder and Completer instances from LLMConfig.

Connector packages are imported lazily so that only the selected backend's
dependencies need to be installed. The backend is resolved once, when the
caller builds its providers at startup.
"""

import logging
import os
from typing import Any

from recall.config.defaults import get_provider_default
from recall.lib.errors import ConfigError
from recall.lib.providers.sk_provider import SKCompleter, SKEmbedder
from recall.models.config import LLMConfig
from recall.models.llm import ChatOptions, ProviderEnum

logger = logging.getLogger(__name__)

GEMINI_API_KEY_ENV = "GEMINI_API_KEY"


def _resolve(config: LLMConfig, key: str) -> str | None:
    """Return the configured value for key, or the provider default."""
    value = getattr(config, key)
    if value:
        return str(value)
    return get_provider_default(config.provider.value, key)


def _gemini_api_key(config: LLMConfig) -> str:
    api_key = config.api_key or os.environ.get(GEMINI_API_KEY_ENV)
    if not api_key:
        raise ConfigError(
            "llm.api_key",
            f"Gemini provider requires an API key. Set llm.api_key, "
            f"RECALL_GEMINI_API_KEY or {GEMINI_API_KEY_ENV}.",
        )
    return api_key


def _import_ollama() -> Any:
    try:
        from semantic_kernel.connectors.ai import ollama
    except ImportError as exc:
        raise ConfigError(
            "llm.provider",
            "Ollama provider requires 'ollama' package. "
            "Install with: pip install 'semantic-kernel[ollama]'",
        ) from exc
    return ollama


def _import_google_ai() -> Any:
    try:
        from semantic_kernel.connectors.ai.google import google_ai
    except ImportError as exc:
        raise ConfigError(
            "llm.provider",
            "Gemini provider requires 'google-genai' package. "
            "Install with: pip install 'semantic-kernel[google]'",
        ) from exc
    return google_ai


def create_embedder(config: LLMConfig) -> SKEmbedder:
    """Create the embedder for the configured backend.

    Args:
        config: LLM configuration.

    Returns:
        An SKEmbedder wrapping the backend's text-embedding service.

    Raises:
        ConfigError: If the backend is unsupported, its connector package is
            missing, or required credentials are absent.
    """
    model = _resolve(config, "embedding_model")
    logger.debug(
        f"Creating embedding service: model={model}, provider={config.provider.value}"
    )

    if config.provider == ProviderEnum.OLLAMA:
        ollama = _import_ollama()
        service = ollama.OllamaTextEmbedding(
            ai_model_id=model, host=_resolve(config, "endpoint")
        )
    elif config.provider == ProviderEnum.GEMINI:
        google_ai = _import_google_ai()
        service = google_ai.GoogleAITextEmbedding(
            embedding_model_id=model, api_key=_gemini_api_key(config)
        )
    else:
        raise ConfigError(
            "llm.provider", f"Embedding not supported for provider: {config.provider}"
        )

    return SKEmbedder(service, config.provider.value, timeout=config.timeout)


def create_completer(config: LLMConfig) -> SKCompleter:
    """Create the chat completer for the configured backend.

    JSON-format requests map to Ollama's ``format="json"`` and to Gemini's
    ``response_mime_type="application/json"``.

    Args:
        config: LLM configuration.

    Returns:
        An SKCompleter wrapping the backend's chat-completion service.

    Raises:
        ConfigError: If the backend is unsupported, its connector package is
            missing, or required credentials are absent.
    """
    model = _resolve(config, "chat_model")
    logger.debug(
        f"Creating chat service: model={model}, provider={config.provider.value}"
    )

    if config.provider == ProviderEnum.OLLAMA:
        ollama = _import_ollama()
        host = _resolve(config, "endpoint")

        def ollama_service(model_id: str) -> Any:
            return ollama.OllamaChatCompletion(ai_model_id=model_id, host=host)

        def ollama_settings(options: ChatOptions) -> Any:
            if options.format == "json":
                return ollama.OllamaChatPromptExecutionSettings(format="json")
            return ollama.OllamaChatPromptExecutionSettings()

        service_factory = ollama_service
        settings_factory = ollama_settings
    elif config.provider == ProviderEnum.GEMINI:
        google_ai = _import_google_ai()
        api_key = _gemini_api_key(config)

        def gemini_service(model_id: str) -> Any:
            return google_ai.GoogleAIChatCompletion(
                gemini_model_id=model_id, api_key=api_key
            )

        def gemini_settings(options: ChatOptions) -> Any:
            if options.format == "json":
                return google_ai.GoogleAIChatPromptExecutionSettings(
                    response_mime_type="application/json"
                )
            return google_ai.GoogleAIChatPromptExecutionSettings()

        service_factory = gemini_service
        settings_factory = gemini_settings
    else:
        raise ConfigError(
            "llm.provider", f"Chat not supported for provider: {config.provider}"
        )

    return SKCompleter(
        service_factory(model),
        config.provider.value,
        settings_factory,
        model=model,
        service_factory=service_factory,
        timeout=config.timeout,
    )
