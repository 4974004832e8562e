"""Tests for the Semantic Kernel embedder and completer adapters."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from semantic_kernel.contents import AuthorRole, ChatHistory

from recall.lib.errors import CompletionError, EmbeddingError
from recall.lib.providers import Completer, Embedder
from recall.lib.providers.sk_provider import SKCompleter, SKEmbedder
from recall.models.llm import ChatMessage, ChatOptions


def make_chat_service(content: str | None = "reply") -> MagicMock:
    """Create a mock SK chat service returning one message."""
    result = MagicMock()
    result.content = content
    service = MagicMock()
    service.get_chat_message_contents = AsyncMock(return_value=[result])
    return service


class TestSKEmbedder:
    """Tests for SKEmbedder."""

    @pytest.mark.asyncio
    async def test_embed_returns_floats(self) -> None:
        """Test that the first embedding row is returned as a float list."""
        service = MagicMock()
        service.generate_embeddings = AsyncMock(return_value=[[0.1, 0.2, 0.3]])
        embedder = SKEmbedder(service, "ollama")

        vector = await embedder.embed("hello")

        assert vector == pytest.approx([0.1, 0.2, 0.3])
        assert all(isinstance(x, float) for x in vector)
        service.generate_embeddings.assert_awaited_once_with(["hello"])

    @pytest.mark.asyncio
    async def test_service_failure(self) -> None:
        """Test that service exceptions become EmbeddingError."""
        service = MagicMock()
        service.generate_embeddings = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(EmbeddingError, match="Provider 'ollama' failed: boom"):
            await SKEmbedder(service, "ollama").embed("x")

    @pytest.mark.asyncio
    async def test_empty_result(self) -> None:
        """Test that an empty response is an error."""
        service = MagicMock()
        service.generate_embeddings = AsyncMock(return_value=[])

        with pytest.raises(EmbeddingError, match="no embedding"):
            await SKEmbedder(service, "gemini").embed("x")

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """Test that slow services time out as EmbeddingError."""

        async def slow(texts: list[str]) -> list[list[float]]:
            await asyncio.sleep(1)
            return [[1.0]]

        service = MagicMock()
        service.generate_embeddings = slow

        with pytest.raises(EmbeddingError, match="timed out"):
            await SKEmbedder(service, "ollama", timeout=0.01).embed("x")

    def test_satisfies_protocol(self) -> None:
        """Test that SKEmbedder implements the Embedder protocol."""
        assert isinstance(SKEmbedder(MagicMock(), "ollama"), Embedder)


class TestSKCompleter:
    """Tests for SKCompleter."""

    @pytest.mark.asyncio
    async def test_chat_builds_history(self) -> None:
        """Test that messages map onto a ChatHistory with matching roles."""
        service = make_chat_service("hi there")
        settings = MagicMock()
        completer = SKCompleter(service, "ollama", lambda options: settings)

        response = await completer.chat(
            [
                ChatMessage(role="system", content="be brief"),
                ChatMessage(role="user", content="hello"),
                ChatMessage(role="assistant", content="hey"),
                ChatMessage(role="user", content="how are you"),
            ]
        )

        assert response.content == "hi there"
        kwargs = service.get_chat_message_contents.call_args.kwargs
        history = kwargs["chat_history"]
        assert isinstance(history, ChatHistory)
        assert [m.role for m in history.messages] == [
            AuthorRole.SYSTEM,
            AuthorRole.USER,
            AuthorRole.ASSISTANT,
            AuthorRole.USER,
        ]
        assert kwargs["settings"] is settings

    @pytest.mark.asyncio
    async def test_options_reach_settings_factory(self) -> None:
        """Test that chat options are passed to the settings factory."""
        seen: list[ChatOptions] = []

        def settings_factory(options: ChatOptions) -> MagicMock:
            seen.append(options)
            return MagicMock()

        completer = SKCompleter(make_chat_service(), "ollama", settings_factory)
        await completer.chat(
            [ChatMessage(role="user", content="x")], ChatOptions(format="json")
        )

        assert seen[0].format == "json"

    @pytest.mark.asyncio
    async def test_model_override_uses_service_factory(self) -> None:
        """Test that another model gets its own service, created once."""
        default_service = make_chat_service("default")
        other_service = make_chat_service("other")
        service_factory = MagicMock(return_value=other_service)
        completer = SKCompleter(
            default_service,
            "ollama",
            lambda options: MagicMock(),
            model="llama3",
            service_factory=service_factory,
        )
        message = [ChatMessage(role="user", content="x")]

        first = await completer.chat(message, ChatOptions(model="mistral"))
        second = await completer.chat(message, ChatOptions(model="mistral"))
        default = await completer.chat(message, ChatOptions(model="llama3"))

        assert first.content == second.content == "other"
        assert default.content == "default"
        service_factory.assert_called_once_with("mistral")

    @pytest.mark.asyncio
    async def test_empty_result(self) -> None:
        """Test that no messages yields empty content."""
        service = MagicMock()
        service.get_chat_message_contents = AsyncMock(return_value=[])
        completer = SKCompleter(service, "ollama", lambda options: MagicMock())

        response = await completer.chat([ChatMessage(role="user", content="x")])
        assert response.content == ""

    @pytest.mark.asyncio
    async def test_none_content(self) -> None:
        """Test that a None message content becomes an empty string."""
        completer = SKCompleter(
            make_chat_service(None), "ollama", lambda options: MagicMock()
        )
        response = await completer.chat([ChatMessage(role="user", content="x")])
        assert response.content == ""

    @pytest.mark.asyncio
    async def test_service_failure(self) -> None:
        """Test that service exceptions become CompletionError."""
        service = MagicMock()
        service.get_chat_message_contents = AsyncMock(
            side_effect=ConnectionError("refused")
        )
        completer = SKCompleter(service, "gemini", lambda options: MagicMock())

        with pytest.raises(CompletionError, match="refused") as exc_info:
            await completer.chat([ChatMessage(role="user", content="x")])
        assert exc_info.value.provider == "gemini"

    def test_satisfies_protocol(self) -> None:
        """Test that SKCompleter implements the Completer protocol."""
        completer = SKCompleter(MagicMock(), "ollama", lambda options: MagicMock())
        assert isinstance(completer, Completer)
