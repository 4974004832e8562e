"""Tests for configuration and LLM models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from recall.models.config import (
    ChunkingConfig,
    LLMConfig,
    RecallConfig,
    StorageConfig,
)
from recall.models.llm import ChatMessage, ChatOptions, ProviderEnum


class TestChunkingConfig:
    """Tests for ChunkingConfig."""

    def test_defaults(self) -> None:
        """Test default budgets."""
        config = ChunkingConfig()
        assert config.max_chunk_tokens == 512
        assert config.min_chunk_tokens == 50
        assert config.overlap_tokens == 64
        assert config.preserve_tables is True
        assert config.preserve_code_blocks is True
        assert config.tokenizer == "words"

    @pytest.mark.parametrize("value", [0, -5])
    def test_max_must_be_positive(self, value: int) -> None:
        """Test that max_chunk_tokens must be positive."""
        with pytest.raises(ValidationError, match="max_chunk_tokens must be positive"):
            ChunkingConfig(max_chunk_tokens=value)

    def test_negative_overlap_rejected(self) -> None:
        """Test that overlap cannot be negative."""
        with pytest.raises(ValidationError, match="must not be negative"):
            ChunkingConfig(overlap_tokens=-1)

    def test_zero_overlap_allowed(self) -> None:
        """Test that overlap can be disabled."""
        assert ChunkingConfig(overlap_tokens=0).overlap_tokens == 0

    def test_min_above_max_allowed(self) -> None:
        """Test that min_chunk_tokens is not checked against the maximum."""
        config = ChunkingConfig(max_chunk_tokens=20, min_chunk_tokens=50)
        assert config.min_chunk_tokens == 50

    def test_blank_tokenizer_rejected(self) -> None:
        """Test that the tokenizer name must not be blank."""
        with pytest.raises(ValidationError, match="tokenizer must be non-empty"):
            ChunkingConfig(tokenizer="  ")

    def test_frozen(self) -> None:
        """Test that chunking configuration is immutable."""
        config = ChunkingConfig()
        with pytest.raises(ValidationError):
            config.max_chunk_tokens = 10  # type: ignore[misc]

    def test_extra_forbidden(self) -> None:
        """Test that unknown keys are rejected."""
        with pytest.raises(ValidationError):
            ChunkingConfig(max_tokens=10)  # type: ignore[call-arg]


class TestLLMConfig:
    """Tests for LLMConfig."""

    def test_defaults(self) -> None:
        """Test that Ollama is the default backend."""
        config = LLMConfig()
        assert config.provider == ProviderEnum.OLLAMA
        assert config.endpoint is None
        assert config.chat_model is None
        assert config.timeout == 60.0

    def test_provider_from_string(self) -> None:
        """Test that provider names are parsed into the enum."""
        assert LLMConfig(provider="gemini").provider == ProviderEnum.GEMINI

    def test_unknown_provider(self) -> None:
        """Test that unsupported providers are rejected."""
        with pytest.raises(ValidationError):
            LLMConfig(provider="openai")

    def test_timeout_positive(self) -> None:
        """Test that timeout must be positive."""
        with pytest.raises(ValidationError, match="timeout must be positive"):
            LLMConfig(timeout=0)


class TestStorageConfig:
    """Tests for StorageConfig paths."""

    def test_paths(self) -> None:
        """Test derived store and artifact paths."""
        config = StorageConfig(data_dir="/srv/recall")
        assert config.store_path == Path("/srv/recall/embedded_vectors.json")
        assert config.processed_dir == Path("/srv/recall/processed/static")

    def test_blank_store_file(self) -> None:
        """Test that store_file must not be blank."""
        with pytest.raises(ValidationError):
            StorageConfig(store_file="")


class TestRecallConfig:
    """Tests for RecallConfig."""

    def test_defaults(self) -> None:
        """Test top-level defaults."""
        config = RecallConfig()
        assert config.source_dir == "public"
        assert config.search_limit == 3
        assert config.log_file is None
        assert config.use_llm_extraction is True
        assert config.router_mode == "keywords"
        assert config.storage.store_path == Path("data/embedded_vectors.json")

    def test_nested_from_dict(self) -> None:
        """Test building nested sections from plain mappings."""
        config = RecallConfig(
            llm={"provider": "gemini"}, chunking={"max_chunk_tokens": 128}
        )
        assert config.llm.provider == ProviderEnum.GEMINI
        assert config.chunking.max_chunk_tokens == 128

    def test_router_mode_values(self) -> None:
        """Test that only known routing strategies are accepted."""
        assert RecallConfig(router_mode="llm").router_mode == "llm"
        with pytest.raises(ValidationError):
            RecallConfig(router_mode="random")


class TestChatModels:
    """Tests for chat request and response models."""

    def test_message_roles(self) -> None:
        """Test that only known roles are accepted."""
        assert ChatMessage(role="system", content="x").role == "system"
        with pytest.raises(ValidationError):
            ChatMessage(role="tool", content="x")

    def test_options_format(self) -> None:
        """Test that only JSON formatting can be requested."""
        assert ChatOptions(format="json").format == "json"
        assert ChatOptions().format is None
        with pytest.raises(ValidationError):
            ChatOptions(format="xml")
