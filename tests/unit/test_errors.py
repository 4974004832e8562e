"""Tests for custom exception hierarchy in recall.lib.errors."""

import pytest

from recall.lib.errors import (
    CompletionError,
    ConfigError,
    EmbeddingError,
    IngestionError,
    ProviderError,
    RecallError,
    StorageError,
)


class TestRecallError:
    """Tests for base RecallError exception."""

    def test_recall_error_preserves_message(self) -> None:
        """Test that RecallError keeps its message."""
        error = RecallError("Test error message")
        assert str(error) == "Test error message"

    @pytest.mark.parametrize(
        "error",
        [
            ConfigError("field", "msg"),
            ProviderError("ollama", "msg"),
            EmbeddingError("ollama", "msg"),
            CompletionError("ollama", "msg"),
            StorageError("store.json", "msg"),
            IngestionError("a.pdf", "msg"),
        ],
    )
    def test_all_errors_inherit_base(self, error: RecallError) -> None:
        """Test that every error can be caught as RecallError."""
        assert isinstance(error, RecallError)


class TestConfigError:
    """Tests for ConfigError."""

    def test_config_error_attributes(self) -> None:
        """Test that ConfigError exposes field and message."""
        error = ConfigError("llm.api_key", "missing")
        assert error.field == "llm.api_key"
        assert error.message == "missing"
        assert str(error) == "Configuration error in 'llm.api_key': missing"


class TestProviderErrors:
    """Tests for ProviderError and its subclasses."""

    def test_provider_error_format(self) -> None:
        """Test the provider error message."""
        error = ProviderError("gemini", "quota exceeded")
        assert error.provider == "gemini"
        assert error.message == "quota exceeded"
        assert str(error) == "Provider 'gemini' failed: quota exceeded"

    def test_subclasses_caught_as_provider_error(self) -> None:
        """Test that embedding and completion errors are provider errors."""
        with pytest.raises(ProviderError):
            raise EmbeddingError("ollama", "connection refused")
        with pytest.raises(ProviderError):
            raise CompletionError("ollama", "connection refused")


class TestStorageAndIngestionErrors:
    """Tests for StorageError and IngestionError."""

    def test_storage_error_format(self) -> None:
        """Test the storage error message."""
        error = StorageError("data/v.json", "failed to save: disk full")
        assert error.path == "data/v.json"
        assert str(error) == (
            "Vector store error at data/v.json: failed to save: disk full"
        )

    def test_ingestion_error_format(self) -> None:
        """Test the ingestion error message."""
        error = IngestionError("resume.pdf", "unreadable")
        assert error.source == "resume.pdf"
        assert str(error) == "Failed to ingest 'resume.pdf': unreadable"
