"""Pytest configuration and shared fixtures for Recall tests."""

import logging
import os
import re
import shutil
import tempfile
import zlib
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from recall.lib.errors import CompletionError, EmbeddingError
from recall.lib.logging_config import ROOT_LOGGER_NAME
from recall.models.llm import ChatMessage, ChatOptions, ChatResponse

EMBEDDING_DIMENSIONS = 64


class FakeEmbedder:
    """Deterministic bag-of-words embedder.

    Each lowercase word is hashed into one of a fixed number of buckets, so
    texts sharing words get similar vectors. Set ``fail`` to make every call
    raise EmbeddingError.
    """

    def __init__(self, dimensions: int = EMBEDDING_DIMENSIONS) -> None:
        self.dimensions = dimensions
        self.calls: list[str] = []
        self.fail = False

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError("fake", "embedding backend unavailable")

        vector = [0.0] * self.dimensions
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            vector[zlib.crc32(word.encode()) % self.dimensions] += 1.0
        if not any(vector):
            vector[0] = 1.0
        return vector


class ScriptedCompleter:
    """Completer that replays queued responses and records requests.

    Queued exceptions are raised instead of returned. When the queue is
    empty, ``default`` is returned.
    """

    def __init__(self, *responses: str | Exception, default: str = "") -> None:
        self.responses: list[str | Exception] = list(responses)
        self.default = default
        self.calls: list[tuple[list[ChatMessage], ChatOptions | None]] = []

    async def chat(
        self, messages: list[ChatMessage], options: ChatOptions | None = None
    ) -> ChatResponse:
        self.calls.append((messages, options))
        if not self.responses:
            return ChatResponse(content=self.default)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return ChatResponse(content=response)


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for test file operations.

    Yields:
        Path to temporary directory

    Cleanup:
        Automatically removes directory after test
    """
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def isolated_env() -> Generator[dict[str, str]]:
    """Provide isolated environment variables for testing.

    Yields:
        Dictionary of original environment variables

    Cleanup:
        Restores original environment after test
    """
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    """Deterministic bag-of-words embedder."""
    return FakeEmbedder()


@pytest.fixture
def failing_completer() -> ScriptedCompleter:
    """Completer whose first call fails with CompletionError."""
    return ScriptedCompleter(CompletionError("fake", "model offline"))


@pytest.fixture(autouse=True)
def reset_recall_logger() -> Generator[None]:
    """Undo handler changes made by setup_logging during a test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# Configure pytest
def pytest_configure(config: Any) -> None:
    """Configure pytest with marker options."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line(
        "markers",
        "unit: marks tests as unit tests",
    )


@pytest.fixture
def make_completer() -> type[ScriptedCompleter]:
    """Factory for ScriptedCompleter instances with queued responses."""
    return ScriptedCompleter
