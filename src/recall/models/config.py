"""Configuration models for Recall.

These pydantic models describe ``recall.yaml``. Every section has defaults,
so an empty file (or no file at all) yields a working local setup backed by
Ollama.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recall.models.llm import ProviderEnum


class ChunkingConfig(BaseModel):
    """Token budgets and atomic-block rules for the structure-aware chunker."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_chunk_tokens: int = Field(
        default=512, description="Upper bound on estimated tokens per chunk"
    )
    min_chunk_tokens: int = Field(
        default=50,
        description="Chunks below this size are reported but still emitted",
    )
    overlap_tokens: int = Field(
        default=64,
        description="Approximate tokens carried over after a forced split",
    )
    preserve_tables: bool = Field(
        default=True, description="Never split table blocks across chunks"
    )
    preserve_code_blocks: bool = Field(
        default=True, description="Never split fenced code across chunks"
    )
    tokenizer: str = Field(
        default="words",
        description=(
            "Token counter: 'words' for the ceil(words / 0.75) estimate, or a "
            "tiktoken encoding name such as 'cl100k_base'"
        ),
    )

    @field_validator("max_chunk_tokens")
    @classmethod
    def validate_max_chunk_tokens(cls, v: int) -> int:
        """Validate max_chunk_tokens is positive."""
        if v <= 0:
            raise ValueError("max_chunk_tokens must be positive")
        return v

    @field_validator("min_chunk_tokens", "overlap_tokens")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate token counts are not negative."""
        if v < 0:
            raise ValueError("token counts must not be negative")
        return v

    @field_validator("tokenizer")
    @classmethod
    def validate_tokenizer(cls, v: str) -> str:
        """Validate tokenizer name is not empty."""
        if not v.strip():
            raise ValueError("tokenizer must be non-empty")
        return v.strip()


class LLMConfig(BaseModel):
    """Embedding and chat backend selection.

    Model names left unset fall back to the provider defaults in
    ``recall.config.defaults``.
    """

    model_config = ConfigDict(extra="forbid")

    provider: ProviderEnum = Field(
        default=ProviderEnum.OLLAMA, description="Backend: ollama or gemini"
    )
    endpoint: str | None = Field(
        default=None, description="Ollama host URL (ignored for gemini)"
    )
    chat_model: str | None = Field(default=None, description="Chat model id")
    embedding_model: str | None = Field(
        default=None, description="Embedding model id"
    )
    api_key: str | None = Field(default=None, description="API key (gemini)")
    timeout: float = Field(
        default=60.0, description="Seconds before a backend request is abandoned"
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v


class StorageConfig(BaseModel):
    """Locations of the vector store file and processed artifacts."""

    model_config = ConfigDict(extra="forbid")

    data_dir: str = Field(default="data", description="Root data directory")
    store_file: str = Field(
        default="embedded_vectors.json",
        description="Vector store file name, relative to data_dir",
    )

    @field_validator("store_file")
    @classmethod
    def validate_store_file(cls, v: str) -> str:
        """Validate store_file is not empty."""
        if not v.strip():
            raise ValueError("store_file must be non-empty")
        return v

    @property
    def store_path(self) -> Path:
        """Full path of the vector store file."""
        return Path(self.data_dir) / self.store_file

    @property
    def processed_dir(self) -> Path:
        """Directory that receives structured extraction output."""
        return Path(self.data_dir) / "processed" / "static"


class RecallConfig(BaseModel):
    """Top-level configuration loaded from ``recall.yaml``."""

    model_config = ConfigDict(extra="forbid")

    llm: LLMConfig = Field(default_factory=LLMConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    source_dir: str = Field(
        default="public", description="Directory crawled by 'recall ingest'"
    )
    search_limit: int = Field(
        default=3, description="Default number of search results"
    )
    log_file: str | None = Field(
        default=None, description="Optional log file path"
    )
    use_llm_extraction: bool = Field(
        default=True,
        description="Ask the chat model for structured metadata during ingestion",
    )
    router_mode: Literal["keywords", "llm"] = Field(
        default="keywords", description="Memory routing strategy"
    )

    @field_validator("search_limit")
    @classmethod
    def validate_search_limit(cls, v: int) -> int:
        """Validate search_limit is positive."""
        if v <= 0:
            raise ValueError("search_limit must be positive")
        return v
