"""JSON-persisted vector store with brute-force cosine search.

Every stored Document keeps its text, free-form metadata and embedding. The
whole corpus is rewritten on each save; search scores every document, which
is fine for a personal corpus of a few thousand chunks.

Persisted format is a JSON array of ``{id, content, metadata, embedding}``
objects, with no schema version and no compression.
"""

import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from recall.lib.errors import EmbeddingError, ProviderError, StorageError
from recall.lib.providers.base import Embedder

logger = logging.getLogger(__name__)

# Score given to documents that cannot be compared with the query
NO_MATCH_SCORE = -1.0

DEFAULT_SEARCH_LIMIT = 3


class Document(BaseModel):
    """A stored unit of retrievable text.

    Attributes:
        id: Unique identifier (uuid4 string) assigned by the store.
        content: Text that was embedded.
        metadata: Provenance such as source, type and chunk metadata.
        embedding: Vector for ``content``; None for legacy records.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    embedding: list[float] | None = None


class SearchResult(BaseModel):
    """A document paired with its similarity to the query."""

    document: Document
    score: float


_DOCUMENT_LIST = TypeAdapter(list[Document])


def cosine_similarity(
    vec_a: list[float] | None, vec_b: list[float] | None
) -> float | None:
    """Compute cosine similarity between two vectors.

    Args:
        vec_a: First embedding vector.
        vec_b: Second embedding vector.

    Returns:
        Similarity in [-1.0, 1.0], or None when either vector is missing or
        empty, the dimensions differ, or either vector has zero norm.
    """
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return None

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b, strict=True))
    norm_a = math.sqrt(sum(a * a for a in vec_a))
    norm_b = math.sqrt(sum(b * b for b in vec_b))

    if norm_a == 0.0 or norm_b == 0.0:
        return None

    return dot_product / (norm_a * norm_b)


class VectorStore:
    """Persistent corpus of embedded documents.

    The store owns its documents; callers receive Document models and
    ranked SearchResults. Embeddings come from the injected embedder, so the
    store never picks a backend itself.

    Attributes:
        storage_path: JSON file the corpus is persisted to.

    Example:
        >>> store = VectorStore(Path("data/embedded_vectors.json"), embedder)
        >>> store.load()
        >>> await store.add_document("Ran 10km in 50 minutes", {"source": "log"})
        >>> results = await store.search("running", limit=3)
    """

    def __init__(self, storage_path: str | Path, embedder: Embedder) -> None:
        """Initialize an empty store bound to a file and an embedder.

        Nothing is read from disk until ``load()`` is called.

        Args:
            storage_path: Path of the JSON store file.
            embedder: Provider used for document and query embeddings.
        """
        self.storage_path = Path(storage_path)
        self._embedder = embedder
        self._documents: list[Document] = []

    @property
    def documents(self) -> tuple[Document, ...]:
        """Read-only view of stored documents in insertion order."""
        return tuple(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    async def _embed(self, text: str) -> list[float]:
        """Embed text, normalizing backend failures to EmbeddingError."""
        try:
            embedding = await self._embedder.embed(text)
        except EmbeddingError:
            raise
        except ProviderError as e:
            raise EmbeddingError(e.provider, e.message) from e
        except Exception as e:
            raise EmbeddingError(type(self._embedder).__name__, str(e)) from e

        if not embedding:
            raise EmbeddingError(
                type(self._embedder).__name__, "embedder returned an empty vector"
            )
        return list(embedding)

    async def add_document(
        self, content: str, metadata: dict[str, Any] | None = None
    ) -> Document:
        """Embed, store and persist a document.

        Args:
            content: Text to embed and store.
            metadata: Optional provenance stored alongside the text.

        Returns:
            The stored Document, including its id and embedding.

        Raises:
            EmbeddingError: If embedding fails. Nothing is stored.
            StorageError: If persisting fails. The in-memory append is
                rolled back.
        """
        embedding = await self._embed(content)
        document = Document(
            content=content, metadata=dict(metadata or {}), embedding=embedding
        )

        self._documents.append(document)
        try:
            self.save()
        except StorageError:
            self._documents.pop()
            raise

        logger.debug(f"Stored document {document.id} ({len(content)} chars)")
        return document

    async def search(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[SearchResult]:
        """Rank stored documents by cosine similarity to the query.

        Documents without a comparable embedding score ``NO_MATCH_SCORE``.
        Equal scores keep insertion order.

        Args:
            query: Query text.
            limit: Maximum number of results.

        Returns:
            At most ``limit`` results, highest score first. Empty when the
            store is empty or ``limit <= 0``; the embedder is not called then.

        Raises:
            EmbeddingError: If the query cannot be embedded.
        """
        if not self._documents or limit <= 0:
            return []

        query_embedding = await self._embed(query)

        results = []
        for document in self._documents:
            score = cosine_similarity(query_embedding, document.embedding)
            results.append(
                SearchResult(
                    document=document,
                    score=NO_MATCH_SCORE if score is None else score,
                )
            )

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:limit]

    def save(self) -> None:
        """Write the whole corpus to ``storage_path``.

        The file is written to a temporary sibling and then replaced, so a
        failed write leaves the previous file intact.

        Raises:
            StorageError: If the directory or file cannot be written.
        """
        path = self.storage_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = _DOCUMENT_LIST.dump_json(self._documents, indent=2)

            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                os.replace(tmp_name, path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Failed to save vector store to {path}: {e}")
            raise StorageError(str(path), f"failed to save: {e}") from e

    def load(self) -> None:
        """Replace the in-memory corpus with the contents of ``storage_path``.

        A missing file is not an error and yields an empty corpus.

        Raises:
            StorageError: If the file exists but cannot be read or parsed.
        """
        path = self.storage_path
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.info(f"No vector store at {path}, starting empty")
            self._documents = []
            return
        except OSError as e:
            raise StorageError(str(path), f"failed to read: {e}") from e

        try:
            documents = _DOCUMENT_LIST.validate_json(raw)
        except ValidationError as e:
            raise StorageError(str(path), f"invalid store file: {e}") from e

        self._documents = documents
        logger.info(f"Loaded {len(documents)} documents from {path}")

    def clear(self) -> None:
        """Remove every document and persist the empty corpus.

        Raises:
            StorageError: If the empty corpus cannot be written.
        """
        self._documents = []
        self.save()
        logger.info(f"Cleared vector store at {self.storage_path}")
