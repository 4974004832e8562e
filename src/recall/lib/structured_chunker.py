"""Structure-aware chunking with token budgets and overlap.

This module turns a StructuredDocument into token-bounded chunks for
embedding. It is the last step of the parse → analyze → chunk pipeline.

Key Features:
- Chunks never span a section boundary; every chunk of a headed section
  starts with that section's heading
- Tables and fenced code are atomic and are never split
- Oversized paragraphs and lists fall back to sentence-level packing
- A trailing-word overlap is carried into the chunk that follows a forced
  split, to keep local context for retrieval
- Token counts use a word-based estimate by default, or tiktoken when an
  encoding name is configured
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import tiktoken

from recall.lib.document_parser import BlockType, ContentBlock
from recall.lib.structure_analyzer import StructuredDocument, strip_heading_marker
from recall.models.config import ChunkingConfig

logger = logging.getLogger(__name__)

# One token is roughly 0.75 words
WORDS_PER_TOKEN = 0.75
WORD_TOKENIZER = "words"

SENTENCE_TERMINATORS = frozenset(".?!")


def estimate_tokens(text: str) -> int:
    """Estimate the token count of text as ``ceil(words / 0.75)``.

    Args:
        text: Text to measure.

    Returns:
        Estimated token count; 0 for blank text.
    """
    return math.ceil(len(text.split()) / WORDS_PER_TOKEN)


def overlap_word_count(overlap_tokens: int) -> int:
    """Number of trailing words carried over for an overlap of N tokens."""
    return math.ceil(overlap_tokens * WORDS_PER_TOKEN)


def split_sentences(text: str) -> list[str]:
    """Split text after ``.``, ``?`` or ``!`` when followed by whitespace.

    The scan runs forward once and records split points; the whitespace run
    after each terminator is dropped. Text with no split point comes back
    as a single sentence.

    Args:
        text: Text to split.

    Returns:
        Non-empty sentences in order.

    Example:
        >>> split_sentences("One. Two?  Three!")
        ['One.', 'Two?', 'Three!']
    """
    sentences: list[str] = []
    start = 0
    i = 0
    length = len(text)

    while i < length:
        if (
            text[i] in SENTENCE_TERMINATORS
            and i + 1 < length
            and text[i + 1].isspace()
        ):
            sentences.append(text[start : i + 1])
            i += 1
            while i < length and text[i].isspace():
                i += 1
            start = i
            continue
        i += 1

    if start < length:
        sentences.append(text[start:])

    return [s for s in sentences if s.strip()]


@dataclass(frozen=True)
class ChunkMetadata:
    """Provenance attached to every chunk.

    Attributes:
        section_heading: Heading text of the owning section, None for preamble.
        block_types: Sorted names of the block types present in the chunk.
        source_file: Name of the source document, if known.
    """

    section_heading: str | None = None
    block_types: tuple[str, ...] = ()
    source_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the metadata mapping stored alongside embeddings.

        Unset optional fields are omitted.

        Example:
            >>> ChunkMetadata("Sub", ("heading", "paragraph"), "a.md").to_dict()
            {'section_heading': 'Sub', 'block_types': ['heading', 'paragraph'], \
'source_file': 'a.md'}
        """
        result: dict[str, Any] = {}
        if self.section_heading is not None:
            result["section_heading"] = self.section_heading
        result["block_types"] = list(self.block_types)
        if self.source_file is not None:
            result["source_file"] = self.source_file
        return result


@dataclass(frozen=True)
class Chunk:
    """A token-budgeted span of text handed to the embedding layer.

    Attributes:
        content: Chunk text, trimmed.
        index: Zero-based position within one chunking run.
        metadata: Section, block-type and source provenance.
    """

    content: str
    index: int
    metadata: ChunkMetadata


@dataclass
class _ChunkState:
    """Mutable accumulator for the chunk currently being built.

    Attributes:
        content: Text collected so far, including the seed.
        tokens: Running token count, including the seed.
        block_types: Block type names seen in this chunk.
        has_body: Whether anything beyond the heading/overlap seed was added.
    """

    content: str
    tokens: int
    block_types: set[str] = field(default_factory=set)
    has_body: bool = False

    def append(self, text: str, tokens: int, block_type: BlockType) -> None:
        self.content += text
        self.tokens += tokens
        self.block_types.add(block_type.value)
        self.has_body = True


class StructureAwareChunker:
    """Token-budget-aware chunker that respects document structure.

    Attributes:
        config: Active chunking configuration.

    Example:
        >>> chunker = StructureAwareChunker(ChunkingConfig(max_chunk_tokens=256))
        >>> chunks = chunker.chunk(structured_doc, "notes.md")
        >>> chunks[0].metadata.section_heading
        'Introduction'
    """

    def __init__(self, config: ChunkingConfig | None = None) -> None:
        """Initialize the chunker.

        Args:
            config: Chunking configuration. Defaults to ``ChunkingConfig()``.

        Raises:
            ValueError: If the configured tiktoken encoding does not exist.
        """
        self.config = config or ChunkingConfig()
        self._count_tokens = self._initialize_token_counter(self.config.tokenizer)

    @staticmethod
    def _initialize_token_counter(tokenizer: str) -> Callable[[str], int]:
        """Resolve the token counting function for a tokenizer name."""
        if tokenizer == WORD_TOKENIZER:
            return estimate_tokens

        encoder = tiktoken.get_encoding(tokenizer)

        def count(text: str) -> int:
            if not text.strip():
                return 0
            return len(encoder.encode(text))

        return count

    def count_tokens(self, text: str) -> int:
        """Count tokens in text with the configured tokenizer."""
        return self._count_tokens(text)

    def chunk(
        self, doc: StructuredDocument, source_file: str | None = None
    ) -> list[Chunk]:
        """Split a structured document into token-bounded chunks.

        The preamble is chunked first, then each section independently.
        Indices restart at 0 on every call.

        Args:
            doc: Output of ``StructureAnalyzer.analyze``.
            source_file: Source name recorded in chunk metadata.

        Returns:
            Chunks in document order.
        """
        chunks: list[Chunk] = []

        if doc.preamble:
            self._process_group(doc.preamble, None, source_file, chunks)

        for section in doc.sections:
            self._process_group(section.children, section.heading, source_file, chunks)

        undersized = sum(
            1
            for c in chunks
            if self.count_tokens(c.content) < self.config.min_chunk_tokens
        )
        logger.debug(
            f"Chunked {source_file or 'document'}: {len(chunks)} chunks "
            f"({undersized} below {self.config.min_chunk_tokens} tokens)"
        )
        return chunks

    def _is_atomic(self, block: ContentBlock) -> bool:
        """Check whether a block must be kept whole."""
        if block.type == BlockType.TABLE:
            return self.config.preserve_tables
        if block.type == BlockType.CODE:
            return self.config.preserve_code_blocks
        return False

    def _new_state(
        self, heading: ContentBlock | None, overlap: str = ""
    ) -> _ChunkState:
        """Start a chunk seeded with the heading and optional overlap text."""
        content = f"{heading.content}\n\n" if heading else ""
        if overlap:
            content += f"{overlap} "
        state = _ChunkState(content=content, tokens=self.count_tokens(content))
        if heading:
            state.block_types.add(BlockType.HEADING.value)
        return state

    def _reseed_after_split(
        self, heading: ContentBlock | None, previous: str, next_tokens: int
    ) -> _ChunkState:
        """Start the chunk that follows a forced split.

        Up to ``overlap_word_count(overlap_tokens)`` trailing words of the
        previous chunk are carried over. Leading overlap words are dropped
        until the seed leaves room for ``next_tokens``, down to no overlap.
        """
        count = overlap_word_count(self.config.overlap_tokens)
        words = previous.split()[-count:] if count > 0 else []

        state = self._new_state(heading, " ".join(words))
        while words and state.tokens + next_tokens > self.config.max_chunk_tokens:
            words = words[1:]
            state = self._new_state(heading, " ".join(words))
        return state

    def _process_group(
        self,
        blocks: list[ContentBlock],
        heading: ContentBlock | None,
        source_file: str | None,
        chunks: list[Chunk],
    ) -> None:
        """Chunk one preamble or section, appending results to ``chunks``."""
        max_tokens = self.config.max_chunk_tokens
        section_heading = strip_heading_marker(heading.content) if heading else None
        state = self._new_state(heading)
        group_start = len(chunks)

        def flush() -> None:
            self._finalize(state, section_heading, source_file, chunks)

        for block in blocks:
            block_tokens = self.count_tokens(block.content)

            if self._is_atomic(block):
                if state.tokens + block_tokens > max_tokens and state.has_body:
                    flush()
                    state = self._new_state(heading)

                state.append(f"{block.content}\n\n", block_tokens, block.type)

                if state.tokens >= max_tokens:
                    flush()
                    state = self._new_state(heading)
                continue

            if state.tokens + block_tokens <= max_tokens:
                state.append(f"{block.content}\n\n", block_tokens, block.type)
                continue

            for sentence in split_sentences(block.content):
                sentence_tokens = self.count_tokens(sentence)

                if state.tokens + sentence_tokens > max_tokens and state.has_body:
                    flush()
                    previous = chunks[-1].content if len(chunks) > group_start else ""
                    state = self._reseed_after_split(heading, previous, sentence_tokens)

                state.append(f"{sentence} ", sentence_tokens, block.type)
            state.content += "\n\n"

        # A chunk holding only the heading is never emitted
        if state.has_body:
            flush()

    @staticmethod
    def _finalize(
        state: _ChunkState,
        section_heading: str | None,
        source_file: str | None,
        chunks: list[Chunk],
    ) -> None:
        """Emit the accumulated chunk unless it is blank."""
        content = state.content.strip()
        if not content:
            return

        chunks.append(
            Chunk(
                content=content,
                index=len(chunks),
                metadata=ChunkMetadata(
                    section_heading=section_heading,
                    block_types=tuple(sorted(state.block_types)),
                    source_file=source_file,
                ),
            )
        )
