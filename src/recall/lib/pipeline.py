"""Parse → analyze → chunk in one call."""

import logging
from dataclasses import dataclass, field

from recall.lib.document_parser import DocumentParser
from recall.lib.structure_analyzer import StructureAnalyzer, StructuredDocument
from recall.lib.structured_chunker import Chunk, StructureAwareChunker
from recall.models.config import ChunkingConfig

logger = logging.getLogger(__name__)


@dataclass
class ProcessedDocument:
    """Structured view of a document together with its chunks."""

    document: StructuredDocument
    chunks: list[Chunk] = field(default_factory=list)


def process_document(
    raw_text: str, filename: str, config: ChunkingConfig | None = None
) -> ProcessedDocument:
    """Run the full structuring pipeline over raw text.

    The filename doubles as the default title and as the chunks' source.

    Args:
        raw_text: Markdown or plain text.
        filename: Name of the source document.
        config: Chunking configuration; defaults apply when omitted.

    Returns:
        The structured document and its chunks.
    """
    blocks = DocumentParser.parse(raw_text)
    document = StructureAnalyzer.analyze(blocks, default_title=filename)
    chunks = StructureAwareChunker(config).chunk(document, source_file=filename)

    logger.debug(
        f"Processed {filename}: {len(blocks)} blocks, "
        f"{len(document.sections)} sections, {len(chunks)} chunks"
    )
    return ProcessedDocument(document=document, chunks=chunks)
