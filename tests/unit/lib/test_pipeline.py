"""End-to-end tests for process_document()."""

from recall.lib.pipeline import ProcessedDocument, process_document
from recall.models.config import ChunkingConfig


class TestProcessDocument:
    """Tests for the parse → analyze → chunk pipeline."""

    TEXT = "# Title\n\nHello world.\n\n## Sub\n\nMore text here."

    def test_title_and_sections(self) -> None:
        """Test that the H1 sets the title and every heading opens a section."""
        result = process_document(self.TEXT, "notes.md")

        assert isinstance(result, ProcessedDocument)
        assert result.document.title == "Title"
        assert [(s.heading_text, s.level) for s in result.document.sections] == [
            ("Title", 1),
            ("Sub", 2),
        ]

    def test_sub_section_chunk(self) -> None:
        """Test that the level-2 section gets its own chunk."""
        result = process_document(self.TEXT, "notes.md")

        sub_chunks = [c for c in result.chunks if c.metadata.section_heading == "Sub"]
        assert len(sub_chunks) == 1
        assert sub_chunks[0].content == "## Sub\n\nMore text here."
        assert sub_chunks[0].metadata.source_file == "notes.md"

    def test_filename_is_default_title(self) -> None:
        """Test that documents without an H1 are titled by filename."""
        result = process_document("plain text only", "log.txt")
        assert result.document.title == "log.txt"
        assert result.chunks[0].metadata.source_file == "log.txt"

    def test_custom_config_applied(self) -> None:
        """Test that the chunking config reaches the chunker."""
        text = "# T\n\n" + " ".join(f"Sentence number {i}." for i in range(30))
        small = process_document(text, "a.md", ChunkingConfig(max_chunk_tokens=20))
        large = process_document(text, "a.md")
        assert len(small.chunks) > len(large.chunks) == 1

    def test_empty_text(self) -> None:
        """Test that empty input produces an empty document."""
        result = process_document("", "empty.md")
        assert result.document.sections == []
        assert result.chunks == []
