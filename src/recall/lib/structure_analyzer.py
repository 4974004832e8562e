"""Group parsed blocks into sections owned by their nearest preceding heading.

The grouping is deliberately flat: a level-2 heading under a level-1 heading
starts a new entry in ``StructuredDocument.sections`` rather than a nested
child. Depth is carried by each section's ``level``.
"""

import re
from dataclasses import dataclass, field

from recall.lib.document_parser import BlockType, ContentBlock

HEADING_MARKER = re.compile(r"^#+\s*")

DEFAULT_TITLE = "Document"


def strip_heading_marker(text: str) -> str:
    """Remove leading ``#`` characters and whitespace from heading text."""
    return HEADING_MARKER.sub("", text).strip()


@dataclass
class Section:
    """A heading together with the blocks that follow it.

    Attributes:
        heading: The heading block that opens this section.
        level: Heading depth (1-6).
        children: Non-heading blocks up to the next heading, in source order.
    """

    heading: ContentBlock
    level: int
    children: list[ContentBlock] = field(default_factory=list)

    @property
    def heading_text(self) -> str:
        """Heading content without its ``#`` marker."""
        return strip_heading_marker(self.heading.content)


@dataclass
class StructuredDocument:
    """A parsed document with an inferred title and flat section list.

    Attributes:
        title: First level-1 heading text, or the caller-supplied default.
        preamble: Blocks that appear before any heading.
        sections: Sections in source order.
    """

    title: str
    preamble: list[ContentBlock] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)


class StructureAnalyzer:
    """Builds a StructuredDocument from a flat block sequence."""

    @staticmethod
    def analyze(
        blocks: list[ContentBlock], default_title: str = DEFAULT_TITLE
    ) -> StructuredDocument:
        """Group blocks under headings and infer the document title.

        The first level-1 heading sets the title; later level-1 headings do
        not override it. Blocks before the first heading go to the preamble.

        Args:
            blocks: Output of ``DocumentParser.parse``.
            default_title: Title used when no level-1 heading exists.

        Returns:
            The structured document.
        """
        doc = StructuredDocument(title=default_title)
        current: Section | None = None
        title_set = False

        for block in blocks:
            if block.type == BlockType.HEADING:
                if not title_set and block.level == 1:
                    doc.title = strip_heading_marker(block.content)
                    title_set = True

                current = Section(heading=block, level=block.level or 1)
                doc.sections.append(current)
            elif current is not None:
                current.children.append(block)
            else:
                doc.preamble.append(block)

        return doc
