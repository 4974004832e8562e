"""Markdown-aware block parser.

Turns raw text into a flat, ordered sequence of typed content blocks
(headings, paragraphs, lists, tables, fenced code and image references).
The parser makes a single left-to-right pass over the lines of the input
and never backtracks. It has no error path: anything it does not recognise
becomes a paragraph.

Example:
    >>> blocks = DocumentParser.parse("# Title\\n\\nHello world.")
    >>> [(b.type.value, b.content) for b in blocks]
    [('heading', '# Title'), ('paragraph', 'Hello world.')]
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BlockType(str, Enum):
    """Kinds of content block emitted by the parser.

    Attributes:
        HEADING: Markdown ATX heading (``#`` through ``######``)
        PARAGRAPH: Run of plain, non-blank lines
        TABLE: Pipe-delimited markdown table, kept as raw text
        CODE: Fenced code block including its fences
        LIST: Bullet or numbered list with its continuation lines
        IMAGE_REF: Standalone markdown image reference
    """

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TABLE = "table"
    CODE = "code"
    LIST = "list"
    IMAGE_REF = "image_ref"


@dataclass(frozen=True)
class ContentBlock:
    """A typed, contiguous unit of parsed text.

    Attributes:
        type: The block kind.
        content: Raw text of the block, trimmed of surrounding whitespace.
        level: Heading depth (1-6) for heading blocks, otherwise None.
        metadata: Extra attributes, e.g. ``{"language": "python"}`` for code.
    """

    type: BlockType
    content: str
    level: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class DocumentParser:
    """Single-pass markdown block parser."""

    FENCE = "```"
    UNKNOWN_LANGUAGE = "unknown"

    HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*)")
    LIST_ITEM_PATTERN = re.compile(r"^(\s*)([-*+]|\d+\.)\s")
    IMAGE_PATTERN = re.compile(r"^!\[([^\]]*)\]\(([^)\s]+)(?:\s+\"[^\"]*\")?\)$")

    @classmethod
    def parse(cls, text: str) -> list[ContentBlock]:
        """Parse raw text into an ordered list of content blocks.

        Args:
            text: Raw document text. Any string is accepted.

        Returns:
            Blocks in source order. Empty input yields an empty list.
        """
        blocks: list[ContentBlock] = []
        lines = re.split(r"\r?\n", text) if text else []
        i = 0

        while i < len(lines):
            line = lines[i]
            stripped = line.strip()

            if not stripped:
                i += 1
                continue

            if stripped.startswith(cls.FENCE):
                block, i = cls._consume_code(lines, i)
            elif match := cls.HEADING_PATTERN.match(line):
                block = ContentBlock(
                    type=BlockType.HEADING,
                    content=stripped,
                    level=len(match.group(1)),
                )
                i += 1
            elif stripped.startswith("|") and stripped.endswith("|"):
                block, i = cls._consume_table(lines, i)
            elif cls.LIST_ITEM_PATTERN.match(line):
                block, i = cls._consume_list(lines, i)
            elif image := cls.IMAGE_PATTERN.match(stripped):
                block = ContentBlock(
                    type=BlockType.IMAGE_REF,
                    content=stripped,
                    metadata={"alt": image.group(1), "src": image.group(2)},
                )
                i += 1
            else:
                block, i = cls._consume_paragraph(lines, i)

            blocks.append(block)

        return blocks

    @classmethod
    def _consume_code(cls, lines: list[str], start: int) -> tuple[ContentBlock, int]:
        """Consume a fenced code block starting at ``start``.

        Everything up to and including the closing fence is kept verbatim.
        An unterminated fence runs to the end of input.

        Returns:
            The code block and the index of the first unconsumed line.
        """
        opening = lines[start]
        language = opening.strip()[len(cls.FENCE) :].strip()
        collected = [opening]
        i = start + 1

        while i < len(lines) and not lines[i].strip().startswith(cls.FENCE):
            collected.append(lines[i])
            i += 1

        if i < len(lines):
            collected.append(lines[i])
            i += 1

        block = ContentBlock(
            type=BlockType.CODE,
            content="\n".join(collected).strip(),
            metadata={"language": language or cls.UNKNOWN_LANGUAGE},
        )
        return block, i

    @classmethod
    def _consume_table(
        cls, lines: list[str], start: int
    ) -> tuple[ContentBlock, int]:
        """Consume a pipe table; rows are not interpreted cell by cell."""
        collected = [lines[start]]
        i = start + 1
        while i < len(lines) and lines[i].strip().startswith("|"):
            collected.append(lines[i])
            i += 1
        content = "\n".join(collected).strip()
        return ContentBlock(type=BlockType.TABLE, content=content), i

    @classmethod
    def _consume_list(cls, lines: list[str], start: int) -> tuple[ContentBlock, int]:
        """Consume list items plus indented, non-blank continuation lines."""
        collected = [lines[start]]
        i = start + 1
        while i < len(lines):
            line = lines[i]
            is_item = cls.LIST_ITEM_PATTERN.match(line) is not None
            is_continuation = bool(line.strip()) and line.startswith(" ")
            if not (is_item or is_continuation):
                break
            collected.append(line)
            i += 1
        content = "\n".join(collected).strip()
        return ContentBlock(type=BlockType.LIST, content=content), i

    @classmethod
    def _consume_paragraph(
        cls, lines: list[str], start: int
    ) -> tuple[ContentBlock, int]:
        """Accumulate lines until a blank line or the start of another block."""
        collected = [lines[start]]
        i = start + 1
        while i < len(lines) and not cls._ends_paragraph(lines[i]):
            collected.append(lines[i])
            i += 1
        content = "\n".join(collected).strip()
        return ContentBlock(type=BlockType.PARAGRAPH, content=content), i

    @classmethod
    def _ends_paragraph(cls, line: str) -> bool:
        stripped = line.strip()
        return (
            not stripped
            or stripped.startswith(cls.FENCE)
            or stripped.startswith("|")
            or cls.HEADING_PATTERN.match(line) is not None
            or cls.LIST_ITEM_PATTERN.match(line) is not None
            or cls.IMAGE_PATTERN.match(stripped) is not None
        )
