"""Discover source files and classify them by how they should be ingested."""

import logging
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class FileRole(str, Enum):
    """Ingestion strategy for a file."""

    PDF = "pdf"
    STRUCTURED = "structured"
    CODE = "code"
    UNSTRUCTURED = "unstructured"
    UNKNOWN = "unknown"


FILE_ROLE_EXTENSIONS: dict[FileRole, frozenset[str]] = {
    FileRole.PDF: frozenset({".pdf"}),
    FileRole.STRUCTURED: frozenset({".json", ".csv"}),
    FileRole.CODE: frozenset({".py", ".ts", ".js", ".html"}),
    FileRole.UNSTRUCTURED: frozenset({".md", ".txt", ".log"}),
}


def determine_file_role(path: str | Path) -> FileRole:
    """Classify a file by its extension (case-insensitive).

    Args:
        path: File path.

    Returns:
        The file's role; UNKNOWN for unsupported extensions.
    """
    suffix = Path(path).suffix.lower()
    for role, extensions in FILE_ROLE_EXTENSIONS.items():
        if suffix in extensions:
            return role
    return FileRole.UNKNOWN


def crawl_directory(path: str | Path) -> list[Path]:
    """List every regular file below a directory.

    Entries whose name starts with "." are skipped, including hidden
    directories. Directories that cannot be read are logged and skipped.

    Args:
        path: Root directory.

    Returns:
        File paths sorted within each directory, depth first.
    """
    root = Path(path)
    files: list[Path] = []

    try:
        entries = sorted(root.iterdir())
    except OSError as e:
        logger.warning(f"Could not read directory {root}: {e}")
        return files

    for entry in entries:
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            files.extend(crawl_directory(entry))
        elif entry.is_file():
            files.append(entry)

    return files
