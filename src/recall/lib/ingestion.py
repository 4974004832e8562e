"""Rebuild the vector store from a directory of personal documents.

Each file is dispatched by its role:

- ``.json`` profile files: one document per known fact list
- PDFs (resumes): text via pdfminer.six, parsed into records by the chat
  model; structure-aware chunks when parsing fails
- code, notes and other text: an optional LLM metadata document, then
  structure-aware chunks

Failures are isolated per file. A storage failure aborts the run, since
nothing further could be persisted.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pdfminer.high_level import extract_text

from recall.lib.directory_crawler import FileRole, crawl_directory, determine_file_role
from recall.lib.errors import IngestionError, ProviderError, StorageError
from recall.lib.pipeline import process_document
from recall.lib.providers.base import Completer
from recall.lib.resume_parser import ResumeData, ResumeParser
from recall.lib.unstructured_converter import (
    UnstructuredConverter,
    format_metadata_document,
)
from recall.lib.vector_store import VectorStore
from recall.models.config import ChunkingConfig

logger = logging.getLogger(__name__)

# Keys of a profile JSON file that are ingested as lists of facts
PROFILE_LIST_KEYS: dict[str, str] = {
    "skills": "Skills",
    "interests": "Interests",
    "goals": "Goals",
}


@dataclass
class IngestionReport:
    """Outcome of one ingestion run.

    Attributes:
        files_seen: Files found by the crawler.
        files_ingested: Files that produced at least one attempt to store.
        files_skipped: Files with an unsupported role.
        documents_added: Documents written to the store.
        failures: ``(path, reason)`` for every file that failed.
    """

    files_seen: int = 0
    files_ingested: int = 0
    files_skipped: int = 0
    documents_added: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def files_failed(self) -> int:
        """Number of files that failed."""
        return len(self.failures)


def extract_pdf_text(path: Path) -> str:
    """Extract plain text from a PDF.

    Raises:
        IngestionError: If the PDF cannot be parsed.
    """
    try:
        return extract_text(str(path))
    except OSError:
        raise
    except Exception as e:
        raise IngestionError(str(path), f"PDF text extraction failed: {e}") from e


def _join(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


class Ingestor:
    """Populates a VectorStore from source files.

    Example:
        >>> ingestor = Ingestor(store, completer, Path("data/processed/static"))
        >>> report = await ingestor.ingest_directory(Path("public"))
        >>> report.documents_added
        42
    """

    def __init__(
        self,
        store: VectorStore,
        completer: Completer,
        processed_dir: str | Path,
        chunking: ChunkingConfig | None = None,
        use_llm_extraction: bool = True,
    ) -> None:
        """Initialize the ingestor.

        Args:
            store: Store to rebuild.
            completer: Chat backend for resume parsing and metadata extraction.
            processed_dir: Directory receiving extracted JSON artifacts.
            chunking: Chunking configuration for structure-aware chunks.
            use_llm_extraction: Ask the chat model for metadata of
                unstructured text files.
        """
        self.store = store
        self.processed_dir = Path(processed_dir)
        self.chunking = chunking or ChunkingConfig()
        self.use_llm_extraction = use_llm_extraction
        self._converter = UnstructuredConverter(completer)
        self._resume_parser = ResumeParser(completer)

    async def ingest_directory(self, source_dir: str | Path) -> IngestionReport:
        """Clear the store and ingest every supported file below source_dir.

        Args:
            source_dir: Directory to crawl.

        Returns:
            Counts of processed, skipped and failed files.

        Raises:
            StorageError: If the store cannot be written.
        """
        report = IngestionReport()
        source = Path(source_dir)

        logger.info("Clearing existing vector store...")
        self.store.clear()

        if not source.is_dir():
            logger.warning(f"Source directory {source} does not exist or is empty")
            return report

        files = crawl_directory(source)
        report.files_seen = len(files)
        logger.info(f"Ingestion started: {len(files)} files in {source}")

        for path in files:
            role = determine_file_role(path)
            if role == FileRole.UNKNOWN:
                logger.warning(f"Skipping unsupported file format: {path}")
                report.files_skipped += 1
                continue

            try:
                added = await self.ingest_file(path, role)
            except StorageError:
                raise
            except (
                ProviderError,
                IngestionError,
                OSError,
                UnicodeDecodeError,
                ValueError,
            ) as e:
                logger.error(f"Error ingesting {path}: {e}")
                report.failures.append((str(path), str(e)))
                continue

            report.files_ingested += 1
            report.documents_added += added

        logger.info(
            f"Ingestion complete: {report.documents_added} documents from "
            f"{report.files_ingested} files ({report.files_failed} failed, "
            f"{report.files_skipped} skipped)"
        )
        return report

    async def ingest_file(self, path: Path, role: FileRole | None = None) -> int:
        """Ingest one file according to its role.

        Args:
            path: File to ingest.
            role: Role override; determined from the extension when omitted.

        Returns:
            Number of documents added.

        Raises:
            IngestionError: If the file cannot be interpreted.
            ProviderError: If embedding fails.
            StorageError: If the store cannot be written.
        """
        role = role or determine_file_role(path)

        if role == FileRole.PDF:
            return await self._ingest_pdf(path)
        if role == FileRole.STRUCTURED and path.suffix.lower() == ".json":
            return await self._ingest_json(path)
        if role in (FileRole.CODE, FileRole.UNSTRUCTURED, FileRole.STRUCTURED):
            return await self._ingest_text(path, role)

        raise IngestionError(str(path), f"unsupported file role '{role.value}'")

    def _write_artifact(self, name: str, data: Any) -> Path:
        """Persist an extracted JSON artifact under processed_dir."""
        target = self.processed_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return target

    async def _ingest_json(self, path: Path) -> int:
        filename = path.name
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise IngestionError(str(path), f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise IngestionError(str(path), "expected a JSON object")

        added = 0
        if data.get("profile"):
            await self.store.add_document(
                f"Profile: {json.dumps(data['profile'])}",
                {"source": filename, "type": "profile"},
            )
            added += 1

        for key, label in PROFILE_LIST_KEYS.items():
            if data.get(key):
                await self.store.add_document(
                    f"{label}: {_join(data[key])}",
                    {"source": filename, "type": key},
                )
                added += 1

        if added == 0:
            logger.warning(f"No profile facts found in {filename}")

        self._write_artifact(filename, data)
        logger.info(f"Successfully ingested {filename}")
        return added

    async def _ingest_pdf(self, path: Path) -> int:
        filename = path.name
        text = await asyncio.to_thread(extract_pdf_text, path)

        resume = await self._resume_parser.parse(text)
        if resume is None:
            logger.warning(
                f"LLM parsing failed for {filename}, falling back to "
                "structure-aware chunking."
            )
            added = await self._store_chunks(
                text, filename, {"source": filename, "fallback": True}
            )
            logger.info(
                f"Ingested {filename} via structure-aware fallback ({added} chunks)"
            )
            return added

        self._write_artifact(
            f"{path.stem}.json", resume.model_dump(mode="json")
        )
        added = await self._store_resume(resume, filename)
        logger.info(f"Successfully ingested {filename}")
        return added

    async def _store_resume(self, resume: ResumeData, filename: str) -> int:
        added = 0

        for exp in resume.experience:
            details = "\n".join(exp.details)
            await self.store.add_document(
                f"Experience at {exp.company} as {exp.role} ({exp.duration}):\n"
                f"{details}",
                {"source": filename, "type": "experience", "company": exp.company},
            )
            await self.store.add_document(
                f"Work History: Employed at {exp.company} as {exp.role} "
                f"since {exp.start}.",
                {
                    "source": filename,
                    "type": "experience_summary",
                    "company": exp.company,
                },
            )
            added += 2

        for project in resume.projects:
            await self.store.add_document(
                f"Project: {project.name}\n"
                f"Tech Stack: {', '.join(project.technologies)}\n"
                f"Description: {project.description}",
                {"source": filename, "type": "project", "name": project.name},
            )
            added += 1

        for education in resume.education:
            await self.store.add_document(
                f"Education: {json.dumps(education)}",
                {"source": filename, "type": "education"},
            )
            added += 1

        for skills in resume.skills:
            await self.store.add_document(
                f"Resume Skills ({skills.category}): {', '.join(skills.items)}",
                {"source": filename, "type": "skills"},
            )
            added += 1

        return added

    async def _ingest_text(self, path: Path, role: FileRole) -> int:
        filename = path.name
        content = path.read_text(encoding="utf-8")
        added = 0

        if role == FileRole.UNSTRUCTURED and self.use_llm_extraction:
            data = await self._converter.extract_structured_data(content, filename)
            if data is not None:
                target = self._write_artifact(f"{filename}.json", data)
                logger.info(f"Saved extracted structure for {filename} to {target}")
                await self.store.add_document(
                    format_metadata_document(filename, data),
                    {"source": filename, "type": "metadata"},
                )
                added += 1

        doc_type = "code" if role == FileRole.CODE else "document"
        chunks_added = await self._store_chunks(
            content,
            filename,
            {"source": filename, "type": doc_type, "fallback": False},
        )
        logger.info(
            f"Ingested {filename} via structure-aware chunking "
            f"({chunks_added} chunks)"
        )
        return added + chunks_added

    async def _store_chunks(
        self, text: str, filename: str, base_metadata: dict[str, Any]
    ) -> int:
        """Chunk text and store each non-blank chunk with merged metadata."""
        processed = process_document(text, filename, self.chunking)
        added = 0
        for chunk in processed.chunks:
            if not chunk.content.strip():
                continue
            await self.store.add_document(
                chunk.content, {**base_metadata, **chunk.metadata.to_dict()}
            )
            added += 1
        return added
