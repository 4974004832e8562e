"""CLI command that rebuilds the vector store from a source directory.

Implements the 'recall ingest' command.
"""

import asyncio

import click

from recall.cli.context import EXIT_STORAGE_ERROR, CLIContext, fail
from recall.lib.errors import ConfigError, StorageError
from recall.lib.ingestion import Ingestor
from recall.lib.logging_config import get_logger
from recall.lib.providers import create_completer, create_embedder
from recall.lib.vector_store import VectorStore

logger = get_logger(__name__)


@click.command()
@click.argument(
    "source_dir",
    type=click.Path(file_okay=False),
    required=False,
    default=None,
)
@click.option(
    "--no-llm-extraction",
    is_flag=True,
    help="Skip LLM metadata extraction for unstructured text",
)
@click.pass_obj
def ingest(
    cli_ctx: CLIContext, source_dir: str | None, no_llm_extraction: bool
) -> None:
    """Clear the vector store and ingest every file under SOURCE_DIR.

    SOURCE_DIR defaults to source_dir from the configuration ("public").

    Example:

        recall ingest ./public

        recall -v ingest notes/ --no-llm-extraction
    """
    try:
        config = cli_ctx.load_config()
        source = source_dir or config.source_dir

        store = VectorStore(config.storage.store_path, create_embedder(config.llm))
        ingestor = Ingestor(
            store,
            create_completer(config.llm),
            config.storage.processed_dir,
            chunking=config.chunking,
            use_llm_extraction=config.use_llm_extraction and not no_llm_extraction,
        )
        report = asyncio.run(ingestor.ingest_directory(source))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        fail("Failed to load configuration", str(e))
    except StorageError as e:
        logger.error(f"Storage error: {e}", exc_info=True)
        fail("Ingestion aborted", str(e), EXIT_STORAGE_ERROR)

    click.secho(
        f"Ingested {report.documents_added} documents from "
        f"{report.files_ingested} files into {store.storage_path}",
        fg="green",
    )
    if report.files_skipped:
        click.echo(f"Skipped {report.files_skipped} unsupported files")
    if report.failures:
        click.secho(f"{report.files_failed} files failed:", fg="yellow")
        for path, reason in report.failures:
            click.echo(f"  {path}: {reason}")
