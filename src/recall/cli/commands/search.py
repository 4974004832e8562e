"""CLI command for semantic search over the vector store.

Implements the 'recall search' command.
"""

import asyncio
import json

import click

from recall.cli.context import EXIT_STORAGE_ERROR, CLIContext, fail
from recall.lib.errors import ConfigError, ProviderError, StorageError
from recall.lib.logging_config import get_logger
from recall.lib.providers import create_embedder
from recall.lib.vector_store import SearchResult, VectorStore

logger = get_logger(__name__)

PREVIEW_CHARS = 200


def _format_result(rank: int, result: SearchResult) -> str:
    """Render one result as a ranked, single-paragraph preview."""
    source = result.document.metadata.get("source", "unknown")
    preview = " ".join(result.document.content.split())
    if len(preview) > PREVIEW_CHARS:
        preview = preview[: PREVIEW_CHARS - 3] + "..."
    return f"{rank}. [{result.score:.4f}] {source}\n   {preview}"


@click.command()
@click.argument("query")
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Number of results (default: search_limit from config)",
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_obj
def search(
    cli_ctx: CLIContext, query: str, limit: int | None, as_json: bool
) -> None:
    """Search ingested documents by semantic similarity to QUERY.

    Example:

        recall search "which projects used Python?" --limit 5
    """
    try:
        config = cli_ctx.load_config()
        store = VectorStore(config.storage.store_path, create_embedder(config.llm))
        store.load()

        limit = limit or config.search_limit
        logger.debug(
            f"Searching {len(store)} documents: query={query!r}, limit={limit}"
        )
        results = asyncio.run(store.search(query, limit))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        fail("Failed to load configuration", str(e))
    except StorageError as e:
        logger.error(f"Storage error: {e}", exc_info=True)
        fail("Failed to read the vector store", str(e), EXIT_STORAGE_ERROR)
    except ProviderError as e:
        logger.error(f"Provider error: {e}", exc_info=True)
        fail("Search failed", str(e))

    if as_json:
        click.echo(json.dumps([r.model_dump(mode="json") for r in results], indent=2))
        return

    if not results:
        click.secho("No documents found. Run 'recall ingest' first.", fg="yellow")
        return

    for rank, result in enumerate(results, start=1):
        click.echo(_format_result(rank, result))
