"""CLI command that answers a question from ingested documents.

Implements the 'recall ask' command.
"""

import asyncio

import click

from recall.cli.context import EXIT_STORAGE_ERROR, CLIContext, fail
from recall.lib.errors import ConfigError, ProviderError, StorageError
from recall.lib.logging_config import get_logger
from recall.lib.memory_router import MemoryRouter
from recall.lib.providers import create_completer, create_embedder
from recall.lib.responder import Responder
from recall.lib.vector_store import VectorStore

logger = get_logger(__name__)


@click.command()
@click.argument("question")
@click.option(
    "--show-context", is_flag=True, help="Print the retrieved documents as well"
)
@click.pass_obj
def ask(cli_ctx: CLIContext, question: str, show_context: bool) -> None:
    """Answer QUESTION using the most relevant ingested documents.

    Example:

        recall ask "Where did I work in 2021?"
    """
    try:
        config = cli_ctx.load_config()
        completer = create_completer(config.llm)
        store = VectorStore(config.storage.store_path, create_embedder(config.llm))
        store.load()

        router = MemoryRouter(completer, use_llm=config.router_mode == "llm")
        answer = asyncio.run(Responder(store, completer, router).answer(question))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        fail("Failed to load configuration", str(e))
    except StorageError as e:
        logger.error(f"Storage error: {e}", exc_info=True)
        fail("Failed to read the vector store", str(e), EXIT_STORAGE_ERROR)
    except ProviderError as e:
        logger.error(f"Provider error: {e}", exc_info=True)
        fail("Failed to answer", str(e))

    if show_context:
        click.secho(f"[{answer.memory.value}]", fg="cyan")
        for result in answer.context:
            source = result.document.metadata.get("source", "unknown")
            click.secho(f"  {result.score:.4f} {source}", fg="cyan")
        click.echo()

    click.echo(answer.response.content)
