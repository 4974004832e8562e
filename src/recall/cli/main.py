"""Entry point for the ``recall`` command."""

import click

from recall import __version__
from recall.cli.commands.ask import ask
from recall.cli.commands.ingest import ingest
from recall.cli.commands.search import search
from recall.cli.context import CLIContext


@click.group()
@click.version_option(version=__version__, prog_name="recall")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to recall.yaml (default: ./recall.yaml if present)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors")
@click.pass_context
def main(
    ctx: click.Context, config_path: str | None, verbose: bool, quiet: bool
) -> None:
    """Recall: ingest personal documents and search them by meaning."""
    ctx.obj = CLIContext(config_path=config_path, verbose=verbose, quiet=quiet)


main.add_command(ingest)
main.add_command(search)
main.add_command(ask)


if __name__ == "__main__":
    main()
