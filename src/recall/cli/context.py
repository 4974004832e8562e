"""Shared state and helpers for CLI commands."""

import sys
from dataclasses import dataclass
from typing import NoReturn

import click

from recall.config.loader import ConfigLoader
from recall.lib.logging_config import setup_logging
from recall.models.config import RecallConfig

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_STORAGE_ERROR = 2


@dataclass
class CLIContext:
    """Options given to the ``recall`` group, shared by every subcommand."""

    config_path: str | None = None
    verbose: bool = False
    quiet: bool = False

    def load_config(self) -> RecallConfig:
        """Load configuration and configure logging from it.

        Logging is configured from the flags first so that loading itself is
        logged, then again to attach the configured log file.

        Raises:
            ConfigError: If configuration cannot be loaded.
        """
        setup_logging(verbose=self.verbose, quiet=self.quiet)
        config = ConfigLoader().load(self.config_path)
        if config.log_file:
            setup_logging(
                verbose=self.verbose, quiet=self.quiet, log_file=config.log_file
            )
        return config


def fail(message: str, detail: str, exit_code: int = EXIT_ERROR) -> NoReturn:
    """Print an error in red and exit."""
    click.secho(f"Error: {message}", fg="red", err=True)
    click.echo(f"  {detail}", err=True)
    sys.exit(exit_code)
