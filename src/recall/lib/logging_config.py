"""Logging configuration for Recall.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
attached here, once, by the CLI entry point.
"""

import logging
from pathlib import Path

ROOT_LOGGER_NAME = "recall"

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s]\t%(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Module name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """Configure the ``recall`` logger hierarchy.

    Level resolution: ``verbose`` wins over ``quiet``; verbose is DEBUG,
    quiet is WARNING, and the default is INFO. Calling this repeatedly
    replaces previously installed handlers.

    Args:
        verbose: Enable debug output.
        quiet: Only show warnings and errors on the console.
        log_file: Optional path of a file that receives every record at
            DEBUG level with timestamps.

    Returns:
        The configured ``recall`` root logger.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    logger.propagate = False
    return logger
