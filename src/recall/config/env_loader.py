"""Environment handling: .env loading and ``${VAR}`` substitution."""

import logging
import os
import re
from pathlib import Path

from dotenv import load_dotenv

from recall.lib.errors import ConfigError

logger = logging.getLogger(__name__)

# ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def load_env_file(path: str | Path | None = None) -> bool:
    """Load variables from a .env file without overriding the environment.

    Args:
        path: Explicit .env path. When omitted, python-dotenv searches from
            the current directory upward.

    Returns:
        True if a file was found and loaded.
    """
    loaded = load_dotenv(dotenv_path=path, override=False)
    if loaded:
        logger.debug(f"Loaded environment from {path or '.env'}")
    return loaded


def get_env_var(name: str, default: str | None = None) -> str | None:
    """Read an environment variable, treating empty values as unset."""
    value = os.environ.get(name)
    return value if value else default


def substitute_env_vars(text: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` references in text.

    Args:
        text: Raw text, typically a YAML document.

    Returns:
        Text with every reference replaced.

    Raises:
        ConfigError: If a referenced variable is unset and has no default.

    Example:
        >>> os.environ["HOST"] = "localhost"
        >>> substitute_env_vars("url: http://${HOST}:${PORT:-11434}")
        'url: http://localhost:11434'
    """

    def replace(match: re.Match[str]) -> str:
        name, default = match.group(1), match.group(2)
        value = os.environ.get(name)
        if value is not None:
            return value
        if default is not None:
            return default
        raise ConfigError(
            name,
            f"Environment variable '{name}' not found. "
            f"Please set it or provide a default with ${{{name}:-value}}.",
        )

    return ENV_VAR_PATTERN.sub(replace, text)
