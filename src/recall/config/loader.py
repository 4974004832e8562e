"""Configuration loader for Recall.

Precedence, highest first:
1. ``RECALL_*`` environment variables
2. ``recall.yaml`` (with ``${VAR}`` substitution)
3. Model defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from recall.config.defaults import DEFAULT_CONFIG_FILE, ENV_OVERRIDES
from recall.config.env_loader import load_env_file, substitute_env_vars
from recall.config.validator import flatten_pydantic_errors
from recall.lib.errors import ConfigError
from recall.models.config import RecallConfig

logger = logging.getLogger(__name__)


def _set_dotted(config: dict[str, Any], dotted_path: str, value: Any) -> None:
    """Set ``value`` at a dotted path, creating intermediate mappings."""
    *parents, leaf = dotted_path.split(".")
    node = config
    for key in parents:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[leaf] = value


def _read_yaml_with_env_substitution(path: Path) -> dict[str, Any]:
    """Read a YAML file, substituting environment references first.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If YAML parsing fails
        ConfigError: If a referenced variable is unset
    """
    raw_text = path.read_text(encoding="utf-8")
    content = yaml.safe_load(substitute_env_vars(raw_text))
    return content if content else {}


class ConfigLoader:
    """Loads and validates ``recall.yaml``.

    Example:
        >>> config = ConfigLoader().load()
        >>> config.storage.store_path
        PosixPath('data/embedded_vectors.json')
    """

    def __init__(self, env: dict[str, str] | None = None) -> None:
        """Initialize the loader.

        Args:
            env: Environment mapping used for overrides. Defaults to
                ``os.environ`` at load time.
        """
        self._env = env

    def apply_env_overrides(self, data: dict[str, Any]) -> dict[str, Any]:
        """Apply ``RECALL_*`` variables on top of parsed YAML data.

        Args:
            data: Parsed configuration mapping (modified in place).

        Returns:
            The same mapping, for chaining.
        """
        env = self._env if self._env is not None else os.environ
        for env_name, dotted_path in ENV_OVERRIDES.items():
            value = env.get(env_name)
            if value:
                logger.debug(f"Overriding {dotted_path} from {env_name}")
                _set_dotted(data, dotted_path, value)
        return data

    def load(self, path: str | Path | None = None) -> RecallConfig:
        """Load configuration.

        Args:
            path: Explicit config file. When omitted, ``recall.yaml`` in the
                current directory is used if present, else defaults.

        Returns:
            Validated RecallConfig.

        Raises:
            ConfigError: If an explicit file is missing, YAML is malformed,
                a referenced variable is unset, or validation fails.
        """
        load_env_file()

        explicit = path is not None
        config_path = Path(path) if explicit else Path(DEFAULT_CONFIG_FILE)

        data: dict[str, Any] = {}
        if config_path.exists():
            try:
                data = _read_yaml_with_env_substitution(config_path)
            except OSError as e:
                raise ConfigError(
                    "config_file", f"Failed to read {config_path}: {e}"
                ) from e
            except yaml.YAMLError as e:
                raise ConfigError(
                    "yaml_parse", f"Failed to parse YAML file {config_path}: {e}"
                ) from e
            if not isinstance(data, dict):
                raise ConfigError(
                    "config_file", f"{config_path} must contain a YAML mapping"
                )
            logger.debug(f"Loaded configuration from {config_path}")
        elif explicit:
            raise ConfigError(
                "config_file",
                f"Configuration file not found at {config_path}. "
                f"Please ensure the file exists at this path.",
            )
        else:
            logger.debug("No recall.yaml found, using defaults")

        self.apply_env_overrides(data)

        try:
            return RecallConfig(**data)
        except PydanticValidationError as e:
            error_text = "\n".join(flatten_pydantic_errors(e))
            raise ConfigError(
                "config_validation",
                f"Invalid configuration in {config_path}:\n{error_text}",
            ) from e
