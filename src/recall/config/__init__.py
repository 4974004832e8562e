"""Configuration loading for Recall.

Main components:
- ConfigLoader: Load and validate recall.yaml
- Environment variable substitution (${VAR} and ${VAR:-default})
- Provider defaults
"""

from recall.config.env_loader import get_env_var, load_env_file, substitute_env_vars
from recall.config.loader import ConfigLoader

__all__ = [
    "ConfigLoader",
    "substitute_env_vars",
    "get_env_var",
    "load_env_file",
]
