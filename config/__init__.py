"""
Configuration module for the file operation agent.

Exports the configuration model and loader functions.
"""

from .defaults import (
    CONFIG_FILENAME,
    DEFAULT_MODEL,
    DEFAULT_OLLAMA_BASE_URL,
    DEFAULT_WORKSPACE,
)
from .loader import (
    apply_env_overrides,
    get_config,
    load_config,
    load_config_file,
    merge_configs,
    strip_jsonc_comments,
)
from .main_config import Config

__all__ = [
    # Constants
    "CONFIG_FILENAME",
    "DEFAULT_MODEL",
    "DEFAULT_OLLAMA_BASE_URL",
    "DEFAULT_WORKSPACE",
    # Config models
    "Config",
    # Loader functions
    "load_config",
    "get_config",
    "load_config_file",
    "merge_configs",
    "apply_env_overrides",
    "strip_jsonc_comments",
]
