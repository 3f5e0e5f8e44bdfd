"""Configuration loading utilities."""

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from .defaults import (
    CONFIG_DIRNAME,
    CONFIG_FILENAME,
    MODEL_ENV,
    OLLAMA_BASE_URL_ENV,
    WORKSPACE_ROOT_ENV,
)
from .main_config import Config

logger = logging.getLogger(__name__)

# Strings are matched first so that "//" inside a value (URLs) survives.
_JSONC_TOKEN = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)

ENV_OVERRIDES = {
    OLLAMA_BASE_URL_ENV: "ollama_base_url",
    WORKSPACE_ROOT_ENV: "workspace_root",
    MODEL_ENV: "default_model",
}


def strip_jsonc_comments(content: str) -> str:
    """
    Strip comments from JSONC content to convert to valid JSON.

    Handles:
    - Single-line comments: // comment
    - Multi-line comments: /* comment */

    Comment markers inside string values are left alone.

    Args:
        content: JSONC content string

    Returns:
        JSON string with comments removed
    """
    return _JSONC_TOKEN.sub(lambda m: m.group(1) or "", content)


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Load a config file from the given path.

    Supports both .json and .jsonc files with comment stripping.

    Args:
        path: Path to the config file

    Returns:
        Parsed config dictionary or None if the file is missing or invalid
    """
    if not path.exists():
        return None

    try:
        content = path.read_text(encoding="utf-8")
        if path.suffix == ".jsonc":
            content = strip_jsonc_comments(content)
        data = json.loads(content)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be an object", path)
        return None
    return data


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def apply_env_overrides(config_data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides on top of file settings."""
    result = config_data.copy()
    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            result[key] = value
    return result


def load_config(project_root: Path | None = None, config_path: Path | None = None) -> Config:
    """
    Load configuration from multiple sources with precedence.

    Looks for config files in the following order:
    1. Project-level: fileop.jsonc, fileop.json, .fileop/fileop.jsonc
    2. Global: ~/.fileop/fileop.jsonc

    Project config is merged with and takes precedence over global config.
    An explicit config_path replaces the project-level lookup. Environment
    overrides are applied last.

    Args:
        project_root: Project root directory (defaults to current working directory)
        config_path: Explicit config file to use instead of the project files

    Returns:
        Loaded and merged Config model
    """
    if project_root is None:
        project_root = Path.cwd()

    global_config_path = Path.home() / CONFIG_DIRNAME / CONFIG_FILENAME
    config_data = load_config_file(global_config_path) or {}

    if config_path is not None:
        project_config_paths = [config_path]
    else:
        project_config_paths = [
            project_root / CONFIG_FILENAME,
            project_root / "fileop.json",
            project_root / CONFIG_DIRNAME / CONFIG_FILENAME,
        ]

    for path in project_config_paths:
        project_config = load_config_file(path)
        if project_config:
            logger.debug("Loaded project config from %s", path)
            config_data = merge_configs(config_data, project_config)
            break

    return Config(**apply_env_overrides(config_data))


@lru_cache(maxsize=1)
def get_config(project_root: Path | None = None) -> Config:
    """
    Get cached configuration.

    To reload the config, clear the cache with get_config.cache_clear().

    Args:
        project_root: Project root directory (defaults to current working directory)

    Returns:
        Cached Config model
    """
    root = project_root or Path.cwd()
    return load_config(root)
