"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from xpiport.core.config.models import AppConfig
from xpiport.core.utils.json import read_json

logger = logging.getLogger(__name__)

MAX_VERSION_ENV = "XPIPORT_MAX_VERSION"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("xpiport.json")
        'json'
        >>> detect_format("xpiport.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return a raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary (empty for an empty YAML file)

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            content = read_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping in {path}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing file at the default location yields all defaults; an explicitly
    given path must exist. ``XPIPORT_MAX_VERSION`` overrides the configured
    maxVersion when set.

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValueError: If the file content is invalid
        ValidationError: If config values are invalid
    """
    if path is None:
        default = AppConfig.default_path()
        config = AppConfig.model_validate(load_config(default)) if default.exists() else AppConfig()
    else:
        config = AppConfig.model_validate(load_config(path))

    _load_env_vars_into_config(config)
    return config


def _load_env_vars_into_config(config: AppConfig) -> None:
    """Fill config values from environment variables (mutates config)."""
    max_version = os.getenv(MAX_VERSION_ENV)
    if max_version:
        logger.debug(f"Loaded {MAX_VERSION_ENV} from environment")
        config.conversion = config.conversion.model_copy(update={"max_version": max_version})
