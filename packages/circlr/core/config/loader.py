"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from circlr.core.config.models import PluginConfig
from circlr.core.utils.json import read_json

logger = logging.getLogger(__name__)


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("circlr.json")
        'json'
        >>> detect_format("circlr.yaml")
        'yaml'
        >>> detect_format("circlr.yml")
        'yaml'
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Supports both JSON and YAML formats. Format is auto-detected
    from file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

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
            return read_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        with path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Expected a mapping at the top of {path}, got {type(content).__name__}")
    return content


def load_plugin_config(path: str | Path | None = None) -> PluginConfig:
    """Load and validate the plugin configuration.

    Args:
        path: Path to config file (.json, .yaml, or .yml). Defaults to
              circlr.yaml in the working directory.

    Returns:
        Validated PluginConfig; all defaults when the file does not exist

    Raises:
        ValidationError: If config is invalid
    """
    if path is None:
        path = PluginConfig.default_path()

    if not Path(path).exists():
        logger.debug(f"No config at {path}, using defaults")
        return PluginConfig()

    raw_config = load_config(path)
    config = PluginConfig.model_validate(raw_config)
    logger.debug(f"Loaded config from {path}")
    return config
