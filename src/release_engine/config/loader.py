"""Configuration file discovery and loading."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from release_engine.config.models import EngineConfig
from release_engine.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "release-engine.toml"
PYPROJECT_TABLE = "release-engine"


def _has_pyproject_table(path: Path) -> bool:
    try:
        data = load_toml_file(path)
    except ConfigValidationError:
        return False
    return PYPROJECT_TABLE in data.get("tool", {})


def find_config_file(start_path: Path | None = None) -> Path:
    """Find the configuration file, searching ``start_path`` and its parents.

    ``release-engine.toml`` wins over a ``pyproject.toml`` in the same
    directory; a ``pyproject.toml`` only counts if it has a
    ``[tool.release-engine]`` table.

    Raises:
        ConfigNotFoundError: If no configuration file is found
    """
    start = (start_path or Path.cwd()).resolve()
    if start.is_file():
        return start

    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        pyproject = directory / "pyproject.toml"
        if pyproject.is_file() and _has_pyproject_table(pyproject):
            return pyproject

    raise ConfigNotFoundError(f"No {CONFIG_FILE_NAME} found in {start} or any parent directory")


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigValidationError(f"Could not read {path}: {e}") from e


def extract_config(data: dict[str, Any], path: Path) -> dict[str, Any]:
    """Return the release-engine part of a loaded configuration file."""
    if path.name == "pyproject.toml":
        section = data.get("tool", {}).get(PYPROJECT_TABLE, {})
        return section if isinstance(section, dict) else {}
    return data


def load_config(path: Path | None = None) -> EngineConfig:
    """Load and validate configuration.

    Args:
        path: Configuration file, or a directory to search from

    Raises:
        ConfigNotFoundError: If no configuration file is found
        ConfigValidationError: If the configuration is invalid
    """
    config_path = path if path is not None and path.is_file() else find_config_file(path)
    raw = extract_config(load_toml_file(config_path), config_path)
    logger.debug("Loading configuration from %s", config_path)
    try:
        return EngineConfig.model_validate(raw)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigValidationError(
            f"Invalid configuration in {config_path}",
            help=details,
        ) from e
