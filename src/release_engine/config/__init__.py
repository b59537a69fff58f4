"""Configuration management for release-engine."""

from __future__ import annotations

from release_engine.config.loader import find_config_file, load_config
from release_engine.config.models import (
    BumpVersionConfig,
    EngineConfig,
    PackageConfig,
    PrepareReleaseConfig,
    WorkflowConfig,
)

__all__ = [
    "BumpVersionConfig",
    "EngineConfig",
    "PackageConfig",
    "PrepareReleaseConfig",
    "WorkflowConfig",
    "find_config_file",
    "load_config",
]
