"""Project files that record a package version."""

from __future__ import annotations

from release_engine.project.package import (
    Package,
    bump_package,
    current_version,
    set_package_version,
    suggest_package_config,
    updated_files,
    write_files,
)
from release_engine.project.versioned_file import FORMATS, FormatKind, VersionedFile, format_for

__all__ = [
    "FORMATS",
    "FormatKind",
    "Package",
    "VersionedFile",
    "bump_package",
    "current_version",
    "format_for",
    "set_package_version",
    "suggest_package_config",
    "updated_files",
    "write_files",
]
