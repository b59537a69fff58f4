"""Packages and their version consistency.

A package is a set of versioned files that must always carry the same
version, plus an optional changelog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from release_engine.core.version import Rule, Version, bump
from release_engine.exceptions import InconsistentVersionsError, NoCurrentVersionError
from release_engine.project.versioned_file import VersionedFile, supported_file_names

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Package:
    """A named group of versioned files released together."""

    versioned_files: tuple[Path, ...]
    changelog: Path | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if not self.versioned_files:
            raise ValueError("a package needs at least one versioned file")

    @property
    def display_name(self) -> str:
        return self.name or ", ".join(str(path) for path in self.versioned_files)

    def load_files(self) -> list[VersionedFile]:
        return [VersionedFile.load(path) for path in self.versioned_files]


def current_version(package: Package) -> Version:
    """Return the version every file of ``package`` agrees on.

    Raises:
        NoCurrentVersionError: If there are no files to read a version from
        InconsistentVersionsError: If two files report different versions
        InvalidSemanticVersionError: If the shared version is not valid
    """
    return _agreed_version(package.load_files())


def _agreed_version(files: list[VersionedFile]) -> Version:
    found: str | None = None
    for versioned_file in files:
        version = versioned_file.get_version()
        if found is None:
            found = version
        elif version != found:
            raise InconsistentVersionsError(found, version)
    if found is None:
        raise NoCurrentVersionError()
    return Version.parse(found)


def updated_files(package: Package, version: Version) -> list[VersionedFile]:
    """Read every file of ``package`` and set ``version`` in memory.

    Nothing is written, so a file that cannot be re-serialized fails the
    whole package before any write.

    Raises:
        InconsistentVersionsError: If two files report different versions
    """
    files = package.load_files()
    _agreed_version(files)
    return [versioned_file.with_version(str(version)) for versioned_file in files]


def write_files(dry_run: TextIO | None, files: list[VersionedFile], version: Version) -> None:
    for versioned_file in files:
        versioned_file.write(dry_run, str(version))


def set_package_version(dry_run: TextIO | None, package: Package, version: Version) -> Version:
    """Write ``version`` to every file of ``package``.

    Every file is read, checked for a consistent version and re-serialized
    before the first write.
    """
    write_files(dry_run, updated_files(package, version), version)
    logger.info("Set %s to version %s", package.display_name, version)
    return version


def bump_package(dry_run: TextIO | None, package: Package, rule: Rule) -> Version:
    """Apply ``rule`` to the package version and write it to every file.

    Returns:
        The new version
    """
    current = current_version(package)
    new = bump(current, rule)
    logger.info("Bumping %s from %s to %s (%s)", package.display_name, current, new, rule)
    return set_package_version(dry_run, package, new)


def find_versioned_files(root: Path) -> list[Path]:
    """Supported versioned files directly inside ``root``, relative to it."""
    return [Path(name) for name in supported_file_names() if (root / name).is_file()]


def suggest_package_config(root: Path) -> str:
    """Render a ``[[packages]]`` table for the versioned files found in ``root``."""
    files = find_versioned_files(root)
    if not files:
        return ""
    listed = ", ".join(f'"{path.as_posix()}"' for path in files)
    lines = ["[[packages]]", f"versioned_files = [{listed}]"]
    if (root / "CHANGELOG.md").is_file():
        lines.append('changelog = "CHANGELOG.md"')
    return "\n".join(lines)
