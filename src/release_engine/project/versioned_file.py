"""Versioned files and the table of supported formats.

Every format provides the same operations: ``get_version`` reads the
version and ``replace_version`` returns the content with a new one, without
writing anything. Adding a format means adding an entry to ``FORMATS``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, TextIO

from release_engine import fs
from release_engine.exceptions import UnsupportedVersionedFileError
from release_engine.project import cargo, package_json, pyproject

if TYPE_CHECKING:
    from pathlib import Path


class FormatKind(Enum):
    PACKAGE_JSON = "package.json"
    PYPROJECT = "pyproject.toml"
    CARGO = "Cargo.toml"
    PYTHON_MODULE = "__version__.py"


@dataclass(frozen=True)
class FileFormat:
    """The get/replace pair implementing one format."""

    file_names: tuple[str, ...]
    get_version: Callable[[str, Path], str]
    replace_version: Callable[[str, str, Path], str]


FORMATS: dict[FormatKind, FileFormat] = {
    FormatKind.PACKAGE_JSON: FileFormat(
        ("package.json",), package_json.get_version, package_json.replace_version
    ),
    FormatKind.PYPROJECT: FileFormat(
        ("pyproject.toml",), pyproject.get_version, pyproject.replace_version
    ),
    FormatKind.CARGO: FileFormat(("Cargo.toml",), cargo.get_version, cargo.replace_version),
    FormatKind.PYTHON_MODULE: FileFormat(
        ("__version__.py", "_version.py", "version.py"),
        pyproject.get_file_version,
        pyproject.replace_file_version,
    ),
}


def supported_file_names() -> list[str]:
    return [name for file_format in FORMATS.values() for name in file_format.file_names]


def format_for(path: Path) -> FormatKind:
    """Pick the format of ``path`` from its file name.

    Raises:
        UnsupportedVersionedFileError: If no format handles that file name
    """
    for kind, file_format in FORMATS.items():
        if path.name in file_format.file_names:
            return kind
    raise UnsupportedVersionedFileError(path, supported_file_names())


@dataclass(frozen=True)
class VersionedFile:
    """A file whose content records the package version.

    Instances are read once and replaced, never updated in place.
    """

    path: Path
    format_kind: FormatKind
    content: str

    @classmethod
    def load(cls, path: Path) -> VersionedFile:
        kind = format_for(path)
        return cls(path=path, format_kind=kind, content=fs.read(path))

    def get_version(self) -> str:
        return FORMATS[self.format_kind].get_version(self.content, self.path)

    def with_version(self, new_version: str) -> VersionedFile:
        """Return a copy whose content carries ``new_version``. Nothing is written."""
        file_format = FORMATS[self.format_kind]
        content = file_format.replace_version(self.content, new_version, self.path)
        return replace(self, content=content)

    def write(self, dry_run: TextIO | None, version: str) -> None:
        fs.write(dry_run, version, self.path, self.content)

    def set_version(self, dry_run: TextIO | None, new_version: str) -> VersionedFile:
        """Write ``new_version`` through the dry-run sink.

        Returns:
            A new instance holding the updated content
        """
        updated = self.with_version(new_version)
        updated.write(dry_run, new_version)
        return updated
