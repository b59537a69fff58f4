"""Cargo.toml version manipulation."""

from __future__ import annotations

import tomllib
from typing import TYPE_CHECKING, TextIO

from release_engine import fs
from release_engine.exceptions import VersionedFileDeserializeError, VersionedFileSerializeError
from release_engine.project.pyproject import load_toml, replace_table_version, table_version

if TYPE_CHECKING:
    from pathlib import Path

HELP = "release-engine expects Cargo.toml to have a [package] table with a string `version`"


def get_version(content: str, path: Path) -> str:
    data = load_toml(content, path, code="cargo::deserialize", help=HELP)
    version = table_version(data, "package")
    if version is None:
        raise VersionedFileDeserializeError(
            path, "missing field `package.version`", code="cargo::deserialize", help=HELP
        )
    return version


def replace_version(content: str, new_version: str, path: Path) -> str:
    get_version(content, path)
    new_content = replace_table_version(content, "package", new_version)
    if new_content is None or table_version(tomllib.loads(new_content), "package") != new_version:
        raise VersionedFileSerializeError(
            path, "could not rewrite [package].version", code="cargo::serialize"
        )
    return new_content


def set_version(dry_run: TextIO | None, content: str, new_version: str, path: Path) -> str:
    return fs.write(dry_run, new_version, path, replace_version(content, new_version, path))
