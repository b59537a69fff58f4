"""pyproject.toml and Python version module manipulation.

TOML files are parsed with tomllib to read the version, but updated with
a targeted regex replacement inside the owning table so formatting and
comments survive. The result is parsed again to make sure the
replacement produced the intended document.
"""

from __future__ import annotations

import re
import tomllib
from typing import TYPE_CHECKING, Any, TextIO

from release_engine import fs
from release_engine.exceptions import VersionedFileDeserializeError, VersionedFileSerializeError

if TYPE_CHECKING:
    from pathlib import Path

PYPROJECT_HELP = (
    "release-engine expects pyproject.toml to set a static version in [project].version "
    "or [tool.poetry].version"
)
VERSION_FILE_HELP = 'release-engine expects the file to contain a line like __version__ = "1.2.3"'

_TABLES = ("project", "tool.poetry")
_VERSION_FILE_RE = re.compile(r'^(__version__\s*=\s*)(["\'])([^"\']*)\2', re.MULTILINE)


def load_toml(content: str, path: Path, *, code: str, help: str) -> dict[str, Any]:
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise VersionedFileDeserializeError(path, str(e), code=code, help=help) from e


def table_version(data: dict[str, Any], table: str) -> str | None:
    """Look up ``<table>.version`` in parsed TOML, e.g. ``tool.poetry``."""
    node: Any = data
    for key in table.split("."):
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    version = node.get("version") if isinstance(node, dict) else None
    return version if isinstance(version, str) else None


def replace_table_version(content: str, table: str, new_version: str) -> str | None:
    """Replace ``version = "..."`` inside ``[table]``.

    Returns:
        The new content, or None if the table has no version line
    """
    header = re.escape(f"[{table}]")

    def replace_in_section(match: re.Match[str]) -> str:
        return re.sub(
            r'^(version\s*=\s*)["\'][^"\']*["\']',
            lambda m: f'{m.group(1)}"{new_version}"',
            match.group(0),
            count=1,
            flags=re.MULTILINE,
        )

    # Match the entire table up to the next table header or EOF
    pattern = rf"^{header}[ \t]*$.*?(?=^\[|\Z)"
    new_content, count = re.subn(
        pattern,
        replace_in_section,
        content,
        count=1,
        flags=re.MULTILINE | re.DOTALL,
    )
    if count == 0:
        return None
    return new_content


def get_version(content: str, path: Path) -> str:
    data = load_toml(content, path, code="pyproject::deserialize", help=PYPROJECT_HELP)
    for table in _TABLES:
        version = table_version(data, table)
        if version is not None:
            return version
    raise VersionedFileDeserializeError(
        path,
        "no [project].version or [tool.poetry].version found",
        code="pyproject::deserialize",
        help=PYPROJECT_HELP,
    )


def replace_version(content: str, new_version: str, path: Path) -> str:
    """Return ``content`` with the version of its owning table replaced."""
    data = load_toml(content, path, code="pyproject::deserialize", help=PYPROJECT_HELP)
    for table in _TABLES:
        if table_version(data, table) is None:
            continue
        new_content = replace_table_version(content, table, new_version)
        if new_content is None or table_version(tomllib.loads(new_content), table) != new_version:
            raise VersionedFileSerializeError(
                path, f"could not rewrite [{table}].version", code="pyproject::serialize"
            )
        return new_content

    raise VersionedFileDeserializeError(
        path,
        "no [project].version or [tool.poetry].version found",
        code="pyproject::deserialize",
        help=PYPROJECT_HELP,
    )


def set_version(dry_run: TextIO | None, content: str, new_version: str, path: Path) -> str:
    return fs.write(dry_run, new_version, path, replace_version(content, new_version, path))


def get_file_version(content: str, path: Path) -> str:
    """Read ``__version__`` from a Python module such as ``__version__.py``."""
    match = _VERSION_FILE_RE.search(content)
    if match is None:
        raise VersionedFileDeserializeError(
            path,
            "no __version__ assignment found",
            code="version_file::deserialize",
            help=VERSION_FILE_HELP,
        )
    return match.group(3)


def replace_file_version(content: str, new_version: str, path: Path) -> str:
    get_file_version(content, path)
    return _VERSION_FILE_RE.sub(
        lambda m: f"{m.group(1)}{m.group(2)}{new_version}{m.group(2)}",
        content,
        count=1,
    )


def set_file_version(dry_run: TextIO | None, content: str, new_version: str, path: Path) -> str:
    return fs.write(dry_run, new_version, path, replace_file_version(content, new_version, path))
