"""package.json version manipulation.

The file is parsed into an ordered mapping, the top-level ``version`` is
replaced and the mapping dumped with two-space indentation. Key order of
every other property is kept as it was.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TextIO

from release_engine import fs
from release_engine.exceptions import VersionedFileDeserializeError, VersionedFileSerializeError

if TYPE_CHECKING:
    from pathlib import Path

HELP = (
    "release-engine expects the package.json file to be an object with a top level "
    "`version` property"
)


def _load(content: str, path: Path) -> dict[str, Any]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise VersionedFileDeserializeError(
            path, str(e), code="package_json::deserialize", help=HELP
        ) from e
    if not isinstance(data, dict):
        raise VersionedFileDeserializeError(
            path,
            f"expected an object, found {type(data).__name__}",
            code="package_json::deserialize",
            help=HELP,
        )
    return data


def get_version(content: str, path: Path) -> str:
    data = _load(content, path)
    version = data.get("version")
    if not isinstance(version, str):
        detail = "missing field `version`" if version is None else "`version` must be a string"
        raise VersionedFileDeserializeError(
            path, detail, code="package_json::deserialize", help=HELP
        )
    return version


def replace_version(content: str, new_version: str, path: Path) -> str:
    """Return ``content`` with the top-level version set to ``new_version``.

    Raises:
        VersionedFileDeserializeError: If the content is not a JSON object
        VersionedFileSerializeError: If the result cannot be stored as UTF-8
    """
    data = _load(content, path)
    data["version"] = new_version
    try:
        new_content = json.dumps(data, indent=2, ensure_ascii=False)
        new_content.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise VersionedFileSerializeError(path, str(e), code="package_json::serialize") from e
    if content.endswith("\n"):
        new_content += "\n"
    return new_content


def set_version(dry_run: TextIO | None, content: str, new_version: str, path: Path) -> str:
    """Set the top-level version of a package.json document.

    Returns:
        The new content
    """
    new_content = replace_version(content, new_version, path)
    return fs.write(dry_run, new_version, path, new_content)
