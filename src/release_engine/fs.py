"""Filesystem access for release-engine.

All file mutations go through :func:`write`. When a dry-run sink is given
the write is described on the sink instead of being performed, so no
caller needs its own dry-run branch.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import TextIO

from release_engine.exceptions import FileReadError, FileWriteError

__all__ = ["read", "write"]

logger = logging.getLogger(__name__)


def read(path: Path) -> str:
    """Read a UTF-8 text file.

    Raises:
        FileReadError: If the file cannot be read
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, str(e)) from e


def write(
    dry_run: TextIO | None,
    version: str,
    path: Path,
    content: str,
    *,
    action: str = "change",
) -> str:
    """Write ``content`` to ``path``, or describe the write on ``dry_run``.

    Args:
        dry_run: Sink receiving a description instead of the real write
        version: Version the change is made for, used in the description
        path: Target file
        content: Complete new content of the file
        action: Verb used in the dry-run description

    Returns:
        The content, whether or not it was written

    Raises:
        FileWriteError: If the file cannot be written
    """
    if dry_run is not None:
        dry_run.write(f"Would {action} {path} to version {version}\n")
        return content

    logger.debug("Writing %s for version %s", path, version)
    _atomic_write_text(path, content)
    return content


def _target_mode(path: Path) -> int:
    """Permission bits the written file should end up with."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _atomic_write_text(path: Path, content: str) -> None:
    """Write text to path atomically using temp file + replace.

    The existing file's permissions carry over to the replacement.
    """
    try:
        mode = _target_mode(path)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.",
            suffix=".tmp",
            dir=str(path.parent),
        )
    except OSError as e:
        raise FileWriteError(path, str(e)) from e
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except (OSError, UnicodeEncodeError) as e:
        raise FileWriteError(path, str(e)) from e
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
