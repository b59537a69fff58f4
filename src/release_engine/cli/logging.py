"""Logging setup for console use."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.logging import RichHandler

if TYPE_CHECKING:
    from rich.console import Console


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route release-engine logs through rich.

    Args:
        verbose: Show debug messages instead of warnings and above
        console: Console to log to, stderr by default
    """
    handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("release_engine")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
