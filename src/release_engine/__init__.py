"""release-engine: version bumping and changelog bookkeeping for releases."""

from __future__ import annotations

__version__ = "0.1.0"
