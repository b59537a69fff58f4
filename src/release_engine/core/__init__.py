"""Core business logic for release-engine.

This module contains the fundamental building blocks:
- Version parsing and bump rules (semantic versioning)
- Classified change entries
- Changelog parsing and generation
"""

from __future__ import annotations

from release_engine.core.changelog import ChangelogDocument, update_changelog
from release_engine.core.changes import (
    ChangeCategory,
    ChangeEntry,
    ChangeSource,
    ClassifiedChange,
    CommitClassifier,
    release_rule,
)
from release_engine.core.version import (
    Major,
    Minor,
    Patch,
    Pre,
    PreRelease,
    Release,
    Rule,
    Version,
    bump,
    next_release_version,
    parse_rule,
)

__all__ = [
    # Changes
    "ChangeCategory",
    "ChangeEntry",
    "ChangeSource",
    # Changelog
    "ChangelogDocument",
    "ClassifiedChange",
    "CommitClassifier",
    # Version
    "Major",
    "Minor",
    "Patch",
    "Pre",
    "PreRelease",
    "Release",
    "Rule",
    "Version",
    "bump",
    "next_release_version",
    "parse_rule",
    "release_rule",
    "update_changelog",
]
