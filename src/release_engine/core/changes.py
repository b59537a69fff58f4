"""Classified change entries.

Turning commit messages or change files into entries is done by a
classifier outside this package. The engine only consumes the result:
an ordered sequence of :class:`ClassifiedChange`, oldest first.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from release_engine.core.version import Major, Minor, Patch, Rule, rule_rank


class ChangeCategory(Enum):
    """Changelog category, in the order categories are rendered."""

    BREAKING = "Breaking Changes"
    FEATURE = "Features"
    FIX = "Fixes"
    OTHER = "Notes"

    @property
    def title(self) -> str:
        return self.value

    @property
    def implied_rule(self) -> Rule | None:
        return _IMPLIED_RULES[self]


_IMPLIED_RULES: dict[ChangeCategory, Rule | None] = {
    ChangeCategory.BREAKING: Major(),
    ChangeCategory.FEATURE: Minor(),
    ChangeCategory.FIX: Patch(),
    ChangeCategory.OTHER: None,
}


class ChangeSource(Enum):
    """Where a change entry came from."""

    COMMIT = "commit"
    CHANGE_FILE = "change_file"


@dataclass(frozen=True)
class ChangeEntry:
    """One bullet of release notes."""

    category: ChangeCategory
    description: str
    source: ChangeSource = ChangeSource.COMMIT


@dataclass(frozen=True)
class ClassifiedChange:
    """A change entry with the rule the classifier derived for it.

    ``rule`` is None for changes that do not require a release on their own.
    """

    entry: ChangeEntry
    rule: Rule | None = None

    @classmethod
    def from_entry(cls, entry: ChangeEntry) -> ClassifiedChange:
        """Classify with the rule implied by the entry's category."""
        return cls(entry, entry.category.implied_rule)


class CommitClassifier(Protocol):
    """Produces classified changes since the last release.

    Implementations wrap git and the conventional-commit parser; failures
    are raised as :class:`~release_engine.exceptions.GitError`.
    """

    def changes_since_last_release(self) -> Sequence[ClassifiedChange]: ...


def release_rule(changes: Iterable[ClassifiedChange]) -> Rule | None:
    """Return the most significant stable rule among ``changes``.

    Returns:
        Major, Minor or Patch, or None if no change implies a release
    """
    best: Rule | None = None
    for change in changes:
        if change.rule is None:
            continue
        if best is None or rule_rank(change.rule) > rule_rank(best):
            best = change.rule
    if best is not None and rule_rank(best) == 0:
        return None
    return best


def entries_of(changes: Iterable[ClassifiedChange]) -> list[ChangeEntry]:
    return [change.entry for change in changes]
