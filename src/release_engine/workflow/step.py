"""Workflow steps and the pipeline that runs them.

A workflow is an ordered list of steps. Each step receives the current
:class:`RunType` and returns the next one. The first step to raise stops
the workflow; files already written by earlier steps stay written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Union

from release_engine.core.changelog import update_changelog
from release_engine.core.changes import entries_of, release_rule
from release_engine.core.version import Rule, check_label, next_release_version
from release_engine.exceptions import (
    NoDefinedPackagesError,
    NoReleaseError,
    ReleaseEngineError,
    TooManyPackagesError,
)
from release_engine.project.package import (
    Package,
    bump_package,
    current_version,
    suggest_package_config,
    updated_files,
    write_files,
)
from release_engine.workflow.state import PreparedRelease, RunType

logger = logging.getLogger(__name__)


def single_package(run_type: RunType) -> Package:
    """Return the one configured package.

    Raises:
        NoDefinedPackagesError: If no package is configured
        TooManyPackagesError: If more than one package is configured
    """
    packages = run_type.state.packages
    if not packages:
        raise NoDefinedPackagesError(suggest_package_config(run_type.state.root))
    if len(packages) > 1:
        raise TooManyPackagesError(len(packages))
    return packages[0]


@dataclass(frozen=True)
class BumpVersion:
    """Bump the package version in every versioned file using ``rule``."""

    rule: Rule

    def run(self, run_type: RunType) -> RunType:
        package = single_package(run_type)
        bump_package(run_type.dry_run, package, self.rule)
        return run_type

    def __str__(self) -> str:
        return f"BumpVersion({self.rule})"


@dataclass(frozen=True)
class PrepareRelease:
    """Bump the version from classified changes and record them in the changelog.

    With a ``prerelease_label`` the step produces (or continues) a
    pre-release series instead of a stable version.
    """

    prerelease_label: str | None = None

    def __post_init__(self) -> None:
        if self.prerelease_label is not None:
            check_label(self.prerelease_label)

    def run(self, run_type: RunType) -> RunType:
        package = single_package(run_type)
        classifier = run_type.state.classifier
        changes = list(classifier.changes_since_last_release()) if classifier is not None else []

        rule = release_rule(changes)
        if rule is None:
            raise NoReleaseError()

        current = current_version(package)
        version = next_release_version(current, rule, self.prerelease_label)
        entries = entries_of(changes)
        logger.info("Preparing release %s (from %s, %s)", version, current, rule)

        files = updated_files(package, version)
        if package.changelog is not None:
            update_changelog(run_type.dry_run, package.changelog, version, entries)
        write_files(run_type.dry_run, files, version)

        return run_type.with_state(release=PreparedRelease(version, tuple(entries)))

    def with_prerelease_label(self, label: str) -> PrepareRelease:
        return replace(self, prerelease_label=label)

    def __str__(self) -> str:
        if self.prerelease_label:
            return f"PrepareRelease(prerelease_label={self.prerelease_label})"
        return "PrepareRelease"


Step = Union[BumpVersion, PrepareRelease]


@dataclass(frozen=True)
class Workflow:
    """A named, ordered sequence of steps."""

    name: str
    steps: tuple[Step, ...] = field(default_factory=tuple)

    def run(self, run_type: RunType) -> RunType:
        """Run every step in order, threading the run type through.

        Raises:
            ReleaseEngineError: The error of the first failing step
        """
        mode = "dry-run" if run_type.is_dry_run else "real"
        logger.info("Running workflow %s (%s)", self.name, mode)
        for index, step in enumerate(self.steps, start=1):
            logger.debug("Step %d/%d: %s", index, len(self.steps), step)
            try:
                run_type = step.run(run_type)
            except ReleaseEngineError as e:
                logger.debug("Workflow %s failed at step %s: %s", self.name, step, e.message)
                raise
        return run_type

    def with_prerelease_label(self, label: str) -> Workflow:
        """Copy of this workflow whose PrepareRelease steps use ``label``."""
        steps = tuple(
            step.with_prerelease_label(label) if isinstance(step, PrepareRelease) else step
            for step in self.steps
        )
        return replace(self, steps=steps)
