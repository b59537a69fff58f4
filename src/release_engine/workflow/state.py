"""Execution context threaded through a workflow."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from release_engine.core.changes import ChangeEntry, CommitClassifier
    from release_engine.core.version import Version
    from release_engine.project.package import Package


@dataclass(frozen=True)
class PreparedRelease:
    """Result of a PrepareRelease step, for steps that publish it."""

    version: Version
    entries: tuple[ChangeEntry, ...] = ()


@dataclass(frozen=True)
class State:
    """Workflow state.

    Attributes:
        packages: Configured packages
        root: Project root, used to suggest a configuration when none is set
        classifier: Source of classified changes for PrepareRelease
        issue: Issue selected by an issue-tracker step, opaque to the engine
        release: Set once a release has been prepared
        extras: Handles owned by other collaborators, opaque to the engine
    """

    packages: tuple[Package, ...] = ()
    root: Path = field(default_factory=Path.cwd)
    classifier: CommitClassifier | None = None
    issue: Any = None
    release: PreparedRelease | None = None
    extras: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RunType:
    """State plus the mode the workflow runs in.

    With a ``dry_run`` sink, every file write is described on the sink
    instead of being performed.
    """

    state: State
    dry_run: TextIO | None = None

    @classmethod
    def real(cls, state: State) -> RunType:
        return cls(state=state)

    @classmethod
    def dry(cls, state: State, sink: TextIO) -> RunType:
        return cls(state=state, dry_run=sink)

    @property
    def is_dry_run(self) -> bool:
        return self.dry_run is not None

    def with_state(self, **changes: Any) -> RunType:
        """Return a copy whose state has ``changes`` applied."""
        return replace(self, state=replace(self.state, **changes))
