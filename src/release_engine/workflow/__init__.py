"""Workflow steps and execution context."""

from __future__ import annotations

from release_engine.workflow.state import PreparedRelease, RunType, State
from release_engine.workflow.step import BumpVersion, PrepareRelease, Step, Workflow

__all__ = [
    "BumpVersion",
    "PrepareRelease",
    "PreparedRelease",
    "RunType",
    "State",
    "Step",
    "Workflow",
]
