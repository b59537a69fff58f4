"""Pydantic models for release-engine configuration.

Configuration lives in ``release-engine.toml`` or in the
``[tool.release-engine]`` table of ``pyproject.toml``::

    [[packages]]
    versioned_files = ["pyproject.toml", "package.json"]
    changelog = "CHANGELOG.md"

    [[workflows]]
    name = "release"

    [[workflows.steps]]
    type = "PrepareRelease"
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from release_engine.core.version import parse_rule
from release_engine.exceptions import WorkflowNotFoundError
from release_engine.project.package import Package
from release_engine.workflow.step import BumpVersion, PrepareRelease, Workflow

PRERELEASE_LABEL_PATTERN = r"^[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*$"


class PackageConfig(BaseModel):
    """One package: files sharing a version, and an optional changelog."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    versioned_files: list[Path] = Field(min_length=1)
    changelog: Path | None = None

    def build(self, root: Path) -> Package:
        """Create the runtime package, resolving paths against ``root``."""
        return Package(
            versioned_files=tuple(root / path for path in self.versioned_files),
            changelog=root / self.changelog if self.changelog is not None else None,
            name=self.name,
        )


class BumpVersionConfig(BaseModel):
    """``BumpVersion`` step."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["BumpVersion"]
    rule: Literal["major", "minor", "patch", "pre", "release"]
    label: str | None = Field(default=None, pattern=PRERELEASE_LABEL_PATTERN)

    @model_validator(mode="after")
    def check_label(self) -> BumpVersionConfig:
        if self.rule == "pre" and not self.label:
            raise ValueError("rule 'pre' requires a label")
        if self.rule != "pre" and self.label is not None:
            raise ValueError(f"rule {self.rule!r} does not take a label")
        return self

    def build(self) -> BumpVersion:
        return BumpVersion(parse_rule(self.rule, self.label))


class PrepareReleaseConfig(BaseModel):
    """``PrepareRelease`` step."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["PrepareRelease"]
    prerelease_label: str | None = Field(default=None, pattern=PRERELEASE_LABEL_PATTERN)

    def build(self) -> PrepareRelease:
        return PrepareRelease(prerelease_label=self.prerelease_label)


StepConfig = Annotated[Union[BumpVersionConfig, PrepareReleaseConfig], Field(discriminator="type")]


class WorkflowConfig(BaseModel):
    """A named list of steps."""

    model_config = ConfigDict(extra="forbid")

    name: str
    steps: list[StepConfig] = Field(min_length=1)

    def build(self) -> Workflow:
        return Workflow(self.name, tuple(step.build() for step in self.steps))


class EngineConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    packages: list[PackageConfig] = Field(default_factory=list)
    workflows: list[WorkflowConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_workflows(self) -> EngineConfig:
        names = [workflow.name for workflow in self.workflows]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate workflow names: {', '.join(duplicates)}")
        return self

    @property
    def workflow_names(self) -> list[str]:
        return [workflow.name for workflow in self.workflows]

    def build_packages(self, root: Path) -> tuple[Package, ...]:
        return tuple(package.build(root) for package in self.packages)

    def build_workflow(self, name: str) -> Workflow:
        """Build the workflow called ``name``.

        Raises:
            WorkflowNotFoundError: If no workflow has that name
        """
        for workflow in self.workflows:
            if workflow.name == name:
                return workflow.build()
        raise WorkflowNotFoundError(name, self.workflow_names)
