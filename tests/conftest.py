"""Shared fixtures for release-engine tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from release_engine.core.changes import ChangeCategory, ChangeEntry, ClassifiedChange
from release_engine.project.package import Package


@dataclass
class StaticClassifier:
    """Classifier returning a fixed list of changes."""

    changes: Sequence[ClassifiedChange] = field(default_factory=list)
    calls: int = 0

    def changes_since_last_release(self) -> Sequence[ClassifiedChange]:
        self.calls += 1
        return self.changes


@pytest.fixture(autouse=True)
def restore_release_engine_logger():
    """Undo logging changes made by the CLI command."""
    logger = logging.getLogger("release_engine")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def classifier_for() -> Callable[..., StaticClassifier]:
    """Build a classifier from ``(category, description)`` pairs."""

    def build(*pairs: tuple[ChangeCategory, str]) -> StaticClassifier:
        return StaticClassifier(
            [ClassifiedChange.from_entry(ChangeEntry(category, text)) for category, text in pairs]
        )

    return build


@pytest.fixture
def package_json_content() -> str:
    return '{\n  "name": "tester",\n  "version": "1.0.0",\n  "dependencies": {}\n}\n'


@pytest.fixture
def pyproject_content() -> str:
    return """\
[project]
name = "tester"
# keep this comment
version = "1.0.0"  # managed by release-engine
dependencies = []

[tool.other]
version = "9.9.9"
"""


@pytest.fixture
def temp_project(tmp_path: Path, package_json_content: str, pyproject_content: str) -> Path:
    """A project with package.json and pyproject.toml at version 1.0.0."""
    (tmp_path / "package.json").write_text(package_json_content)
    (tmp_path / "pyproject.toml").write_text(pyproject_content)
    return tmp_path


@pytest.fixture
def temp_package(temp_project: Path) -> Package:
    return Package(
        versioned_files=(temp_project / "package.json", temp_project / "pyproject.toml"),
        changelog=temp_project / "CHANGELOG.md",
    )
