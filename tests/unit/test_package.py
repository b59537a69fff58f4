"""Tests for package version consistency and bumping."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from release_engine.core.version import Minor, Pre, Version
from release_engine.exceptions import (
    InconsistentVersionsError,
    InvalidSemanticVersionError,
    NoCurrentVersionError,
    VersionedFileDeserializeError,
    VersionedFileSerializeError,
)
from release_engine.project.package import (
    Package,
    _agreed_version,
    bump_package,
    current_version,
    set_package_version,
    suggest_package_config,
)


def _write_package_json(path: Path, version: str) -> Path:
    path.write_text(json.dumps({"name": path.parent.name, "version": version}, indent=2))
    return path


class TestPackage:
    """Tests for the Package model."""

    def test_requires_files(self):
        with pytest.raises(ValueError, match="at least one"):
            Package(versioned_files=())

    def test_display_name(self):
        assert Package((Path("a.json"),), name="core").display_name == "core"
        assert Package((Path("package.json"),)).display_name == "package.json"


class TestCurrentVersion:
    """Tests for current_version()."""

    def test_consistent(self, temp_package: Package):
        assert current_version(temp_package) == Version(1, 0, 0)

    def test_inconsistent_names_both_versions(self, tmp_path: Path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        package = Package(
            (
                _write_package_json(tmp_path / "a" / "package.json", "1.0.0"),
                _write_package_json(tmp_path / "b" / "package.json", "1.0.1"),
            )
        )

        with pytest.raises(InconsistentVersionsError) as exc_info:
            current_version(package)

        assert exc_info.value.first == "1.0.0"
        assert exc_info.value.second == "1.0.1"
        assert "1.0.0" in str(exc_info.value)
        assert "1.0.1" in str(exc_info.value)

    def test_invalid_version(self, tmp_path: Path):
        package = Package((_write_package_json(tmp_path / "package.json", "latest"),))

        with pytest.raises(InvalidSemanticVersionError):
            current_version(package)

    def test_malformed_file(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("[]")

        with pytest.raises(VersionedFileDeserializeError):
            current_version(Package((tmp_path / "package.json",)))

    def test_no_files(self):
        """No file to read from means no current version."""
        with pytest.raises(NoCurrentVersionError):
            _agreed_version([])


class TestBumpPackage:
    """Tests for bump_package()."""

    def test_updates_every_file(self, temp_package: Package, temp_project: Path):
        new = bump_package(None, temp_package, Minor())

        assert new == Version(1, 1, 0)
        assert json.loads((temp_project / "package.json").read_text())["version"] == "1.1.0"
        assert 'version = "1.1.0"' in (temp_project / "pyproject.toml").read_text()

    def test_dry_run_leaves_files(self, temp_package: Package, temp_project: Path):
        """Dry runs leave files byte-identical and describe the new version."""
        before = {p.name: p.read_bytes() for p in temp_project.iterdir()}
        sink = io.StringIO()

        new = bump_package(sink, temp_package, Pre("rc"))

        assert str(new) == "1.0.1-rc.0"
        assert {p.name: p.read_bytes() for p in temp_project.iterdir()} == before
        assert sink.getvalue().count("to version 1.0.1-rc.0") == 2

    def test_inconsistent_writes_nothing(self, tmp_path: Path):
        """An inconsistent package is rejected before any file is written."""
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        first = _write_package_json(tmp_path / "a" / "package.json", "1.0.0")
        second = _write_package_json(tmp_path / "b" / "package.json", "2.0.0")
        before = first.read_text()

        with pytest.raises(InconsistentVersionsError):
            bump_package(None, Package((first, second)), Minor())

        assert first.read_text() == before

    def test_serialize_failure_writes_nothing(self, tmp_path: Path):
        """A file that cannot be re-serialized stops the bump before any write."""
        cargo = tmp_path / "Cargo.toml"
        cargo.write_text('[package]\nname = "x"\nversion = "1.0.0"\n')
        (tmp_path / "package.json").write_text('{"name": "\\ud800", "version": "1.0.0"}\n')
        before = cargo.read_text()

        with pytest.raises(VersionedFileSerializeError):
            bump_package(None, Package((cargo, tmp_path / "package.json")), Minor())

        assert cargo.read_text() == before


class TestSetPackageVersion:
    """Tests for set_package_version()."""

    def test_sets_exact_version(self, temp_package: Package, temp_project: Path):
        set_package_version(None, temp_package, Version.parse("2.0.0-rc.0"))

        assert json.loads((temp_project / "package.json").read_text())["version"] == "2.0.0-rc.0"


class TestSuggestPackageConfig:
    """Tests for suggest_package_config()."""

    def test_suggestion(self, temp_project: Path):
        (temp_project / "CHANGELOG.md").write_text("")

        suggestion = suggest_package_config(temp_project)

        assert suggestion == (
            "[[packages]]\n"
            'versioned_files = ["package.json", "pyproject.toml"]\n'
            'changelog = "CHANGELOG.md"'
        )

    def test_nothing_found(self, tmp_path: Path):
        assert suggest_package_config(tmp_path) == ""
