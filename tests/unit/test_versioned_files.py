"""Tests for the versioned file formats."""

from __future__ import annotations

import io
import json
import tomllib
from pathlib import Path

import pytest

from release_engine.exceptions import (
    UnsupportedVersionedFileError,
    VersionedFileDeserializeError,
    VersionedFileSerializeError,
)
from release_engine.project import cargo, package_json, pyproject
from release_engine.project.versioned_file import FormatKind, VersionedFile, format_for

PATH = Path("package.json")


class TestPackageJson:
    """Tests for package.json handling."""

    def test_get_version(self):
        content = '{\n  "name": "tester",\n  "version": "0.1.0-rc.0"\n}'

        assert package_json.get_version(content, PATH) == "0.1.0-rc.0"

    def test_set_version(self):
        """The output uses two-space indentation."""
        content = '{\n        "name": "tester",\n        "version": "0.1.0-rc.0"\n        }'

        new = package_json.set_version(io.StringIO(), content, "1.2.3-rc.4", PATH)

        assert new == '{\n  "name": "tester",\n  "version": "1.2.3-rc.4"\n}'

    def test_retain_property_order(self):
        """Properties keep their original order."""
        content = '{"name": "tester", "version": "0.1.0", "dependencies": {}, "a": [1, 2]}'

        new = package_json.set_version(io.StringIO(), content, "1.2.3", PATH)

        assert list(json.loads(new)) == ["name", "version", "dependencies", "a"]
        assert new.startswith('{\n  "name": "tester",\n  "version": "1.2.3",\n  "dependencies": {}')

    def test_trailing_newline_kept(self, package_json_content: str):
        new = package_json.set_version(io.StringIO(), package_json_content, "1.1.0", PATH)

        assert new.endswith("}\n")

    def test_round_trip(self, package_json_content: str):
        new = package_json.set_version(io.StringIO(), package_json_content, "3.0.0-beta.2", PATH)

        assert package_json.get_version(new, PATH) == "3.0.0-beta.2"

    def test_invalid_json(self):
        """Broken JSON names the file and explains the expected shape."""
        with pytest.raises(VersionedFileDeserializeError) as exc_info:
            package_json.get_version("{not json", Path("web/package.json"))

        error = exc_info.value
        assert "web/package.json" in error.message
        assert error.code == "package_json::deserialize"
        assert "top level `version`" in (error.help or "")

    @pytest.mark.parametrize(
        "content", ['["version"]', '{"name": "x"}', '{"version": 1}', '"1.0.0"']
    )
    def test_wrong_shape(self, content: str):
        with pytest.raises(VersionedFileDeserializeError):
            package_json.get_version(content, PATH)

    def test_set_version_invalid_json_does_not_write(self, tmp_path: Path):
        target = tmp_path / "package.json"
        target.write_text("oops")

        with pytest.raises(VersionedFileDeserializeError):
            package_json.set_version(None, "oops", "1.0.0", target)

        assert target.read_text() == "oops"

    def test_unencodable_value(self):
        """A lone surrogate escape parses but cannot be stored as UTF-8."""
        content = '{"name": "\\ud800", "version": "1.0.0"}'

        with pytest.raises(VersionedFileSerializeError) as exc_info:
            package_json.replace_version(content, "1.0.1", PATH)

        assert exc_info.value.code == "package_json::serialize"


class TestPyproject:
    """Tests for pyproject.toml handling."""

    def test_get_pep621_version(self, pyproject_content: str):
        assert pyproject.get_version(pyproject_content, Path("pyproject.toml")) == "1.0.0"

    def test_get_poetry_version(self):
        content = '[tool.poetry]\nname = "x"\nversion = "0.3.0"\n'

        assert pyproject.get_version(content, Path("pyproject.toml")) == "0.3.0"

    def test_set_version_preserves_formatting(self, pyproject_content: str):
        """Only the [project] version changes; comments and other tables survive."""
        new = pyproject.set_version(
            io.StringIO(), pyproject_content, "1.1.0", Path("pyproject.toml")
        )

        assert new == pyproject_content.replace(
            'version = "1.0.0"  # managed', 'version = "1.1.0"  # managed'
        )
        assert tomllib.loads(new)["tool"]["other"]["version"] == "9.9.9"

    def test_set_poetry_version(self):
        content = "[tool.poetry]\nname = 'x'\nversion = '0.3.0'\n"

        new = pyproject.set_version(io.StringIO(), content, "0.4.0", Path("pyproject.toml"))

        assert new == "[tool.poetry]\nname = 'x'\nversion = \"0.4.0\"\n"

    def test_dynamic_version(self):
        content = '[project]\nname = "x"\ndynamic = ["version"]\n'

        with pytest.raises(VersionedFileDeserializeError) as exc_info:
            pyproject.get_version(content, Path("pyproject.toml"))

        assert exc_info.value.code == "pyproject::deserialize"

    def test_invalid_toml(self):
        with pytest.raises(VersionedFileDeserializeError):
            pyproject.get_version("[project\n", Path("pyproject.toml"))


class TestCargo:
    """Tests for Cargo.toml handling."""

    CONTENT = """\
[package]
name = "tester"
version = "1.1.0-rc.1"
edition = "2021"

[dependencies]
serde = { version = "1.0" }
"""

    def test_get_version(self):
        assert cargo.get_version(self.CONTENT, Path("Cargo.toml")) == "1.1.0-rc.1"

    def test_set_version_only_touches_package(self):
        new = cargo.set_version(io.StringIO(), self.CONTENT, "1.1.0-rc.2", Path("Cargo.toml"))

        assert new == self.CONTENT.replace("1.1.0-rc.1", "1.1.0-rc.2")
        assert 'serde = { version = "1.0" }' in new

    def test_workspace_version_unsupported(self):
        content = "[package]\nname = 'x'\nversion = { workspace = true }\n"

        with pytest.raises(VersionedFileDeserializeError) as exc_info:
            cargo.get_version(content, Path("Cargo.toml"))

        assert exc_info.value.code == "cargo::deserialize"


class TestVersionModule:
    """Tests for __version__ modules."""

    def test_get_and_set(self):
        content = '"""Package."""\n\n__version__ = \'0.1.0\'\n'

        new = pyproject.set_file_version(io.StringIO(), content, "0.2.0", Path("_version.py"))

        assert new == '"""Package."""\n\n__version__ = \'0.2.0\'\n'
        assert pyproject.get_file_version(new, Path("_version.py")) == "0.2.0"

    def test_missing_assignment(self):
        with pytest.raises(VersionedFileDeserializeError):
            pyproject.get_file_version("VERSION = 1\n", Path("_version.py"))


class TestVersionedFile:
    """Tests for VersionedFile and format selection."""

    @pytest.mark.parametrize(
        ("name", "kind"),
        [
            ("package.json", FormatKind.PACKAGE_JSON),
            ("pyproject.toml", FormatKind.PYPROJECT),
            ("Cargo.toml", FormatKind.CARGO),
            ("__version__.py", FormatKind.PYTHON_MODULE),
        ],
    )
    def test_format_for(self, name: str, kind: FormatKind):
        assert format_for(Path("some/dir") / name) is kind

    def test_unsupported(self):
        with pytest.raises(UnsupportedVersionedFileError) as exc_info:
            format_for(Path("setup.cfg"))

        assert "package.json" in (exc_info.value.help or "")

    def test_load_and_set(self, temp_project: Path):
        versioned = VersionedFile.load(temp_project / "package.json")

        updated = versioned.set_version(None, "1.0.1")

        assert versioned.get_version() == "1.0.0"
        assert updated.get_version() == "1.0.1"
        assert json.loads((temp_project / "package.json").read_text())["version"] == "1.0.1"

    def test_with_version_writes_nothing(self, temp_project: Path):
        target = temp_project / "Cargo.toml"
        target.write_text('[package]\nname = "x"\nversion = "1.0.0"\n')
        versioned = VersionedFile.load(target)

        updated = versioned.with_version("1.1.0")

        assert updated.get_version() == "1.1.0"
        assert target.read_text() == '[package]\nname = "x"\nversion = "1.0.0"\n'
