"""Exception hierarchy for release-engine.

Every failure raised by the engine derives from ReleaseEngineError and
carries enough structure to print one actionable diagnostic: a stable
``code``, a human ``help`` hint and an optional documentation ``url``.

Errors are grouped by what a user can do about them:

- UserInputError: fix the configuration or the input and re-run
- ParseError: a file on disk is not in the expected shape
- InternalError: a bug, report it
- CollaboratorError: git, a remote API or a prompt failed
- FileSystemError: reading or writing a file failed
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from pathlib import Path

DOCS_URL = "https://github.com/release-engine/release-engine/blob/main/docs"
ISSUES_URL = "https://github.com/release-engine/release-engine/issues"


class ReleaseEngineError(Exception):
    """Base exception for all release-engine errors."""

    category: ClassVar[str] = "error"
    code: ClassVar[str] = "release_engine::error"
    default_help: ClassVar[str | None] = None
    default_url: ClassVar[str | None] = None

    def __init__(self, message: str, *, help: str | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.help = help if help is not None else self.default_help
        self.url = url if url is not None else self.default_url


# --- category bases -------------------------------------------------------


class UserInputError(ReleaseEngineError):
    """The configuration or input needs fixing before re-running."""

    category = "user input"


class ParseError(ReleaseEngineError):
    """A file could not be read in its expected format."""

    category = "parse"

    def __init__(self, message: str, *, path: Path | None = None, **kwargs: str | None) -> None:
        super().__init__(message, **kwargs)
        self.path = path


class InternalError(ReleaseEngineError):
    """Something happened that user action cannot fix."""

    category = "internal"
    default_help = f"This is likely a bug, please report it at {ISSUES_URL}"


class CollaboratorError(ReleaseEngineError):
    """An external collaborator (git, remote API, prompt) failed."""

    category = "collaborator"


class FileSystemError(ReleaseEngineError):
    """Reading or writing a file failed."""

    category = "io"
    code = "release_engine::io"

    def __init__(self, message: str, *, path: Path, **kwargs: str | None) -> None:
        super().__init__(message, **kwargs)
        self.path = path


# --- configuration --------------------------------------------------------


class ConfigNotFoundError(UserInputError):
    """No configuration file could be found."""

    code = "config::not_found"
    default_help = (
        "Create a release-engine.toml or add a [tool.release-engine] table to pyproject.toml"
    )
    default_url = f"{DOCS_URL}/config.md"


class ConfigValidationError(UserInputError):
    """The configuration file does not have the expected structure."""

    code = "config::invalid"
    default_url = f"{DOCS_URL}/config.md"


class WorkflowNotFoundError(UserInputError):
    """The requested workflow is not defined."""

    code = "config::workflow_not_found"

    def __init__(self, name: str, available: list[str]) -> None:
        listed = ", ".join(available) if available else "none"
        super().__init__(
            f"No workflow named {name!r}",
            help=f"Defined workflows: {listed}",
        )
        self.name = name


class NoDefinedPackagesError(UserInputError):
    """No package is configured."""

    code = "step::no_defined_packages"
    default_url = f"{DOCS_URL}/packages.md"

    def __init__(self, package_suggestion: str = "") -> None:
        help_text = "You must define at least one package in the [[packages]] section."
        if package_suggestion:
            help_text = f"{help_text} Suggested configuration:\n\n{package_suggestion}"
        super().__init__("No packages are defined", help=help_text)
        self.package_suggestion = package_suggestion


class TooManyPackagesError(UserInputError):
    """More than one package is configured for a single-package step."""

    code = "step::too_many_packages"
    default_help = "Only one package in [[packages]] is currently supported for this step."

    def __init__(self, count: int) -> None:
        super().__init__(f"Too many packages defined ({count})")
        self.count = count


# --- versions -------------------------------------------------------------


class InvalidSemanticVersionError(UserInputError):
    """A version string is not a valid semantic version."""

    code = "step::invalid_semantic_version"
    default_help = "The version must be a valid Semantic Version, e.g. 1.2.3 or 1.2.3-rc.0"
    default_url = f"{DOCS_URL}/packages.md#versioned-files"

    def __init__(self, version: str) -> None:
        super().__init__(f"Found invalid semantic version {version}")
        self.version = version


class InvalidPreReleaseVersionError(UserInputError):
    """A pre-release suffix is not in the ``<label>.<N>`` format."""

    code = "step::invalid_pre_release_version"
    default_help = (
        "The pre-release component of a version must be in the format of `-<label>.N` "
        "where <label> is a string and `N` is an integer"
    )
    default_url = f"{DOCS_URL}/steps.md#pre"

    def __init__(self, version: str) -> None:
        super().__init__(f"Could not increment pre-release version {version}")
        self.version = version


class NotAPreReleaseError(UserInputError):
    """A release promotion was requested for a version that is already stable."""

    code = "step::not_a_pre_release"
    default_help = "The Release rule only promotes pre-release versions such as 1.2.0-rc.3"

    def __init__(self, version: str) -> None:
        super().__init__(f"Version {version} is not a pre-release, there is nothing to promote")
        self.version = version


class VersionNotIncreasedError(UserInputError):
    """Applying a rule would not produce a greater version."""

    code = "step::version_not_increased"
    default_help = (
        "Pre-release labels are ordered alphabetically. Pick a label that sorts after "
        "the current one, or release the current pre-release first."
    )

    def __init__(self, current: str, proposed: str) -> None:
        super().__init__(f"Version {proposed} is not greater than the current version {current}")
        self.current = current
        self.proposed = proposed


class NoCurrentVersionError(UserInputError):
    """The current version of a package could not be determined."""

    code = "step::no_current_version"
    default_help = "The current version of the package could not be determined"
    default_url = f"{DOCS_URL}/packages.md#versioned-files"

    def __init__(self) -> None:
        super().__init__("Could not determine the current version of the package")


class InconsistentVersionsError(UserInputError):
    """Versioned files of one package disagree on the current version."""

    code = "step::inconsistent_versions"
    default_help = "Manually update all versioned_files to have the correct version"
    default_url = f"{DOCS_URL}/steps.md#bumpversion"

    def __init__(self, first: str, second: str) -> None:
        super().__init__(
            "Versioned files within the same package must have the same version. "
            f"Found {first} which does not match {second}"
        )
        self.first = first
        self.second = second


class NoReleaseError(UserInputError):
    """No classified change implies a version change."""

    code = "step::no_release"
    default_help = (
        "The PrepareRelease step will not complete if no commits cause a package's "
        "version to be increased."
    )
    default_url = f"{DOCS_URL}/steps.md#preparerelease"

    def __init__(self) -> None:
        super().__init__("No packages are ready to release")


# --- files ----------------------------------------------------------------


class UnsupportedVersionedFileError(UserInputError):
    """A versioned file has a name no adapter recognises."""

    code = "versioned_file::unsupported"
    default_url = f"{DOCS_URL}/packages.md#supported-formats-for-versioning"

    def __init__(self, path: Path, supported: list[str]) -> None:
        super().__init__(
            f"Versioned file {path} is not a supported format",
            help=f"Supported file names: {', '.join(supported)}",
        )
        self.path = path


class VersionedFileDeserializeError(ParseError):
    """A versioned file does not have the expected structure."""

    def __init__(self, path: Path, source: str, *, code: str, help: str) -> None:
        super().__init__(
            f"Error deserializing {path}: {source}",
            path=path,
            help=help,
            url=f"{DOCS_URL}/packages.md#supported-formats-for-versioning",
        )
        self.code = code  # type: ignore[misc]
        self.source_detail = source


class ChangelogParseError(ParseError):
    """An existing changelog cannot be updated safely."""

    code = "changelog::parse"
    default_help = (
        "Changelog sections must start with `## <version>` and categories with "
        "`### <category>` inside a version section"
    )

    def __init__(self, detail: str, *, path: Path | None = None, line: int | None = None) -> None:
        where = str(path) if path is not None else "changelog"
        if line is not None:
            where = f"{where}:{line}"
        super().__init__(f"Could not parse {where}: {detail}", path=path)
        self.line = line


class VersionedFileSerializeError(InternalError):
    """Re-encoding a versioned file after a bump failed."""

    def __init__(self, path: Path, source: str, *, code: str) -> None:
        super().__init__(f"Failed to serialize {path} with new version: {source}")
        self.code = code  # type: ignore[misc]
        self.path = path


class FileReadError(FileSystemError):
    """A file could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not read {path}: {reason}", path=path)


class FileWriteError(FileSystemError):
    """A file could not be written."""

    default_help = "This could be a permissions issue or a full disk."

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not write {path}: {reason}", path=path)


# --- collaborators --------------------------------------------------------


class GitError(CollaboratorError):
    """Git failed while finding tags or walking commits."""

    code = "step::git_error"
    default_help = (
        "Something went wrong when interacting with Git. Make sure HEAD is on a branch "
        "without shallow commits, or try the operation manually."
    )

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr


class ApiRequestError(CollaboratorError):
    """A remote API request failed."""

    code = "step::api_request_error"
    default_help = (
        "This occurred during a step that requires communicating with a remote API "
        "(e.g., GitHub or Jira). The problem could be an invalid authentication token "
        "or a network issue."
    )


class UserInputCancelledError(CollaboratorError):
    """The user cancelled or did not answer a prompt."""

    code = "step::user_input_error"
    default_help = (
        "This step requires user input, but no user input was provided. "
        "Try running the step again."
    )


def format_diagnostic(error: ReleaseEngineError) -> str:
    """Render an error as the single terminal diagnostic shown to users."""
    lines = [f"{error.code}: {error.message}"]
    if error.help:
        lines.append("")
        lines.append(f"help: {error.help}")
    if error.url:
        lines.append(f"see: {error.url}")
    return "\n".join(lines)
