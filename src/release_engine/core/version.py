"""Semantic version parsing and bump rules.

Versions follow ``MAJOR.MINOR.PATCH[-LABEL.N][+BUILD]``. The pre-release
component is always a label followed by a numeric counter, which is what
makes pre-release series (``1.2.0-rc.0``, ``1.2.0-rc.1``, ...) possible.

Nothing in this module touches the filesystem.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from release_engine.exceptions import (
    InvalidPreReleaseVersionError,
    InvalidSemanticVersionError,
    NotAPreReleaseError,
    VersionNotIncreasedError,
)

_VERSION_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)
_PRE_RE = re.compile(r"^(?P<label>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)\.(?P<number>0|[1-9]\d*)$")
_LABEL_RE = re.compile(r"^[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*$")


def check_label(label: str) -> str:
    """Return ``label`` if it can be used as a pre-release label.

    Raises:
        InvalidPreReleaseVersionError: If the label has characters outside
            ``[0-9A-Za-z-]`` or empty dot-separated parts
    """
    if not _LABEL_RE.match(label):
        raise InvalidPreReleaseVersionError(label)
    return label


@dataclass(frozen=True)
class PreRelease:
    """Pre-release component, e.g. ``rc.2``."""

    label: str
    number: int = 0

    def __post_init__(self) -> None:
        check_label(self.label)

    def __str__(self) -> str:
        return f"{self.label}.{self.number}"

    @classmethod
    def parse(cls, text: str, version: str | None = None) -> PreRelease:
        """Parse ``<label>.<N>``.

        Raises:
            InvalidPreReleaseVersionError: If the text is not in that format
        """
        match = _PRE_RE.match(text)
        if match is None:
            raise InvalidPreReleaseVersionError(version or text)
        return cls(match.group("label"), int(match.group("number")))

    def bump(self) -> PreRelease:
        return PreRelease(self.label, self.number + 1)


@dataclass(frozen=True)
class Version:
    """A semantic version.

    Ordering compares major, minor and patch, then ranks a version without
    a pre-release above the same version with one, then compares the
    pre-release label and number. Build metadata is ignored by ordering.
    """

    major: int
    minor: int
    patch: int
    pre: PreRelease | None = None
    build: str | None = None

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string.

        Raises:
            InvalidSemanticVersionError: If the string is not a semantic version
            InvalidPreReleaseVersionError: If the pre-release is not ``<label>.<N>``
        """
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise InvalidSemanticVersionError(text)
        pre = match.group("pre")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            pre=PreRelease.parse(pre, text) if pre is not None else None,
            build=match.group("build"),
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre is not None:
            text = f"{text}-{self.pre}"
        if self.build is not None:
            text = f"{text}+{self.build}"
        return text

    @property
    def is_prerelease(self) -> bool:
        return self.pre is not None

    @property
    def stable(self) -> Version:
        """This version without pre-release or build metadata."""
        return Version(self.major, self.minor, self.patch)

    def _key(self) -> tuple[int, int, int, bool, str, int]:
        if self.pre is None:
            return (self.major, self.minor, self.patch, True, "", 0)
        return (self.major, self.minor, self.patch, False, self.pre.label, self.pre.number)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() >= other._key()

    def same_series(self, other: Version) -> bool:
        """Whether both are pre-releases of one major.minor.patch with the same label."""
        return (
            self.pre is not None
            and other.pre is not None
            and self.stable == other.stable
            and self.pre.label == other.pre.label
        )

    def with_prerelease(self, label: str, number: int = 0) -> Version:
        return Version(self.major, self.minor, self.patch, PreRelease(label, number))


# --- rules ----------------------------------------------------------------


@dataclass(frozen=True)
class Major:
    def __str__(self) -> str:
        return "major"


@dataclass(frozen=True)
class Minor:
    def __str__(self) -> str:
        return "minor"


@dataclass(frozen=True)
class Patch:
    def __str__(self) -> str:
        return "patch"


@dataclass(frozen=True)
class Pre:
    label: str

    def __post_init__(self) -> None:
        check_label(self.label)

    def __str__(self) -> str:
        return f"pre ({self.label})"


@dataclass(frozen=True)
class Release:
    def __str__(self) -> str:
        return "release"


Rule = Union[Major, Minor, Patch, Pre, Release]

_STABLE_RULES: dict[str, Rule] = {"major": Major(), "minor": Minor(), "patch": Patch()}


def parse_rule(name: str, label: str | None = None) -> Rule:
    """Build a rule from its configuration name.

    Args:
        name: One of ``major``, ``minor``, ``patch``, ``pre`` or ``release``
        label: Pre-release label, required for ``pre``
    """
    key = name.lower()
    if key in _STABLE_RULES:
        return _STABLE_RULES[key]
    if key == "release":
        return Release()
    if key == "pre":
        if not label:
            raise ValueError("the pre rule requires a label")
        return Pre(label)
    raise ValueError(f"unknown rule {name!r}")


def rule_rank(rule: Rule) -> int:
    """Rank stable rules so the most significant one wins."""
    match rule:
        case Major():
            return 3
        case Minor():
            return 2
        case Patch():
            return 1
        case _:
            return 0


def bump(current: Version, rule: Rule) -> Version:
    """Apply ``rule`` to ``current``.

    The result is always strictly greater than ``current``.

    Raises:
        NotAPreReleaseError: ``Release`` on a stable version
        VersionNotIncreasedError: A label switch that would sort lower
    """
    match rule:
        case Major():
            new = Version(current.major + 1, 0, 0)
        case Minor():
            new = Version(current.major, current.minor + 1, 0)
        case Patch():
            new = Version(current.major, current.minor, current.patch + 1)
        case Pre(label=label):
            if current.pre is None:
                next_patch = Version(current.major, current.minor, current.patch + 1)
                new = next_patch.with_prerelease(label)
            elif current.pre.label == label:
                new = Version(current.major, current.minor, current.patch, current.pre.bump())
            else:
                new = current.stable.with_prerelease(label)
        case Release():
            if current.pre is None:
                raise NotAPreReleaseError(str(current))
            new = current.stable
        case _:
            raise AssertionError(f"unexpected rule: {rule!r}")

    # only a label switch can move backwards
    if not new > current:
        raise VersionNotIncreasedError(str(current), str(new))
    return new


def bump_str(current: str, rule: Rule) -> Version:
    """Parse ``current`` and apply ``rule`` to it."""
    return bump(Version.parse(current), rule)


def next_release_version(current: Version, rule: Rule, prerelease_label: str | None) -> Version:
    """Resolve the version a release with the given stable ``rule`` produces.

    The rule first picks the stable version the release leads to. A
    pre-release whose base already satisfies the rule leads to that base.

    - Without a label, that stable version is the result.
    - A pre-release of that stable version with the same label continues its series.
    - Otherwise a new series ``<stable>-<label>.0`` starts.
    """
    target = _stable_target(current, rule)
    if prerelease_label is None:
        new = target
    elif (
        current.pre is not None
        and current.pre.label == prerelease_label
        and current.stable == target
    ):
        new = bump(current, Pre(prerelease_label))
    else:
        new = target.with_prerelease(prerelease_label)
    if not new > current:
        raise VersionNotIncreasedError(str(current), str(new))
    return new


def _stable_target(current: Version, rule: Rule) -> Version:
    """Stable version a pre-release series for ``rule`` should lead to.

    A pre-release whose base already satisfies the rule keeps that base,
    e.g. 2.0.0-beta.1 with a major rule leads to 2.0.0.
    """
    if current.pre is None:
        return bump(current, rule)
    base = current.stable
    match rule:
        case Major() if base.minor == 0 and base.patch == 0:
            return base
        case Minor() if base.patch == 0:
            return base
        case Patch():
            return base
    return bump(base, rule)
