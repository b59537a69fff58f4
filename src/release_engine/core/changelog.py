"""Changelog parsing and generation.

A changelog is a markdown document of version sections, newest first::

    ## 1.1.0

    ### Features

    - Something new

Anything before the first ``##`` heading (a title, an introduction) is kept
as a preamble. Sections that are not touched by an update keep their
original text, so rendering a parsed document gives back the exact input.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, TextIO

from release_engine import fs
from release_engine.core.changes import ChangeCategory, ChangeEntry
from release_engine.core.version import Version
from release_engine.exceptions import ChangelogParseError, ReleaseEngineError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

SECTION_PREFIX = "## "
SUBSECTION_PREFIX = "### "
BULLET_PREFIXES = ("- ", "* ")

_CATEGORY_ORDER = {category.title: index for index, category in enumerate(ChangeCategory)}


@dataclass(frozen=True)
class ChangelogSubsection:
    """A ``###`` category with its bullets.

    Each item is the raw text of one bullet, continuation lines included.
    """

    title: str
    items: tuple[str, ...] = ()

    @property
    def order(self) -> int:
        return _CATEGORY_ORDER.get(self.title, len(_CATEGORY_ORDER))


@dataclass(frozen=True)
class ChangelogSection:
    """A ``##`` version section."""

    heading: str
    intro: tuple[str, ...] = ()
    subsections: tuple[ChangelogSubsection, ...] = ()
    raw: str | None = field(default=None, compare=False)

    @property
    def version(self) -> Version | None:
        """The version in the heading, or None if it does not start with one."""
        token = self.heading.split(maxsplit=1)[0] if self.heading.strip() else ""
        token = token.strip("[]")
        try:
            return Version.parse(token)
        except ReleaseEngineError:
            return None

    def render(self) -> str:
        if self.raw is not None:
            return self.raw
        lines = [f"{SECTION_PREFIX}{self.heading}", ""]
        if self.intro:
            lines.extend(self.intro)
            lines.append("")
        for subsection in self.subsections:
            lines.append(f"{SUBSECTION_PREFIX}{subsection.title}")
            lines.append("")
            lines.extend(subsection.items)
            lines.append("")
        return "\n".join(lines) + "\n"

    def with_entries(self, entries: Iterable[ChangeEntry]) -> ChangelogSection:
        """Append entries beneath the existing ones of each category."""
        subsections = list(self.subsections)
        for category, items in _group(entries):
            for index, subsection in enumerate(subsections):
                if subsection.title == category.title:
                    subsections[index] = replace(subsection, items=subsection.items + items)
                    break
            else:
                new = ChangelogSubsection(category.title, items)
                position = next(
                    (i for i, existing in enumerate(subsections) if existing.order > new.order),
                    len(subsections),
                )
                subsections.insert(position, new)
        return replace(self, subsections=tuple(subsections), raw=None)


@dataclass(frozen=True)
class ChangelogDocument:
    """A parsed changelog."""

    preamble: str = ""
    sections: tuple[ChangelogSection, ...] = ()

    @classmethod
    def parse(cls, text: str, path: Path | None = None) -> ChangelogDocument:
        """Parse changelog text.

        Raises:
            ChangelogParseError: If a category heading appears outside a version section
        """
        lines = text.splitlines(keepends=True)
        preamble: list[str] = []
        chunks: list[tuple[int, list[str]]] = []

        for number, line in enumerate(lines, start=1):
            if line.startswith(SECTION_PREFIX):
                chunks.append((number, [line]))
            elif chunks:
                chunks[-1][1].append(line)
            elif line.startswith(SUBSECTION_PREFIX):
                raise ChangelogParseError(
                    "category heading found before any version section", path=path, line=number
                )
            else:
                preamble.append(line)

        sections = tuple(_parse_section(chunk) for _, chunk in chunks)
        return cls(preamble="".join(preamble), sections=sections)

    def render(self) -> str:
        parts = [self.preamble]
        for index, section in enumerate(self.sections):
            text = section.render()
            if section.raw is None and index == len(self.sections) - 1:
                text = text.rstrip("\n") + "\n"
            parts.append(text)
        return "".join(parts)

    @property
    def latest(self) -> ChangelogSection | None:
        return self.sections[0] if self.sections else None

    def add_release(self, version: Version, entries: Sequence[ChangeEntry]) -> ChangelogDocument:
        """Record ``entries`` under ``version``.

        Entries for the next version of the pre-release series at the top of
        the document are merged into that section, which is renamed to
        ``version``. Any other version gets a new section above all others.
        """
        latest = self.latest
        latest_version = latest.version if latest is not None else None
        if latest is not None and latest_version is not None \
                and version.same_series(latest_version):
            logger.debug("Merging %s into changelog section %s", version, latest.heading)
            merged = replace(latest.with_entries(entries), heading=str(version))
            return replace(self, sections=(merged, *self.sections[1:]))

        logger.debug("Adding changelog section %s", version)
        section = ChangelogSection(heading=str(version)).with_entries(entries)
        preamble = self.preamble
        if preamble.strip() and not preamble.endswith("\n\n"):
            preamble = preamble.rstrip("\n") + "\n\n"
        return replace(self, preamble=preamble, sections=(section, *self.sections))


def _parse_section(lines: list[str]) -> ChangelogSection:
    heading = lines[0][len(SECTION_PREFIX) :].strip()
    intro: list[str] = []
    subsections: list[tuple[str, list[str]]] = []

    for line in lines[1:]:
        text = line.rstrip("\r\n")
        if text.startswith(SUBSECTION_PREFIX):
            subsections.append((text[len(SUBSECTION_PREFIX) :].strip(), []))
            continue
        if not text.strip():
            continue
        if not subsections:
            intro.append(text)
            continue
        items = subsections[-1][1]
        if text.startswith(BULLET_PREFIXES) or not items:
            items.append(text)
        else:
            items[-1] = f"{items[-1]}\n{text}"

    return ChangelogSection(
        heading=heading,
        intro=tuple(intro),
        subsections=tuple(ChangelogSubsection(title, tuple(items)) for title, items in subsections),
        raw="".join(lines),
    )


def _group(entries: Iterable[ChangeEntry]) -> list[tuple[ChangeCategory, tuple[str, ...]]]:
    """Group entries by category in render order, keeping their relative order."""
    grouped: dict[ChangeCategory, list[str]] = {category: [] for category in ChangeCategory}
    for entry in entries:
        grouped[entry.category].append(format_entry(entry))
    return [(category, tuple(items)) for category, items in grouped.items() if items]


def format_entry(entry: ChangeEntry) -> str:
    """Format an entry as a markdown bullet, indenting continuation lines."""
    first, *rest = entry.description.strip().splitlines() or [""]
    lines = [f"- {first}"]
    lines.extend(f"  {line}" if line.strip() else "" for line in rest)
    return "\n".join(lines)


def update_changelog(
    dry_run: TextIO | None,
    path: Path,
    version: Version,
    entries: Sequence[ChangeEntry],
) -> str:
    """Add ``entries`` for ``version`` to the changelog at ``path``.

    A missing changelog is created.

    Returns:
        The new changelog text

    Raises:
        ChangelogParseError: If the existing changelog cannot be parsed
        FileSystemError: If the changelog cannot be read or written
    """
    existing = fs.read(path) if path.exists() else ""
    document = ChangelogDocument.parse(existing, path).add_release(version, entries)
    return fs.write(dry_run, str(version), path, document.render(), action="update")
