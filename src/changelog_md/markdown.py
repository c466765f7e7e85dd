"""Render a changelog source as CHANGELOG.md."""

from __future__ import annotations

from .model import CATEGORY_TITLES, Changelog, Changes, Version


def _render_changes(changes: Changes) -> str:
    """Render the non-empty categories, each introduced by a blank line."""
    lines: list[str] = []
    for category, entries in changes.iter_categories():
        lines.append("")
        lines.append(f"### {CATEGORY_TITLES[category]}")
        lines.append("")
        lines.extend(f"- {entry}" for entry in entries)
    return "".join(f"{line}\n" for line in lines)


def _render_version(version: Version) -> str:
    heading = f"## {version.version} - {version.date}"
    if version.yanked is not None:
        heading += f" [YANKED] {version.yanked}"
    parts = [f"{heading}\n\n"]
    if version.description is not None:
        parts.append(f"{version.description.strip()}\n")
    if not version.changes.is_empty():
        parts.append(_render_changes(version.changes) + "\n")
    return "".join(parts)


def revision_links(changelog: Changelog) -> list[str]:
    """Return the bullet lines of the ``# Revisions`` section, newest first.

    Every release links to the range between the next older tag and its own
    tag. The oldest release has no predecessor and links to the commit
    history up to its tag instead.
    """
    repository = changelog.repository
    versions = changelog.versions
    if not versions:
        return [f"- [unreleased] <{repository}/commits/>"]

    lines = [f"- [unreleased] <{repository}/compare/{versions[0].tag}...HEAD>"]
    for newer, older in zip(versions, versions[1:]):
        lines.append(f"- [{newer.version}] <{repository}/compare/{older.tag}..{newer.tag}>")
    last = versions[-1]
    lines.append(f"- [{last.version}] <{repository}/commits/{last.tag}>")
    return lines


def to_markdown(changelog: Changelog) -> str:
    """Render the changelog as a Keep a Changelog style Markdown document."""
    parts = [f"# {changelog.title}\n\n{changelog.description}\n"]
    if not changelog.description.endswith("\n"):
        parts.append("\n")

    if not changelog.unreleased.is_empty():
        parts.append("## [Unreleased]\n")
        parts.append(_render_changes(changelog.unreleased) + "\n")

    parts.extend(_render_version(version) for version in changelog.versions)

    parts.append("\n# Revisions\n\n")
    parts.extend(f"{line}\n" for line in revision_links(changelog))
    return "".join(parts)
