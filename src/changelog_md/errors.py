"""Exception types raised by changelog-md."""

from __future__ import annotations

from typing import Sequence

PathSegment = str | int


def format_path(path: Sequence[PathSegment]) -> str:
    """Render a structural path such as ``versions["2.0.0"].added[1]``."""
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif segment.isidentifier():
            parts.append(f".{segment}" if parts else segment)
        else:
            parts.append(f'["{segment}"]')
    return "".join(parts)


class ChangelogError(Exception):
    """Base class for all changelog-md errors."""


class DecodeError(ChangelogError):
    """A changelog source violates the schema or is not well-formed."""

    def __init__(self, path: Sequence[PathSegment], cause: str) -> None:
        self.path: tuple[PathSegment, ...] = tuple(path)
        self.cause = cause
        super().__init__(str(self))

    @property
    def location(self) -> str:
        return format_path(self.path)

    def __str__(self) -> str:
        location = self.location
        if not location:
            return self.cause
        return f"{location}: {self.cause}"


class FormatInferenceError(ChangelogError):
    """The encoding of a changelog file cannot be derived from its name."""


class DuplicateVersionError(ChangelogError):
    """A release targets a version that already exists."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"version '{version}' already exists")


class VersionNotFoundError(ChangelogError):
    """No version with the requested name exists."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"version '{version}' not found")
