"""Data model for changelog sources."""

from __future__ import annotations

import datetime
from typing import Any, Iterator, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)

from .errors import DuplicateVersionError, VersionNotFoundError
from .utils import log_debug

CATEGORIES = ("added", "changed", "deprecated", "removed", "fixed", "security")
CATEGORY_TITLES = {
    "added": "Added",
    "changed": "Changed",
    "deprecated": "Deprecated",
    "removed": "Removed",
    "fixed": "Fixed",
    "security": "Security",
}
DATE_PATTERN = r"^\d{4}-[01]\d-[0-3]\d$"

DEFAULT_TITLE = "Changelog"
DEFAULT_DESCRIPTION = """All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.1.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).
"""
DEFAULT_REPOSITORY = "https://github.com/me/my-swanky-project"
DEFAULT_UNRELEASED_ENTRY = "Started using [changelog-md](https://github.com/kageurufu/changelog-md)"


class Changes(BaseModel):
    """Any changes made in a version."""

    model_config = ConfigDict(extra="forbid")

    added: list[str] = Field(default_factory=list, description="New additions.")
    changed: list[str] = Field(default_factory=list, description="Changes to existing features.")
    deprecated: list[str] = Field(default_factory=list, description="Deprecations.")
    removed: list[str] = Field(default_factory=list, description="Removed features.")
    fixed: list[str] = Field(default_factory=list, description="Fixes to existing features.")
    security: list[str] = Field(default_factory=list, description="Security changes.")

    def is_empty(self) -> bool:
        return not any(getattr(self, category) for category in CATEGORIES)

    def iter_categories(self) -> Iterator[tuple[str, list[str]]]:
        """Yield (category, changes) pairs in rendering order, skipping empty ones."""
        for category in CATEGORIES:
            changes: list[str] = getattr(self, category)
            if changes:
                yield category, changes

    def push(self, category: str, change: str) -> None:
        """Append a change to the named category."""
        if category not in CATEGORIES:
            raise ValueError(
                f"Unknown change category '{category}'. Expected one of: {', '.join(CATEGORIES)}"
            )
        getattr(self, category).append(change)

    @model_serializer(mode="wrap")
    def _omit_empty_categories(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data: dict[str, Any] = handler(self)
        return {key: value for key, value in data.items() if value}


class Version(BaseModel):
    """A released version.

    In serialized form the change categories sit next to the version's own
    fields instead of below a nested ``changes`` key.
    """

    model_config = ConfigDict(extra="forbid")

    version: str = Field(description="The version name.")
    tag: str = Field(description="Git tag associated with this version.")
    date: str = Field(
        description="Date the version was released as an ISO date string.",
        json_schema_extra={"pattern": DATE_PATTERN},
    )
    description: Optional[str] = Field(
        default=None, description="Optional Markdown description of this version."
    )
    yanked: Optional[str] = Field(
        default=None, description="If the version was yanked, the reason why."
    )
    changes: Changes = Field(default_factory=Changes)

    @model_validator(mode="before")
    @classmethod
    def _gather_changes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "changes" in data and not isinstance(data["changes"], Changes):
            raise ValueError("unknown field 'changes', list change categories on the version itself")
        flattened = {key: data[key] for key in CATEGORIES if key in data}
        if not flattened:
            return data
        if "changes" in data:
            raise ValueError("change categories given both inline and as 'changes'")
        body = {key: value for key, value in data.items() if key not in CATEGORIES}
        body["changes"] = flattened
        return body

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: Any) -> Any:
        # YAML timestamps and TOML local dates arrive as date objects.
        if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
            return value.isoformat()
        return value

    @model_serializer(mode="wrap")
    def _flatten_changes(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data: dict[str, Any] = handler(self)
        changes = data.pop("changes", None) or {}
        for key in ("description", "yanked"):
            if data.get(key) is None:
                data.pop(key, None)
        data.update(changes)
        return data


class Changelog(BaseModel):
    """A user-friendly, version-control-friendly changelog source."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(description="The changelog's heading.")
    description: str = Field(
        description=(
            "A description of the project. "
            "It is recommended to note whether it follows semantic versioning."
        )
    )
    repository: str = Field(description="Source repository link.")
    unreleased: Changes = Field(
        default_factory=Changes, description="Currently unreleased changes."
    )
    versions: list[Version] = Field(default_factory=list, description="Releases, newest first.")

    @classmethod
    def default(cls, repository: Optional[str] = None) -> Changelog:
        """Return the seed document used for new changelogs."""
        return cls(
            title=DEFAULT_TITLE,
            description=DEFAULT_DESCRIPTION,
            repository=repository or DEFAULT_REPOSITORY,
            unreleased=Changes(added=[DEFAULT_UNRELEASED_ENTRY]),
        )

    def has_version(self, version: str) -> bool:
        return any(entry.version == version for entry in self.versions)

    def get_version(self, version: str) -> Version:
        """Return the first version with the given name."""
        for entry in self.versions:
            if entry.version == version:
                return entry
        raise VersionNotFoundError(version)

    def release(
        self,
        version: str,
        *,
        tag: Optional[str] = None,
        date: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Version:
        """Move all unreleased changes into a new version at the top of the history."""
        if self.has_version(version):
            raise DuplicateVersionError(version)
        released = Version(
            version=version,
            tag=tag or version,
            date=date or datetime.date.today().isoformat(),
            description=description,
            changes=self.unreleased,
        )
        self.versions.insert(0, released)
        self.unreleased = Changes()
        log_debug(f"released {version} with tag {released.tag} on {released.date}")
        return released

    def yank(self, version: str, reason: str) -> Version:
        """Mark a released version as yanked."""
        entry = self.get_version(version)
        entry.yanked = reason
        log_debug(f"yanked {version}: {reason}")
        return entry
