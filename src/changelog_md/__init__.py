"""Core package exports for changelog-md."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as metadata_version

from .codec import (
    from_json,
    from_toml,
    from_yaml,
    load_path,
    parse,
    render_as,
    to_json,
    to_toml,
    to_yaml,
)
from .errors import (
    ChangelogError,
    DecodeError,
    DuplicateVersionError,
    FormatInferenceError,
    VersionNotFoundError,
)
from .markdown import to_markdown
from .model import CATEGORIES, Changelog, Changes, Version
from .schema import json_schema

__all__ = [
    "__version__",
    "CATEGORIES",
    "Changelog",
    "Changes",
    "Version",
    "ChangelogError",
    "DecodeError",
    "DuplicateVersionError",
    "FormatInferenceError",
    "VersionNotFoundError",
    "from_json",
    "from_toml",
    "from_yaml",
    "json_schema",
    "load_path",
    "parse",
    "render_as",
    "to_json",
    "to_markdown",
    "to_toml",
    "to_yaml",
]

try:
    __version__ = metadata_version("changelog-md")
except PackageNotFoundError:  # pragma: no cover - fallback for editable installs
    __version__ = "0.0.0"
