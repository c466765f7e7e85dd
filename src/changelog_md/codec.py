"""Encoders and decoders for YAML, TOML, and JSON changelog sources.

YAML and TOML store ``versions`` as a mapping keyed by version name, so that
editing one release under version control produces a diff scoped to that
release. JSON stores it as a plain array. Both shapes decode to the same
ordered ``Changelog.versions`` list.
"""

from __future__ import annotations

import json
import tomllib
from collections.abc import Hashable
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Sequence, cast

import tomli_w
import yaml
from pydantic import ValidationError
from pydantic_core import ErrorDetails
from yaml.nodes import MappingNode, ScalarNode

from .errors import DecodeError, DuplicateVersionError, FormatInferenceError, PathSegment
from .model import Changelog
from .utils import log_debug

Format = Literal["yaml", "toml", "json"]
FORMAT_YAML: Format = "yaml"
FORMAT_TOML: Format = "toml"
FORMAT_JSON: Format = "json"
FORMAT_CHOICES: tuple[Format, ...] = (FORMAT_YAML, FORMAT_TOML, FORMAT_JSON)
FORMAT_ALIASES: dict[str, Format] = {"yml": FORMAT_YAML}

# Extension written for each format.
FORMAT_EXTENSIONS: dict[Format, str] = {
    FORMAT_YAML: "yml",
    FORMAT_TOML: "toml",
    FORMAT_JSON: "json",
}
# Extensions recognized when reading.
EXTENSION_FORMATS: dict[str, Format] = {
    "yml": FORMAT_YAML,
    "yaml": FORMAT_YAML,
    "toml": FORMAT_TOML,
    "json": FORMAT_JSON,
}

VERSION_KEY = "version"

_ERROR_MESSAGES = {
    "missing": "missing required field",
    "extra_forbidden": "unknown field",
}


def normalize_format(value: str) -> Format:
    """Return the canonical format name for user input such as ``yml``."""
    normalized = value.strip().lower()
    if normalized in FORMAT_ALIASES:
        return FORMAT_ALIASES[normalized]
    if normalized not in FORMAT_CHOICES:
        allowed = ", ".join(FORMAT_CHOICES)
        raise ValueError(f"Unknown format '{value}'. Expected one of: {allowed}")
    return cast(Format, normalized)


def infer_format(path: Path) -> Format:
    """Derive the encoding of a changelog file from its extension."""
    suffix = path.suffix
    if not suffix:
        raise FormatInferenceError(f"unable to read {path} without an extension")
    extension = suffix[1:].lower()
    fmt = EXTENSION_FORMATS.get(extension)
    if fmt is None:
        raise FormatInferenceError(f"invalid file extension '{extension}' for {path}")
    return fmt


# -- keyed list convention ---------------------------------------------------


def _versions_from_mapping(data: Any) -> tuple[Any, Optional[list[str]]]:
    """Turn the ``versions`` mapping into a list, injecting each key as ``version``."""
    if not isinstance(data, dict) or "versions" not in data:
        return data, None
    raw_versions = data["versions"]
    if not isinstance(raw_versions, dict):
        raise DecodeError(("versions",), "expected a mapping of version names to versions")
    keys: list[str] = []
    items: list[dict[str, Any]] = []
    for key, body in raw_versions.items():
        if not isinstance(key, str):
            raise DecodeError(
                ("versions", str(key)), "version names must be strings, quote the key"
            )
        if not isinstance(body, dict):
            raise DecodeError(("versions", key), "expected a mapping")
        if VERSION_KEY in body:
            raise DecodeError(
                ("versions", key, VERSION_KEY), "unknown field, the version name is the key"
            )
        keys.append(key)
        items.append({VERSION_KEY: key, **body})
    log_debug(f"decoded {len(keys)} keyed versions")
    return {**data, "versions": items}, keys


def _versions_to_mapping(data: dict[str, Any]) -> dict[str, Any]:
    """Inverse of :func:`_versions_from_mapping`."""
    versions: dict[str, Any] = {}
    for item in data["versions"]:
        body = dict(item)
        key = body.pop(VERSION_KEY)
        if key in versions:
            raise DuplicateVersionError(key)
        versions[key] = body
    return {**data, "versions": versions}


# -- validation ----------------------------------------------------------------


def _error_path(
    loc: Sequence[int | str], version_keys: Optional[Sequence[str]]
) -> list[PathSegment]:
    path: list[PathSegment] = list(loc)
    if len(path) >= 2 and path[0] == "versions" and isinstance(path[1], int):
        index = path[1]
        if version_keys is not None and index < len(version_keys):
            path[1] = version_keys[index]
        # Change categories are flattened into the version in every encoding.
        if len(path) >= 3 and path[2] == "changes":
            del path[2]
    return path


def _error_cause(error: ErrorDetails) -> str:
    if error["type"] == "value_error":
        ctx = error.get("ctx") or {}
        if "error" in ctx:
            return str(ctx["error"])
    return _ERROR_MESSAGES.get(error["type"], error["msg"])


def _validate(data: Any, version_keys: Optional[Sequence[str]] = None) -> Changelog:
    try:
        return Changelog.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0]
        cause = _error_cause(first)
        if len(errors) > 1:
            cause = f"{cause} (and {len(errors) - 1} more)"
        raise DecodeError(_error_path(first["loc"], version_keys), cause) from exc


# -- YAML ----------------------------------------------------------------------


class _StrictLoader(yaml.SafeLoader):
    """Safe loader that rejects duplicate mapping keys."""


def _construct_unique_mapping(
    loader: _StrictLoader, node: MappingNode, deep: bool = False
) -> dict[Any, Any]:
    loader.flatten_mapping(node)
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if not isinstance(key, Hashable):
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                "found unhashable key",
                key_node.start_mark,
            )
        if key in mapping:
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                f"found duplicate key {key!r}",
                key_node.start_mark,
            )
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


_StrictLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_unique_mapping,  # type: ignore[arg-type]
)


class _Dumper(yaml.SafeDumper):
    """Safe dumper writing multi-line strings as literal blocks."""


# Line breaks a literal block would fold into "\n".
_YAML_LOSSY_BREAKS = ("\x85", "\u2028", "\u2029")


def _represent_str(dumper: yaml.SafeDumper, data: str) -> ScalarNode:
    style: Optional[str] = None
    if any(char in data for char in _YAML_LOSSY_BREAKS):
        style = '"'
    elif "\n" in data:
        style = "|"
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


_Dumper.add_representer(str, _represent_str)


def from_yaml(text: str) -> Changelog:
    """Parse a changelog from a YAML string."""
    try:
        data = yaml.load(text, Loader=_StrictLoader)
    except yaml.YAMLError as exc:
        raise DecodeError((), f"invalid YAML: {exc}") from exc
    data, version_keys = _versions_from_mapping(data)
    return _validate(data, version_keys)


def to_yaml(changelog: Changelog) -> str:
    """Serialize a changelog into a YAML string."""
    data = _versions_to_mapping(changelog.model_dump())
    return cast(
        str,
        yaml.dump(
            data,
            Dumper=_Dumper,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        ),
    )


# -- TOML ----------------------------------------------------------------------


def _contains_carriage_return(value: Any) -> bool:
    """Return whether any string in a dumped tree holds a carriage return.

    Multi-line TOML strings normalize CRLF line endings to LF, so such
    documents are written with escaped single-line strings instead.
    """
    if isinstance(value, str):
        return "\r" in value
    if isinstance(value, dict):
        return any(_contains_carriage_return(item) for item in value.values())
    if isinstance(value, list):
        return any(_contains_carriage_return(item) for item in value)
    return False


def from_toml(text: str) -> Changelog:
    """Parse a changelog from a TOML string."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise DecodeError((), f"invalid TOML: {exc}") from exc
    data, version_keys = _versions_from_mapping(data)
    return _validate(data, version_keys)


def to_toml(changelog: Changelog) -> str:
    """Serialize a changelog into a pretty-printed TOML string."""
    data = _versions_to_mapping(changelog.model_dump())
    return tomli_w.dumps(data, multiline_strings=not _contains_carriage_return(data))


# -- JSON ----------------------------------------------------------------------


def _unique_object(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise DecodeError((), f"invalid JSON: duplicate key {key!r}")
        result[key] = value
    return result


def from_json(text: str) -> Changelog:
    """Parse a changelog from a JSON string."""
    try:
        data = json.loads(text, object_pairs_hook=_unique_object)
    except json.JSONDecodeError as exc:
        raise DecodeError((), f"invalid JSON: {exc}") from exc
    return _validate(data)


def to_json(changelog: Changelog) -> str:
    """Serialize a changelog into a pretty-printed JSON string."""
    return json.dumps(changelog.model_dump(), indent=2, ensure_ascii=False) + "\n"


# -- dispatch ------------------------------------------------------------------

_DECODERS: dict[Format, Callable[[str], Changelog]] = {
    FORMAT_YAML: from_yaml,
    FORMAT_TOML: from_toml,
    FORMAT_JSON: from_json,
}
_ENCODERS: dict[Format, Callable[[Changelog], str]] = {
    FORMAT_YAML: to_yaml,
    FORMAT_TOML: to_toml,
    FORMAT_JSON: to_json,
}


def parse(text: str, fmt: str) -> Changelog:
    """Parse a changelog from text in the given format."""
    normalized = normalize_format(fmt)
    log_debug(f"decoding changelog as {normalized}")
    return _DECODERS[normalized](text)


def render_as(changelog: Changelog, fmt: str) -> str:
    """Encode a changelog in the given format."""
    normalized = normalize_format(fmt)
    log_debug(f"encoding changelog as {normalized}")
    return _ENCODERS[normalized](changelog)


def load_path(path: Path) -> Changelog:
    """Read and parse a changelog file, inferring the format from its extension."""
    fmt = infer_format(path)
    text = path.read_text(encoding="utf-8")
    return parse(text, fmt)


def dump_path(changelog: Changelog, path: Path, fmt: Optional[str] = None) -> Path:
    """Encode a changelog and write it to ``path``.

    The document is fully encoded before the file is opened.
    """
    resolved: Format = normalize_format(fmt) if fmt is not None else infer_format(path)
    payload = render_as(changelog, resolved)
    path.write_text(payload, encoding="utf-8")
    return path
