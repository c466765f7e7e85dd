"""JSON schema describing changelog sources for external validation tools."""

from __future__ import annotations

import copy
from typing import Any

from .model import Changelog

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"
SCHEMA_ID = "https://changelog-md.github.io/1.0/changelog"


def json_schema(*, keyed: bool = True) -> dict[str, Any]:
    """Return the JSON schema of a changelog source.

    With ``keyed`` set, ``versions`` is described as an object keyed by version
    name, the shape used by YAML and TOML sources. Otherwise it is an array of
    complete version objects, the shape used by JSON sources.
    """
    schema = Changelog.model_json_schema()
    definitions = schema["$defs"]

    # Change categories are written inline on each version.
    version = definitions["Version"]
    properties = {
        name: value for name, value in version["properties"].items() if name != "changes"
    }
    properties.update(copy.deepcopy(definitions["Changes"]["properties"]))
    version["properties"] = properties

    if keyed:
        properties.pop("version", None)
        version["required"] = [name for name in version.get("required", []) if name != "version"]
        versions = schema["properties"]["versions"]
        versions.pop("items", None)
        versions["type"] = "object"
        versions["additionalProperties"] = {"$ref": "#/$defs/Version"}

    return {"$schema": SCHEMA_DIALECT, "$id": SCHEMA_ID, **schema}
