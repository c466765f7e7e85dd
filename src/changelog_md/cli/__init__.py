"""CLI package for changelog-md.

This package contains the modular CLI implementation:
- _core.py: CLIContext, source detection, main entry point
- _convert.py: init, convert, render, and schema commands
- _validate.py: validate command
- _add.py: add command for unreleased changes
- _release.py: release and yank commands
"""

from __future__ import annotations

from ._core import (
    CLIContext,
    INFO_PREFIX,
    SOURCE_STEM,
    autodetect_source,
    create_cli_context,
    _create_cli_group,
    main,
)
from ._convert import (
    FORMAT_OPTION_CHOICES,
    convert_changelog,
    convert_cmd,
    init_changelog,
    init_cmd,
    render_changelog,
    render_cmd,
    schema_cmd,
    write_schema,
)
from ._validate import run_validate, validate_cmd
from ._add import add_change, add_cmd
from ._release import create_release, release_cmd, yank_cmd, yank_release

# Create the main CLI group
cli = _create_cli_group()

# Register all commands with the cli group
cli.add_command(init_cmd)
cli.add_command(convert_cmd)
cli.add_command(validate_cmd)
cli.add_command(schema_cmd)
cli.add_command(render_cmd)
cli.add_command(add_cmd)
cli.add_command(release_cmd)
cli.add_command(yank_cmd)


__all__ = [
    # Core
    "cli",
    "main",
    "CLIContext",
    "INFO_PREFIX",
    "SOURCE_STEM",
    "autodetect_source",
    "create_cli_context",
    # Source commands
    "FORMAT_OPTION_CHOICES",
    "init_changelog",
    "convert_changelog",
    "render_changelog",
    "write_schema",
    "init_cmd",
    "convert_cmd",
    "render_cmd",
    "schema_cmd",
    # Validate
    "run_validate",
    "validate_cmd",
    # Editing
    "add_change",
    "add_cmd",
    "create_release",
    "yank_release",
    "release_cmd",
    "yank_cmd",
]
