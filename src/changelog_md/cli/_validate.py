"""Validate command for the changelog CLI."""

from __future__ import annotations

import click

from ..codec import load_path
from ..errors import ChangelogError
from ..utils import log_error, log_success
from ._core import CLIContext

__all__ = [
    "run_validate",
    "validate_cmd",
]


def run_validate(ctx: CLIContext) -> None:
    """Python wrapper for validating the changelog source."""

    path = ctx.resolve_source()
    try:
        changelog = load_path(path)
    except (ChangelogError, OSError) as exc:
        log_error(f"issue at {path}: {exc}")
        raise SystemExit(1) from exc
    log_success(f"no issues found in {path} ({len(changelog.versions)} versions)")


@click.command("validate")
@click.pass_obj
def validate_cmd(ctx: CLIContext) -> None:
    """Validate a CHANGELOG source against the schema."""

    run_validate(ctx)
