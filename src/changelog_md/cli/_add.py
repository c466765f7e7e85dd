"""Add command for recording unreleased changes."""

from __future__ import annotations

import click

from ..model import CATEGORIES
from ..utils import format_bold, log_success
from ._core import CLIContext

__all__ = [
    "add_change",
    "add_cmd",
]


def add_change(ctx: CLIContext, *, category: str, description: str) -> None:
    """Append a change to the unreleased section of the source."""

    description = description.strip()
    if not description:
        raise click.ClickException("Change description cannot be empty.")
    path, changelog = ctx.load()
    try:
        changelog.unreleased.push(category, description)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.write(changelog, path)
    log_success(f"added {format_bold(category)} change to {path}")


@click.command("add")
@click.argument("category", type=click.Choice(CATEGORIES, case_sensitive=False))
@click.argument("description")
@click.pass_obj
def add_cmd(ctx: CLIContext, category: str, description: str) -> None:
    """Add an unreleased change: added, changed, deprecated, removed, fixed, or security."""

    add_change(ctx, category=category.lower(), description=description)
