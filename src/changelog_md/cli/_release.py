"""Release and yank commands."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import click

from ..errors import DuplicateVersionError, VersionNotFoundError
from ..model import Version
from ..utils import format_bold, log_info, log_success, log_warning
from ._core import CLIContext

__all__ = [
    "create_release",
    "yank_release",
    "release_cmd",
    "yank_cmd",
]


def create_release(
    ctx: CLIContext,
    *,
    version: str,
    description: Optional[str] = None,
    tag: Optional[str] = None,
    release_date: Optional[datetime] = None,
) -> Version:
    """Move unreleased changes into a new version and write the source."""

    version = version.strip()
    if not version:
        raise click.ClickException("Release version cannot be empty.")
    path, changelog = ctx.load()
    if changelog.unreleased.is_empty():
        log_warning(f"no unreleased changes, {version} will be empty.")
    try:
        released = changelog.release(
            version,
            tag=tag,
            date=release_date.date().isoformat() if release_date else None,
            description=description,
        )
    except DuplicateVersionError as exc:
        raise click.ClickException(f"Cannot release: {exc}.") from exc
    ctx.write(changelog, path)
    log_info(f"tag {format_bold(released.tag)}, date {released.date}")
    log_success(f"released {format_bold(released.version)} in {path}")
    return released


def yank_release(ctx: CLIContext, *, version: str, reason: str) -> Version:
    """Mark a released version as yanked and write the source."""

    path, changelog = ctx.load()
    try:
        yanked = changelog.yank(version, reason)
    except VersionNotFoundError as exc:
        raise click.ClickException(f"Cannot yank: {exc}.") from exc
    ctx.write(changelog, path)
    log_success(f"yanked {format_bold(version)} in {path}")
    return yanked


@click.command("release")
@click.argument("version")
@click.argument("description", required=False)
@click.option("--tag", help="Git tag of the release. Defaults to the version.")
@click.option(
    "--date",
    "release_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Release date (YYYY-MM-DD). Defaults to today.",
)
@click.pass_obj
def release_cmd(
    ctx: CLIContext,
    version: str,
    description: Optional[str],
    tag: Optional[str],
    release_date: Optional[datetime],
) -> None:
    """Release all unreleased changes as VERSION."""

    create_release(
        ctx,
        version=version,
        description=description,
        tag=tag,
        release_date=release_date,
    )


@click.command("yank")
@click.argument("version")
@click.argument("reason")
@click.pass_obj
def yank_cmd(ctx: CLIContext, version: str, reason: str) -> None:
    """Mark VERSION as yanked, giving the REASON."""

    yank_release(ctx, version=version, reason=reason)
