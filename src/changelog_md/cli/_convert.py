"""Commands that create, convert, and render changelog sources."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click

from ..codec import FORMAT_ALIASES, FORMAT_CHOICES, FORMAT_EXTENSIONS, infer_format, normalize_format
from ..errors import FormatInferenceError
from ..markdown import to_markdown
from ..model import Changelog
from ..schema import json_schema
from ..utils import emit_output, format_bold, guess_repository_url, log_info, log_success
from ._core import CLIContext

__all__ = [
    "FORMAT_OPTION_CHOICES",
    "init_changelog",
    "convert_changelog",
    "render_changelog",
    "write_schema",
    "init_cmd",
    "convert_cmd",
    "render_cmd",
    "schema_cmd",
]

FORMAT_OPTION_CHOICES = list(FORMAT_CHOICES) + list(FORMAT_ALIASES)


def init_changelog(
    ctx: CLIContext,
    *,
    fmt: Optional[str] = None,
    repository: Optional[str] = None,
) -> Path:
    """Write a seed changelog source and return its path."""

    if ctx.source is not None:
        path = ctx.source
        try:
            resolved = normalize_format(fmt) if fmt else infer_format(path)
        except FormatInferenceError as exc:
            raise click.ClickException(str(exc)) from exc
    else:
        resolved = normalize_format(fmt or "yaml")
        path = ctx.working_dir / f"CHANGELOG.{FORMAT_EXTENSIONS[resolved]}"
    if path.exists():
        raise click.ClickException(f"{path} already exists")

    if repository is None:
        repository = guess_repository_url(ctx.working_dir)
        if repository:
            log_info(f"detected repository {format_bold(repository)} from git remote 'origin'.")
    ctx.write(Changelog.default(repository), path, resolved)
    log_success(f"wrote initial {path}")
    return path


def convert_changelog(ctx: CLIContext, *, fmt: str, force: bool = False) -> Path:
    """Write the changelog source in another format next to the original."""

    source, changelog = ctx.load()
    resolved = normalize_format(fmt)
    destination = source.with_suffix(f".{FORMAT_EXTENSIONS[resolved]}")
    if destination.exists() and not force:
        raise click.ClickException(f"{destination} already exists, pass --force to overwrite")
    log_info(f"converting {source} to {destination}")
    ctx.write(changelog, destination, resolved)
    return destination


def render_changelog(ctx: CLIContext, *, destination: Optional[Path] = None) -> Path:
    """Render the changelog source to Markdown and return the written path."""

    source, changelog = ctx.load()
    path = destination or source.with_suffix(".md")
    log_info(f"rendering {source} to {path}")
    try:
        path.write_text(to_markdown(changelog), encoding="utf-8")
    except OSError as exc:
        raise click.ClickException(f"failed to write {path}: {exc}") from exc
    return path


def write_schema(*, destination: Optional[Path] = None, keyed: bool = True) -> None:
    """Print the JSON schema or write it to a file."""

    payload = json.dumps(json_schema(keyed=keyed), indent=2) + "\n"
    if destination is None:
        emit_output(payload, newline=False)
        return
    try:
        destination.write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise click.ClickException(f"failed to write {destination}: {exc}") from exc
    log_success(f"wrote schema to {destination}")


@click.command("init")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(FORMAT_OPTION_CHOICES, case_sensitive=False),
    default=None,
    help="Source format. Defaults to yaml, or the extension of --changelog.",
)
@click.option(
    "--repository",
    help="Repository URL used for revision links. Defaults to the 'origin' git remote.",
)
@click.pass_obj
def init_cmd(ctx: CLIContext, fmt: Optional[str], repository: Optional[str]) -> None:
    """Generate an initial CHANGELOG source."""

    init_changelog(ctx, fmt=fmt, repository=repository)


@click.command("convert")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(FORMAT_OPTION_CHOICES, case_sensitive=False),
    default="yaml",
    show_default=True,
    help="Target format.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing destination file.")
@click.pass_obj
def convert_cmd(ctx: CLIContext, fmt: str, force: bool) -> None:
    """Convert a CHANGELOG source to another format."""

    convert_changelog(ctx, fmt=fmt, force=force)


@click.command("render")
@click.argument(
    "destination",
    required=False,
    type=click.Path(path_type=Path, dir_okay=False),
)
@click.pass_obj
def render_cmd(ctx: CLIContext, destination: Optional[Path]) -> None:
    """Render a CHANGELOG source to Markdown (defaults to CHANGELOG.md)."""

    render_changelog(ctx, destination=destination)


@click.command("schema")
@click.argument(
    "destination",
    required=False,
    type=click.Path(path_type=Path, dir_okay=False),
)
@click.option(
    "--json-array",
    is_flag=True,
    help="Describe versions as an array, the shape used by JSON sources.",
)
def schema_cmd(destination: Optional[Path], json_array: bool) -> None:
    """Print or write the CHANGELOG source JSON schema."""

    write_schema(destination=destination, keyed=not json_array)
