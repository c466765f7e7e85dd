"""Core CLI infrastructure: context, source resolution, and the main entry point."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import click

from .. import __version__ as package_version
from ..codec import EXTENSION_FORMATS, dump_path, load_path
from ..errors import ChangelogError
from ..model import Changelog
from ..utils import (
    INFO_PREFIX,
    abort_on_user_interrupt,
    configure_logging,
    log_debug,
)

__all__ = [
    "CLIContext",
    "INFO_PREFIX",
    "SOURCE_STEM",
    "autodetect_source",
    "create_cli_context",
    "_create_cli_group",
    "main",
]

SOURCE_STEM = "changelog"
SOURCE_ENVVAR = "CHANGELOG_MD_SOURCE"
DEBUG_ENVVAR = "CHANGELOG_MD_DEBUG"


def autodetect_source(directory: Path) -> Optional[Path]:
    """Return the first ``changelog.{yml,yaml,toml,json}`` file in a directory."""
    if not directory.is_dir():
        return None
    for path in sorted(directory.iterdir()):
        if not path.is_file():
            continue
        extension = path.suffix[1:].lower()
        if path.stem.lower() == SOURCE_STEM and extension in EXTENSION_FORMATS:
            return path
    return None


@dataclass
class CLIContext:
    """Shared command context."""

    working_dir: Path
    source: Optional[Path] = None
    _detected: Optional[Path] = field(default=None, repr=False)

    def resolve_source(self) -> Path:
        """Return the explicit source or detect one in the working directory."""
        if self.source is not None:
            return self.source
        if self._detected is None:
            self._detected = autodetect_source(self.working_dir)
            if self._detected is None:
                raise click.ClickException(
                    f"unable to find a CHANGELOG source file in {self.working_dir}; "
                    "pass --changelog or run 'changelog-md init'."
                )
            log_debug(f"detected changelog source: {self._detected}")
        return self._detected

    def load(self) -> tuple[Path, Changelog]:
        """Load the changelog source, turning failures into CLI errors."""
        path = self.resolve_source()
        try:
            return path, load_path(path)
        except (ChangelogError, OSError) as exc:
            raise click.ClickException(f"failed to read {path}: {exc}") from exc

    def write(self, changelog: Changelog, path: Path, fmt: Optional[str] = None) -> None:
        """Encode and write a changelog, turning failures into CLI errors."""
        try:
            dump_path(changelog, path, fmt)
        except (ChangelogError, OSError) as exc:
            raise click.ClickException(f"failed to write {path}: {exc}") from exc


def create_cli_context(
    *,
    source: Optional[Path] = None,
    working_dir: Optional[Path] = None,
    debug: bool = False,
) -> CLIContext:
    """Return a CLIContext using the same resolution logic as the CLI entry point."""

    configure_logging(debug)
    resolved_dir = (working_dir or Path(".")).resolve()
    log_debug(f"working directory: {resolved_dir}")
    if source is not None:
        log_debug(f"using changelog source: {source}")
    return CLIContext(working_dir=resolved_dir, source=source)


def _create_cli_group() -> click.Group:
    """Create the main CLI group. Called after all commands are defined."""

    @click.group(context_settings={"help_option_names": ["-h", "--help"]})
    @click.option(
        "--changelog",
        "source",
        type=click.Path(path_type=Path, dir_okay=False),
        envvar=SOURCE_ENVVAR,
        help="CHANGELOG source file (yml, yaml, toml, or json). Detected when omitted.",
    )
    @click.option(
        "--debug",
        "-d",
        is_flag=True,
        envvar=DEBUG_ENVVAR,
        help="Enable debug logging.",
    )
    @click.pass_context
    def _cli(ctx: click.Context, source: Optional[Path], debug: bool) -> None:
        """Developer-friendly CHANGELOG.md generation."""

        ctx.obj = create_cli_context(source=source, debug=debug)

    return click.version_option(version=package_version)(_cli)


def main(argv: list[str] | None = None) -> int:
    """Entry point for console_scripts."""
    # Import cli here to avoid circular import at module load time
    from . import cli

    args = list(argv) if argv is not None else list(sys.argv[1:])

    try:
        result = cli.main(args=args, prog_name="changelog-md", standalone_mode=False)
    except click.ClickException as exc:
        exc.show(file=sys.stderr)
        exit_code = getattr(exc, "exit_code", 1)
        return exit_code if isinstance(exit_code, int) else 1
    except click.exceptions.Abort:
        return 1
    except KeyboardInterrupt as exc:
        try:
            abort_on_user_interrupt(exc)
        except click.exceptions.Exit as exit_exc:
            exit_code = getattr(exit_exc, "exit_code", 130)
            return exit_code if isinstance(exit_code, int) else 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0
    return result if isinstance(result, int) else 0
