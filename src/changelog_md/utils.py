"""Shared utilities for logging and repository detection."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

CHECKMARK = "\033[92;1m✔\033[0m"
CROSS = "\033[31m✘\033[0m"
INFO = "\033[94;1mi\033[0m"
WARNING = "○"
DEBUG_PREFIX = "\033[95m◆\033[0m"

CHECKMARK_PREFIX = f"{CHECKMARK} "
CROSS_PREFIX = f"{CROSS} "
INFO_PREFIX = f"{INFO} "
WARNING_PREFIX = f"{WARNING} "
DEBUG_PREFIX_WITH_SPACE = f"{DEBUG_PREFIX} "
BOLD = "\033[1m"
RESET = "\033[0m"

_LOGGER_NAME = "changelog_md"
_LOGGER = logging.getLogger(_LOGGER_NAME)


def configure_logging(debug: bool = False) -> logging.Logger:
    """Configure the shared logger used across the CLI."""
    level = logging.DEBUG if debug else logging.INFO
    _LOGGER.setLevel(level)
    while _LOGGER.handlers:
        handler = _LOGGER.handlers.pop()
        handler.close()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)
    _LOGGER.addHandler(handler)
    _LOGGER.propagate = False
    return _LOGGER


def _log(prefix: str, message: str, level: int) -> None:
    logger = logging.getLogger(_LOGGER_NAME)
    lines = message.splitlines() or [""]
    for line in lines:
        if line:
            logger.log(level, f"{prefix}{line}")
        else:
            logger.log(level, prefix.rstrip())


def log_info(message: str) -> None:
    """Log an informational message with the standardized prefix."""
    _log(INFO_PREFIX, message, logging.INFO)


def log_success(message: str) -> None:
    """Log a success message with the standardized prefix."""
    _log(CHECKMARK_PREFIX, message, logging.INFO)


def log_error(message: str) -> None:
    """Log an error message with the standardized prefix."""
    _log(CROSS_PREFIX, message, logging.ERROR)


def log_warning(message: str) -> None:
    """Log a warning message with the standardized prefix."""
    _log(WARNING_PREFIX, message, logging.WARNING)


def log_debug(message: str) -> None:
    """Log a debug message with the standardized prefix."""
    _log(DEBUG_PREFIX_WITH_SPACE, message, logging.DEBUG)


def abort_on_user_interrupt(exc: BaseException | None = None) -> NoReturn:
    """Log a standardized cancellation message and exit the command."""

    log_error("operation cancelled by user (Ctrl+C).")
    raise click.exceptions.Exit(130) from exc


def format_bold(text: str) -> str:
    """Return text wrapped in ANSI bold styling."""
    return f"{BOLD}{text}{RESET}"


def emit_output(content: str, *, newline: bool = True) -> None:
    """Emit raw command output to stdout for machine consumption."""
    click.echo(content, nl=newline, err=False)


def remote_to_web_url(url: str) -> Optional[str]:
    """Convert a git remote URL into a browsable https URL.

    Handles scp-like (``git@host:owner/repo.git``), ``ssh://`` and ``https://``
    remotes. Returns None for anything else, such as local paths.
    """
    url = url.strip()
    if not url:
        return None
    if url.endswith(".git"):
        url = url[: -len(".git")]
    url = url.rstrip("/")
    if url.startswith("git@"):
        host, _, path = url[len("git@") :].partition(":")
        if not host or not path:
            return None
        return f"https://{host}/{path}"
    if url.startswith("ssh://"):
        remainder = url[len("ssh://") :]
        _, _, remainder = remainder.rpartition("@")
        host, _, path = remainder.partition("/")
        host = host.split(":", 1)[0]
        if not host or not path:
            return None
        return f"https://{host}/{path}"
    if url.startswith("https://") or url.startswith("http://"):
        scheme, _, remainder = url.partition("://")
        # Drop embedded credentials.
        _, _, remainder = remainder.rpartition("@")
        return f"{scheme}://{remainder}"
    return None


def guess_repository_url(project_root: Path) -> Optional[str]:
    """Return the web URL of the ``origin`` remote, if available."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            cwd=str(project_root),
            check=True,
            capture_output=True,
            text=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        log_debug("no git remote 'origin' found.")
        return None
    return remote_to_web_url(result.stdout)
