"""Shared types and helpers for CLI commands.

Loads configuration, backends, and groups for the commands that
reconcile packages, converting failures into user-facing errors.
"""

from typing import Annotated

import typer
from rich.markup import escape

from pkgdecl.backends import Backend, get_backends, get_sections
from pkgdecl.core.config import ConfigError, load_config
from pkgdecl.core.groups import GroupError, load_groups
from pkgdecl.core.todo import DiffKind, ToDoPerBackend
from pkgdecl.models.group import Group
from pkgdecl.models.package import MissingRepoError
from pkgdecl.utils.formatting import print_error

BackendOption = Annotated[
    list[str] | None,
    typer.Option(
        "--backend",
        "-b",
        help="Restrict to a backend section (repeatable).",
    ),
]


def prepare(sections: list[str] | None = None) -> tuple[list[Backend], set[Group]]:
    """Load config, instantiate backends, and load all groups.

    Args:
        sections: Backend sections to restrict to. None selects all.

    Returns:
        Tuple of (backends, groups).

    Raises:
        typer.Exit: If any of them cannot be loaded.
    """
    try:
        config = load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    try:
        backends = get_backends(config, sections)
    except ValueError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    try:
        groups = load_groups(get_sections(), warn_not_symlinks=config.warn_not_symlinks)
    except GroupError as e:
        print_error(f"Failed to load groups: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    return backends, groups


def collect(sections: list[str] | None, kind: DiffKind) -> ToDoPerBackend:
    """Collect the diff of every selected backend.

    Raises:
        typer.Exit: If loading fails or a declaration is malformed.
    """
    backends, groups = prepare(sections)
    try:
        return ToDoPerBackend.collect(backends, groups, kind)
    except MissingRepoError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e


def confirm(question: str) -> bool:
    """Ask the user a yes/no question, defaulting to no."""
    return typer.confirm(question, default=False)
