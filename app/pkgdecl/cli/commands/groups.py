"""Group inspection and management commands."""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from pkgdecl.backends import get_sections
from pkgdecl.core.groups import (
    GroupError,
    find_groups,
    group_paths,
    import_groups,
    load_groups,
    new_groups,
    remove_groups,
    search_packages,
)
from pkgdecl.models.group import Group
from pkgdecl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Inspect and manage declared groups.",
    no_args_is_help=True,
)

GroupNames = Annotated[list[str], typer.Argument(help="Group names.")]


def _load() -> set[Group]:
    try:
        return load_groups(get_sections())
    except GroupError as e:
        print_error(f"Failed to load groups: {escape(str(e))}")
        raise typer.Exit(code=1) from e


def _edit(paths: list[Path]) -> None:
    """Open group files in the user's editor, one after the other."""
    for path in paths:
        typer.edit(filename=str(path))


@app.command("list")
def list_groups() -> None:
    """List the names of all groups."""
    for group in sorted(_load()):
        console.print(group.name, highlight=False, markup=False)


@app.command("show")
def show_groups(names: GroupNames) -> None:
    """Show the packages declared by one or more groups."""
    try:
        groups = find_groups(_load(), names)
    except GroupError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    for index, group in enumerate(groups):
        if len(groups) > 1:
            console.print(f"[bold_header]{escape(group.name)}[/bold_header]")
            console.print("-" * len(group.name), markup=False)
        if group.is_empty:
            console.print("[muted](no packages)[/muted]")
        else:
            console.print(str(group), highlight=False, markup=False)
        if index < len(groups) - 1:
            console.print()


@app.command("search")
def search(
    pattern: Annotated[str, typer.Argument(help="Regular expression to search for.")],
) -> None:
    """Find declared packages matching a regular expression.

    Examples:
        pkgdecl groups search clippy
        pkgdecl groups search '^toolchain/'
    """
    try:
        matches = search_packages(_load(), pattern)
    except GroupError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    if not matches:
        print_info(f"No declared package matches '{escape(pattern)}'.")
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold_header", border_style="border")
    table.add_column("Group")
    table.add_column("Backend")
    table.add_column("Package", style="bold")
    for group, section, package in matches:
        table.add_row(escape(group.name), section, escape(str(package)))
    console.print(table)


@app.command("new")
def new(
    names: GroupNames,
    edit: Annotated[
        bool,
        typer.Option(
            "--edit",
            "-e",
            help="Open the new group files in $EDITOR.",
        ),
    ] = False,
) -> None:
    """Create empty group files."""
    try:
        paths = new_groups(names)
    except GroupError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    for path in paths:
        print_success(f"Created group {escape(path.name)}")

    if edit:
        _edit(paths)


@app.command("edit")
def edit_groups(names: GroupNames) -> None:
    """Open existing group files in $EDITOR."""
    try:
        paths = group_paths(names)
    except GroupError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    for path in paths:
        if not path.is_file():
            print_error(f"Group {escape(path.name)} not found under {escape(str(path.parent))}")
            raise typer.Exit(code=1)

    _edit(paths)


@app.command("import")
def import_files(
    files: Annotated[list[Path], typer.Argument(help="Group files to link into the group dir.")],
) -> None:
    """Import group files by symlinking them into the group directory.

    The files stay where they are, for example in a dotfiles repository;
    each becomes a group named after the file.
    """
    try:
        linked = import_groups(files)
    except GroupError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    for link in linked:
        print_success(f"Imported group {escape(link.name)}")


@app.command("remove")
def remove(names: GroupNames) -> None:
    """Delete group files (or the symlinks pointing to them)."""
    try:
        paths = remove_groups(names)
    except GroupError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    for path in paths:
        print_success(f"Removed group {escape(path.name)}")
