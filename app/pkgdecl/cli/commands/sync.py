"""Sync command implementation.

Installs every declared package that is missing from the system.
"""

from typing import Annotated

import typer

from pkgdecl.cli.display import create_results_table, print_results_summary
from pkgdecl.cli.types import BackendOption, collect, confirm
from pkgdecl.core.todo import DiffKind
from pkgdecl.utils.formatting import console, print_info, print_success

app = typer.Typer(
    help="Install packages that are declared but missing.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def sync_packages(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
    noconfirm: Annotated[
        bool,
        typer.Option(
            "--noconfirm",
            help="Tell the package managers not to ask for confirmation.",
        ),
    ] = False,
    backend: BackendOption = None,
) -> None:
    """Install missing packages.

    Compares the packages declared in all groups with what each backend
    reports as installed, shows the difference, and installs it after
    confirmation. A backend that fails is reported; the others still run.

    Examples:
        pkgdecl sync                   # Install everything missing
        pkgdecl sync --yes             # Without asking
        pkgdecl sync -b rustup         # Only the rustup backend
    """
    if ctx.invoked_subcommand is not None:
        return

    todo = collect(backend, DiffKind.MISSING)

    if todo.nothing_to_do_for_all_backends():
        print_success("Nothing to do.")
        return

    console.print("Would install the following packages:\n")
    todo.show()

    if not yes and not confirm(f"\nInstall {todo.total_packages} package(s)?"):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    outcomes = todo.install_missing_packages(noconfirm=noconfirm)

    console.print(create_results_table(outcomes))
    print_results_summary(outcomes)

    if any(o.failed for o in outcomes):
        raise typer.Exit(code=1)
