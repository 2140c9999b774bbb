"""Clean command implementation.

Removes explicitly installed packages that no group declares.
"""

from typing import Annotated

import typer

from pkgdecl.cli.display import create_results_table, print_results_summary
from pkgdecl.cli.types import BackendOption, collect, confirm
from pkgdecl.core.todo import DiffKind
from pkgdecl.utils.formatting import console, print_info, print_success

app = typer.Typer(
    help="Remove packages that are installed but not declared.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def clean_packages(
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
    """Remove unmanaged packages.

    Examples:
        pkgdecl clean                  # Remove everything unmanaged
        pkgdecl clean -b flatpak       # Only flatpak applications
    """
    if ctx.invoked_subcommand is not None:
        return

    todo = collect(backend, DiffKind.UNMANAGED)

    if todo.nothing_to_do_for_all_backends():
        print_success("Nothing to do.")
        return

    console.print("Would remove the following packages:\n")
    todo.show()

    if not yes and not confirm(f"\nRemove {todo.total_packages} package(s)?"):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    outcomes = todo.remove_unmanaged_packages(noconfirm=noconfirm)

    console.print(create_results_table(outcomes))
    print_results_summary(outcomes)

    if any(o.failed for o in outcomes):
        raise typer.Exit(code=1)
