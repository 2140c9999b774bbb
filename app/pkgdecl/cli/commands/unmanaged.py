"""Unmanaged command implementation.

Lists explicitly installed packages that no group declares.
"""

import json
from typing import Annotated

import typer

from pkgdecl.cli.types import BackendOption, collect
from pkgdecl.core.todo import DiffKind
from pkgdecl.utils.formatting import console, print_success

app = typer.Typer(
    help="Show packages that are installed but not declared.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_unmanaged(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
    backend: BackendOption = None,
) -> None:
    """Show unmanaged packages per backend.

    Examples:
        pkgdecl unmanaged              # All backends
        pkgdecl unmanaged --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    todo = collect(backend, DiffKind.UNMANAGED)

    if json_output:
        console.print_json(json.dumps(todo.as_dict()))
        return

    if todo.nothing_to_do_for_all_backends():
        print_success("No unmanaged packages.")
        return

    todo.show()
