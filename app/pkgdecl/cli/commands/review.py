"""Review command implementation.

Walks through the unmanaged packages and asks what to do with each:
declare it in a group, remove it, or keep it as a dependency.
"""

from typing import Annotated

import typer
from rich.markup import escape

from pkgdecl.backends.base import Backend
from pkgdecl.cli.display import create_results_table, print_results_summary
from pkgdecl.cli.types import BackendOption, confirm, prepare
from pkgdecl.core.groups import GroupError
from pkgdecl.core.review import ReviewPlan
from pkgdecl.core.todo import DiffKind, ToDoPerBackend
from pkgdecl.models.package import MissingRepoError, Package
from pkgdecl.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Decide what to do with each unmanaged package.",
    invoke_without_command=True,
)

ASSIGN, DELETE, DEPENDENCY, SKIP, QUIT = "a", "d", "p", "s", "q"


def _ask_action(backend: Backend, package: Package) -> str:
    choices = [ASSIGN, DELETE]
    hint = "[a]ssign to group, [d]elete"
    if backend.SUPPORTS_AS_DEPENDENCY:
        choices.append(DEPENDENCY)
        hint += ", as de[p]endency"
    choices += [SKIP, QUIT]
    hint += ", [s]kip, [q]uit"

    console.print(f"\n[section]\\[{backend.get_section()}][/section] {escape(str(package))}")
    while True:
        answer = typer.prompt(hint, default=SKIP, show_default=False).strip().lower()
        if answer in choices:
            return answer
        print_warning(f"Unknown answer '{escape(answer)}'")


def _ask_group(names: list[str]) -> str:
    while True:
        answer = typer.prompt("Group").strip()
        if answer in names:
            return answer
        print_warning(f"Unknown group '{escape(answer)}', choose one of: {', '.join(names)}")


def _build_plan(todo: ToDoPerBackend, group_names: list[str]) -> ReviewPlan:
    plan = ReviewPlan()
    for backend, packages in todo:
        for package in packages:
            action = _ask_action(backend, package)
            if action == QUIT:
                return plan
            if action == ASSIGN:
                if not group_names:
                    print_warning("There are no groups to assign to, skipping")
                    continue
                plan.assign(_ask_group(group_names), backend.get_section(), package)
            elif action == DELETE:
                plan.remove(backend, package)
            elif action == DEPENDENCY:
                plan.mark_as_dependency(backend, package)
    return plan


@app.callback(invoke_without_command=True)
def review_packages(
    ctx: typer.Context,
    noconfirm: Annotated[
        bool,
        typer.Option(
            "--noconfirm",
            help="Tell the package managers not to ask for confirmation.",
        ),
    ] = False,
    backend: BackendOption = None,
) -> None:
    """Review unmanaged packages interactively.

    Every decision is collected first and shown as a summary; the group
    files and the system are only changed after confirmation.

    Examples:
        pkgdecl review                 # All backends
        pkgdecl review -b pacman       # Only pacman packages
    """
    if ctx.invoked_subcommand is not None:
        return

    backends, groups = prepare(backend)
    try:
        todo = ToDoPerBackend.collect(backends, groups, DiffKind.UNMANAGED)
    except MissingRepoError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    if todo.nothing_to_do_for_all_backends():
        print_success("No unmanaged packages.")
        return

    plan = _build_plan(todo, sorted(g.name for g in groups))
    if plan.is_empty:
        print_info("Nothing to do.")
        return

    console.print("\nPlanned changes:\n")
    plan.show()

    if not confirm("\nApply these changes?"):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    try:
        outcomes = plan.apply(noconfirm=noconfirm)
    except GroupError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    if plan.assignments:
        print_success(f"Updated {len(plan.assignments)} group file(s).")
    if not outcomes:
        return

    console.print(create_results_table(outcomes))
    print_results_summary(outcomes)

    if any(o.failed for o in outcomes):
        raise typer.Exit(code=1)
