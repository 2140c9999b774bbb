"""Shared Rich display functions for backend outcomes.

Provides the results table and summary printed after sync and clean.
"""

from rich.markup import escape
from rich.table import Table

from pkgdecl.models.outcome import BackendOutcome
from pkgdecl.utils.formatting import console, print_success


def create_results_table(outcomes: list[BackendOutcome]) -> Table:
    """Create a Rich table displaying one row per backend outcome.

    Args:
        outcomes: Outcomes returned by the aggregator.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Backend", width=10)
    table.add_column("Action", width=13)
    table.add_column("Packages", justify="right")
    table.add_column("Message")

    for outcome in outcomes:
        if outcome.success:
            status = "[success]OK[/success]"
            message = ""
        else:
            status = "[error]FAIL[/error]"
            message = outcome.error or "Unknown error"

        table.add_row(
            status,
            outcome.section,
            outcome.action.value,
            str(len(outcome.packages)),
            f"[muted]{escape(message)}[/muted]",
        )

    return table


def print_results_summary(outcomes: list[BackendOutcome]) -> None:
    """Print a summary of backend outcomes.

    Args:
        outcomes: Outcomes returned by the aggregator.
    """
    success_count = sum(1 for o in outcomes if o.success)
    fail_count = sum(1 for o in outcomes if o.failed)

    if fail_count == 0:
        print_success(f"All {success_count} backend(s) completed successfully.")
    else:
        console.print(
            f"\n[success]{success_count} succeeded[/success], [error]{fail_count} failed[/error]"
        )
