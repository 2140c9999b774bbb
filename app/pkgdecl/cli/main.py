"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from pkgdecl import __version__
from pkgdecl.cli.commands import clean, config, groups, review, sync, unmanaged
from pkgdecl.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="pkgdecl",
    help="Declarative package management across package managers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pkgdecl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log debug messages.
        quiet: Only log errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress warnings.",
        ),
    ] = False,
) -> None:
    """pkgdecl - Declarative package management across package managers.

    Declare packages in group files, one section per package manager,
    and keep every package manager in line with them.
    """
    configure_logging(verbose, quiet)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(sync.app, name="sync")
app.add_typer(clean.app, name="clean")
app.add_typer(unmanaged.app, name="unmanaged")
app.add_typer(review.app, name="review")
app.add_typer(groups.app, name="groups")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
