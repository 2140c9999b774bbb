"""CLI package for pkgdecl.

This package contains the Typer application and all subcommands.
"""

from pkgdecl.cli.main import app

__all__ = ["app"]
