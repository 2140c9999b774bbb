"""CLI commands for pkgdecl.

This package contains all subcommand implementations.
"""

from pkgdecl.cli.commands import clean, config, groups, review, sync, unmanaged

__all__ = ["clean", "config", "groups", "review", "sync", "unmanaged"]
