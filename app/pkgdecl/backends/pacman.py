"""Pacman backend implementation.

Queries the local package database with pacman and delegates install,
removal, and re-marking to an AUR helper (paru by default), which
handles privilege escalation itself.
"""

from collections.abc import Hashable

from pkgdecl.backends.base import Backend
from pkgdecl.models.package import Package


class Pacman(Backend):
    """Backend for pacman and AUR packages.

    Declarations may pin a repository (``extra/ripgrep``); the pin is
    passed to the helper on install but ignored when comparing against
    the installed packages, which pacman reports by name only.
    """

    BINARY = "paru"
    SECTION = "pacman"

    # Queries always go to pacman itself, whatever helper is configured
    QUERY_BINARY = "pacman"

    SWITCHES_INSTALL = ("--sync",)
    SWITCHES_INFO = ("--query", "--quiet")
    SWITCHES_MAKE_DEPENDENCY = ("--database", "--asdeps")
    SWITCHES_NOCONFIRM = ("--noconfirm",)
    SWITCHES_REMOVE = ("--remove", "--recursive")

    SUPPORTS_AS_DEPENDENCY = True

    def get_all_installed_packages(self) -> set[Package]:
        """Query every installed package."""
        lines = self._query([self.QUERY_BINARY, *self.SWITCHES_INFO])
        return {Package(name=name) for name in lines}

    def get_explicitly_installed_packages(self) -> set[Package]:
        """Query packages installed explicitly rather than as dependencies."""
        lines = self._query([self.QUERY_BINARY, *self.SWITCHES_INFO, "--explicit"])
        return {Package(name=name) for name in lines}

    def _diff_key(self, package: Package) -> Hashable:
        return package.name
