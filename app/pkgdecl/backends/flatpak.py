"""Flatpak backend implementation.

Applications are considered explicitly installed; runtimes are pulled
in by applications and only count as installed.
"""

from pkgdecl.backends.base import Backend
from pkgdecl.models.package import Package


class Flatpak(Backend):
    """Backend for Flatpak applications and runtimes."""

    BINARY = "flatpak"
    SECTION = "flatpak"

    SWITCHES_INSTALL = ("install",)
    SWITCHES_INFO = ("list", "--columns=application")
    SWITCHES_NOCONFIRM = ("-y",)
    SWITCHES_REMOVE = ("uninstall",)

    SUPPORTS_AS_DEPENDENCY = False

    def get_all_installed_packages(self) -> set[Package]:
        """Query installed applications and runtimes."""
        return self._list()

    def get_explicitly_installed_packages(self) -> set[Package]:
        """Query installed applications only."""
        return self._list("--app")

    def _list(self, *extra: str) -> set[Package]:
        args = [self.get_binary(), *self.SWITCHES_INFO, *extra]
        # Only the first column is the application ID
        return {Package(name=line.split()[0]) for line in self._query(args)}

    def _package_arg(self, package: Package) -> str:
        return package.name
