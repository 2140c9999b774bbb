"""APT backend implementation.

Queries installed packages with dpkg-query and apt-mark, and installs
or removes them with apt-get.
"""

import logging
from collections.abc import Hashable, Sequence

from pkgdecl.backends.base import Backend
from pkgdecl.models.package import Package

logger = logging.getLogger(__name__)


class Apt(Backend):
    """Backend for APT/dpkg packages.

    Uses dpkg-query to list installed packages and apt-mark to tell
    manually installed packages from automatically installed ones.
    Mutating commands require sudo.
    """

    BINARY = "apt-get"
    SECTION = "apt"

    SWITCHES_INSTALL = ("install",)
    SWITCHES_INFO = ("-W", "-f", "${Package}\\n")
    SWITCHES_MAKE_DEPENDENCY = ("auto",)
    SWITCHES_NOCONFIRM = ("-y",)
    SWITCHES_REMOVE = ("remove",)

    SUPPORTS_AS_DEPENDENCY = True
    NEEDS_ROOT = True

    def get_all_installed_packages(self) -> set[Package]:
        """Query every package dpkg knows as installed.

        Raises:
            BackendError: If dpkg-query cannot be run.
        """
        return {Package(name=name) for name in self._query(["dpkg-query", *self.SWITCHES_INFO])}

    def get_explicitly_installed_packages(self) -> set[Package]:
        """Query installed packages not marked as automatically installed.

        Raises:
            BackendError: If dpkg-query or apt-mark cannot be run.
        """
        auto = set(self._query(["apt-mark", "showauto"]))
        logger.debug("apt-mark reports %d auto-installed package(s)", len(auto))
        return {p for p in self.get_all_installed_packages() if p.name not in auto}

    def make_dependency(self, packages: Sequence[Package]) -> int:
        """Mark packages as automatically installed using apt-mark."""
        if not packages:
            return 0
        args = ["sudo", "apt-mark", *self.SWITCHES_MAKE_DEPENDENCY]
        args.extend(p.name for p in packages)
        return self._run_action(args)

    def _diff_key(self, package: Package) -> Hashable:
        return package.name

    def _package_arg(self, package: Package) -> str:
        return package.name
