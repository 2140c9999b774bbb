"""Abstract base class for package manager backends.

This module defines the Backend interface that every package manager
adapter implements, together with the diff operations shared by all of
them.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable, Sequence
from typing import ClassVar

from pkgdecl.backends.errors import (
    CommandSpawnError,
    OutputParseError,
    QueryFailedError,
    UnsupportedOperationError,
)
from pkgdecl.models.group import Group
from pkgdecl.models.package import Package
from pkgdecl.utils.shell import run_command, run_interactive

logger = logging.getLogger(__name__)


class Backend(ABC):
    """Abstract base class for all package manager backends.

    A backend knows how to query one package manager for installed
    packages and how to drive it to install, remove, or re-mark
    packages. The declared packages for its section are loaded from the
    groups before any diff is computed.

    Class constants describe the package manager; ``binary`` and
    ``remove_args`` can be overridden per instance from the config.

    Attributes:
        packages: Declared packages for this backend, filled by load().

    Example:
        >>> backend = Flatpak()
        >>> backend.load(groups)
        >>> for package in backend.get_missing_packages_sorted():
        ...     print(package)
    """

    BINARY: ClassVar[str]
    SECTION: ClassVar[str]

    SWITCHES_INSTALL: ClassVar[tuple[str, ...]] = ()
    SWITCHES_INFO: ClassVar[tuple[str, ...]] = ()
    SWITCHES_MAKE_DEPENDENCY: ClassVar[tuple[str, ...]] = ()
    SWITCHES_NOCONFIRM: ClassVar[tuple[str, ...]] = ()
    SWITCHES_REMOVE: ClassVar[tuple[str, ...]] = ()

    SUPPORTS_AS_DEPENDENCY: ClassVar[bool] = False

    # Prefix mutating commands with sudo
    NEEDS_ROOT: ClassVar[bool] = False

    _QUERY_TIMEOUT: ClassVar[float] = 120.0

    def __init__(self, binary: str | None = None, remove_args: Sequence[str] = ()) -> None:
        """Initialize the backend.

        Args:
            binary: Override for the binary used to install and remove.
            remove_args: Extra arguments passed on every removal.
        """
        self._binary = binary or self.BINARY
        self._remove_args = tuple(remove_args)
        self.packages: set[Package] = set()

    def get_binary(self) -> str:
        """Return the binary used for install, remove, and re-mark commands."""
        return self._binary

    def get_section(self) -> str:
        """Return the group file section handled by this backend."""
        return self.SECTION

    def load(self, groups: Iterable[Group]) -> None:
        """Collect the packages every group declares for this backend.

        Replaces the previous working set, so calling it again with the
        same groups has no further effect.

        Args:
            groups: All loaded groups.
        """
        declared: set[Package] = set()
        for group in groups:
            declared.update(group.packages_for(self.SECTION))
        self.packages = declared
        logger.debug("Loaded %d declared package(s) for %s", len(declared), self.SECTION)

    @abstractmethod
    def get_all_installed_packages(self) -> set[Package]:
        """Query every package installed through this package manager.

        Returns:
            Set of installed packages (may be empty).

        Raises:
            BackendError: If the query cannot be run or parsed.
        """

    def get_explicitly_installed_packages(self) -> set[Package]:
        """Query packages the user installed on purpose.

        Backends without a dependency distinction report everything.

        Raises:
            BackendError: If the query cannot be run or parsed.
        """
        return self.get_all_installed_packages()

    def get_missing_packages_sorted(self) -> list[Package]:
        """Return declared packages that are not installed, sorted.

        Raises:
            BackendError: If the installed packages cannot be queried.
        """
        installed = {self._diff_key(p) for p in self.get_all_installed_packages()}
        return sorted(p for p in self.packages if self._diff_key(p) not in installed)

    def get_unmanaged_packages_sorted(self) -> list[Package]:
        """Return explicitly installed packages no group declares, sorted.

        Raises:
            BackendError: If the installed packages cannot be queried.
        """
        declared = {self._diff_key(p) for p in self.packages}
        explicit = self.get_explicitly_installed_packages()
        return sorted(p for p in explicit if self._diff_key(p) not in declared)

    def install_packages(self, packages: Sequence[Package], noconfirm: bool = False) -> int:
        """Install exactly the given packages.

        Args:
            packages: Packages to install.
            noconfirm: If True, tell the package manager not to ask.

        Returns:
            Exit code of the package manager.

        Raises:
            CommandSpawnError: If the binary cannot be started.
        """
        if not packages:
            return 0
        args = self._action_command(self.SWITCHES_INSTALL, packages, noconfirm=noconfirm)
        return self._run_action(args)

    def remove_unmanaged_packages(
        self,
        packages: Sequence[Package],
        noconfirm: bool = False,
    ) -> int:
        """Remove the given packages, honoring the configured removal args.

        Args:
            packages: Packages to remove.
            noconfirm: If True, tell the package manager not to ask.

        Returns:
            Exit code of the package manager.

        Raises:
            CommandSpawnError: If the binary cannot be started.
        """
        if not packages:
            return 0
        args = self._action_command(
            self.SWITCHES_REMOVE,
            packages,
            extra=self._remove_args,
            noconfirm=noconfirm,
        )
        return self._run_action(args)

    def make_dependency(self, packages: Sequence[Package]) -> int:
        """Mark installed packages as installed as a dependency.

        Args:
            packages: Packages to re-mark.

        Returns:
            Exit code of the package manager.

        Raises:
            UnsupportedOperationError: If the backend has no such concept.
            CommandSpawnError: If the binary cannot be started.
        """
        if not self.SUPPORTS_AS_DEPENDENCY:
            msg = f"{self.get_binary()} cannot mark packages as dependencies"
            raise UnsupportedOperationError(msg)
        if not packages:
            return 0
        args = self._action_command(self.SWITCHES_MAKE_DEPENDENCY, packages)
        return self._run_action(args)

    def _diff_key(self, package: Package) -> Hashable:
        """Return the identity a package is compared on when diffing."""
        return package

    def _package_arg(self, package: Package) -> str:
        """Render a package as a command line argument."""
        return str(package)

    def _action_command(
        self,
        switches: Sequence[str],
        packages: Iterable[Package],
        *,
        extra: Sequence[str] = (),
        noconfirm: bool = False,
    ) -> list[str]:
        """Build the argument list for a mutating command."""
        args = ["sudo"] if self.NEEDS_ROOT else []
        args.append(self.get_binary())
        args.extend(switches)
        args.extend(extra)
        if noconfirm:
            args.extend(self.SWITCHES_NOCONFIRM)
        args.extend(self._package_arg(p) for p in packages)
        return args

    def _run_action(self, args: list[str]) -> int:
        """Run a mutating command on the user's terminal.

        Raises:
            CommandSpawnError: If the command cannot be started.
        """
        logger.info("Running %s", " ".join(args))
        try:
            return run_interactive(args)
        except OSError as e:
            msg = f"could not run {args[0]}: {e}"
            raise CommandSpawnError(msg) from e

    def _query(self, args: Sequence[str]) -> list[str]:
        """Run a query command and return its non-blank output lines.

        Args:
            args: Command and arguments to execute.

        Returns:
            Stripped, non-empty lines of standard output.

        Raises:
            CommandSpawnError: If the command cannot be started or times out.
            OutputParseError: If the output is not valid UTF-8.
            QueryFailedError: If the command exits with a non-zero status.
        """
        logger.debug("Querying %s: %s", self.SECTION, " ".join(args))
        try:
            result = run_command(list(args), timeout=self._QUERY_TIMEOUT)
        except UnicodeDecodeError as e:
            msg = f"output of '{' '.join(args)}' is not valid UTF-8"
            raise OutputParseError(msg) from e
        except (OSError, subprocess.SubprocessError) as e:
            msg = f"could not run {args[0]}: {e}"
            raise CommandSpawnError(msg) from e

        if not result.success:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            msg = f"'{' '.join(args)}' failed: {detail}"
            raise QueryFailedError(msg)

        return [line.strip() for line in result.stdout.splitlines() if line.strip()]
