"""Rustup backend implementation.

Manages Rust toolchains and their components. Packages live in a
two-level namespace:

- ``toolchain/<toolchain>``, e.g. ``toolchain/stable``
- ``component/<toolchain>/<component>``, e.g. ``component/stable/clippy``
"""

import logging
from collections.abc import Iterable, Sequence

from pkgdecl.backends.base import Backend
from pkgdecl.backends.errors import OutputParseError, UnsupportedOperationError
from pkgdecl.models.group import Group
from pkgdecl.models.package import MissingRepoError, Package

logger = logging.getLogger(__name__)

TOOLCHAIN = "toolchain"
COMPONENT = "component"

# Components whose name is the first hyphen-separated segment of the
# installed-components output. Everything else is assumed to span two
# segments (rust-src, rust-analyzer, llvm-tools, ...). Component names
# following neither convention are not recognized.
KNOWN_COMPONENTS: frozenset[str] = frozenset({"cargo", "rustfmt", "clippy", "miri", "rls", "rustc"})

# Printed by recent rustup versions instead of an empty list
_NO_TOOLCHAINS = "no installed toolchains"


class Rustup(Backend):
    """Backend for rustup toolchains and components.

    Toolchains are always installed before components, since a
    component cannot be added to a toolchain that does not exist yet.
    Removal runs in the opposite order.
    """

    BINARY = "rustup"
    SECTION = "rustup"

    SWITCHES_INSTALL = ("component", "add")
    SWITCHES_INFO = ("component", "list", "--installed")
    SWITCHES_REMOVE = ("component", "remove")

    SUPPORTS_AS_DEPENDENCY = False

    def load(self, groups: Iterable[Group]) -> None:
        """Load declared packages, validating their namespace.

        Raises:
            MissingRepoError: If a declared package is not tagged as a
                toolchain or a component.
        """
        super().load(groups)
        for package in self.packages:
            _split_package(package)

    def get_all_installed_packages(self) -> set[Package]:
        """Query installed toolchains and the components of each.

        Raises:
            BackendError: If rustup cannot be run or its output parsed.
        """
        packages: set[Package] = set()
        for toolchain, full_name in self._get_installed_toolchains():
            packages.add(Package(name=toolchain, repo=TOOLCHAIN))
            for component in self._get_installed_components(full_name):
                packages.add(Package(name=f"{toolchain}/{component}", repo=COMPONENT))

        return packages

    def install_packages(self, packages: Sequence[Package], noconfirm: bool = False) -> int:
        """Install toolchains first, then components.

        Stops at the first failing command and returns its exit code.
        Toolchains and components that were already installed stay in
        place.

        Args:
            packages: Toolchain and component packages to install.
            noconfirm: Unused, rustup does not prompt.

        Returns:
            Exit code of the first failing command, or 0.

        Raises:
            MissingRepoError: If a package is not tagged as toolchain or component.
        """
        toolchains, components = _partition(packages)

        for toolchain in toolchains:
            logger.info("Installing toolchain %s", toolchain)
            returncode = self._run_action([self.get_binary(), "toolchain", "install", toolchain])
            if returncode != 0:
                return returncode

        for toolchain, component in components:
            logger.info("Installing component %s for toolchain %s", component, toolchain)
            returncode = self._run_action(
                [self.get_binary(), *self.SWITCHES_INSTALL, "--toolchain", toolchain, component]
            )
            if returncode != 0:
                return returncode

        return 0

    def remove_unmanaged_packages(
        self,
        packages: Sequence[Package],
        noconfirm: bool = False,
    ) -> int:
        """Remove components first, then toolchains.

        Args:
            packages: Toolchain and component packages to remove.
            noconfirm: Unused, rustup does not prompt.

        Returns:
            Exit code of the first failing command, or 0.

        Raises:
            MissingRepoError: If a package is not tagged as toolchain or component.
        """
        toolchains, components = _partition(packages)

        for toolchain, component in components:
            logger.info("Removing component %s from toolchain %s", component, toolchain)
            returncode = self._run_action(
                [
                    self.get_binary(),
                    *self.SWITCHES_REMOVE,
                    *self._remove_args,
                    "--toolchain",
                    toolchain,
                    component,
                ]
            )
            if returncode != 0:
                return returncode

        for toolchain in toolchains:
            logger.info("Uninstalling toolchain %s", toolchain)
            returncode = self._run_action([self.get_binary(), "toolchain", "uninstall", toolchain])
            if returncode != 0:
                return returncode

        return 0

    def make_dependency(self, packages: Sequence[Package]) -> int:
        """Always fails: rustup has no notion of dependency installs.

        Raises:
            UnsupportedOperationError: Always.
        """
        msg = f"{self.get_binary()} cannot mark packages as dependencies"
        raise UnsupportedOperationError(msg)

    def _get_installed_toolchains(self) -> list[tuple[str, str]]:
        """Return ``(id, full name)`` for every installed toolchain.

        The full name is the first word of a ``rustup toolchain list``
        line and is what ``--toolchain`` accepts. The id is the full name
        truncated at the first hyphen:
        ``nightly-2024-01-01-x86_64-unknown-linux-gnu`` has the id
        ``nightly``. Several toolchains may share one id.
        """
        toolchains: list[tuple[str, str]] = []
        for line in self._query([self.get_binary(), "toolchain", "list"]):
            if line == _NO_TOOLCHAINS:
                continue
            full_name = line.split()[0]
            toolchains.append((full_name.split("-", 1)[0], full_name))
        return toolchains

    def _get_installed_components(self, full_name: str) -> list[str]:
        """Return the components installed for one toolchain."""
        lines = self._query([self.get_binary(), *self.SWITCHES_INFO, "--toolchain", full_name])
        return [parse_component_line(line) for line in lines]


def parse_component_line(line: str) -> str:
    """Extract the component id from one line of installed-components output.

    Lines look like ``clippy-x86_64-unknown-linux-gnu`` or
    ``rust-src``. The first segment is the id when it is a known
    component; otherwise the first two segments joined with ``-`` are.

    Args:
        line: One line of ``rustup component list --installed``.

    Returns:
        The component id.

    Raises:
        OutputParseError: If the line cannot be split into a component id.
    """
    parts = line.strip().split("-", 2)
    if parts[0] in KNOWN_COMPONENTS:
        return parts[0]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        msg = f"unrecognized rustup component: {line!r}"
        raise OutputParseError(msg)
    return f"{parts[0]}-{parts[1]}"


def _split_package(package: Package) -> tuple[str, str | None]:
    """Split a package into (toolchain, component).

    The component is None for toolchain packages.

    Raises:
        MissingRepoError: If the repo is absent or neither toolchain nor
            component, or a component lacks its toolchain.
    """
    repo = package.require_repo()
    if repo == TOOLCHAIN:
        return package.name, None
    if repo != COMPONENT:
        msg = f"Package '{package}' must be a '{TOOLCHAIN}' or a '{COMPONENT}'"
        raise MissingRepoError(msg)

    toolchain, _, component = package.name.partition("/")
    if not toolchain or not component:
        msg = f"Component '{package}' must be written as {COMPONENT}/<toolchain>/<component>"
        raise MissingRepoError(msg)
    return toolchain, component


def _partition(packages: Iterable[Package]) -> tuple[list[str], list[tuple[str, str]]]:
    """Split packages into toolchains and (toolchain, component) pairs, keeping order."""
    toolchains: list[str] = []
    components: list[tuple[str, str]] = []
    for package in packages:
        toolchain, component = _split_package(package)
        if component is None:
            toolchains.append(toolchain)
        else:
            components.append((toolchain, component))
    return toolchains, components
