"""Cross-backend diff aggregation and execution.

This module collects the per-backend diffs (missing or unmanaged
packages), renders them, and drives installation or removal backend by
backend. A failing backend never stops the others from being evaluated
or acted on.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from enum import Enum
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from pkgdecl.backends.errors import BackendError
from pkgdecl.models.outcome import ActionType, BackendOutcome
from pkgdecl.utils.formatting import console as default_console
from pkgdecl.utils.formatting import err_console, print_warning

if TYPE_CHECKING:
    from pkgdecl.backends.base import Backend
    from pkgdecl.models.group import Group
    from pkgdecl.models.package import Package

logger = logging.getLogger(__name__)

# Set to "1" or "full" to print the whole cause chain of a skipped backend
TRACEBACK_ENV = "PKGDECL_TRACEBACK"
_TRACEBACK_ON = frozenset({"1", "full"})


class DiffKind(Enum):
    """Direction of a per-backend diff.

    Attributes:
        MISSING: Declared in a group but not installed.
        UNMANAGED: Explicitly installed but not declared in any group.
    """

    MISSING = "missing"
    UNMANAGED = "unmanaged"


def error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield an error followed by each exception it was raised from."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def show_error(error: BaseException, backend: Backend) -> None:
    """Report that a backend is skipped because of an error.

    Prints a one-line warning, or the full cause chain when the
    traceback environment toggle is on.

    Args:
        error: The error that made the backend unusable.
        backend: The backend that is skipped.
    """
    section = backend.get_section()
    logger.debug("Skipping backend %s", section, exc_info=error)

    if os.environ.get(TRACEBACK_ENV, "").strip().lower() in _TRACEBACK_ON:
        print_warning(f"skipping backend '{escape(section)}':")
        for err in error_chain(error):
            err_console.print(f"  {err}", highlight=False, markup=False)
    else:
        print_warning(f"skipping backend '{escape(section)}': {escape(str(error))}")


class ToDoPerBackend:
    """Ordered list of (backend, packages) pairs.

    Holds one entry per evaluated backend, including backends whose
    diff is empty, in backend iteration order.

    Example:
        >>> todo = ToDoPerBackend.collect(backends, groups, DiffKind.MISSING)
        >>> if not todo.nothing_to_do_for_all_backends():
        ...     todo.show()
        ...     outcomes = todo.install_missing_packages()
    """

    def __init__(self) -> None:
        self._entries: list[tuple[Backend, list[Package]]] = []

    @classmethod
    def collect(
        cls,
        backends: Iterable[Backend],
        groups: Iterable[Group],
        kind: DiffKind,
    ) -> ToDoPerBackend:
        """Compute the diff of every backend.

        Each backend loads its declared packages from the groups, then
        queries the system. A backend whose query fails is reported with
        show_error() and left out; the others are still evaluated.

        Args:
            backends: Backends in evaluation order.
            groups: All loaded groups.
            kind: Which diff to compute.

        Returns:
            The collected to-do list.
        """
        groups = list(groups)
        todo = cls()

        for backend in backends:
            backend.load(groups)

            try:
                if kind is DiffKind.MISSING:
                    diff = backend.get_missing_packages_sorted()
                else:
                    diff = backend.get_unmanaged_packages_sorted()
            except BackendError as e:
                show_error(e, backend)
                continue

            logger.debug("%s: %d %s package(s)", backend.get_section(), len(diff), kind.value)
            todo.push(backend, diff)

        return todo

    def push(self, backend: Backend, packages: Sequence[Package]) -> None:
        """Append the diff of one backend."""
        self._entries.append((backend, list(packages)))

    def __iter__(self) -> Iterator[tuple[Backend, list[Package]]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def nothing_to_do_for_all_backends(self) -> bool:
        """Check whether every collected diff is empty."""
        return all(not packages for _, packages in self._entries)

    @property
    def total_packages(self) -> int:
        """Number of packages across all backends."""
        return sum(len(packages) for _, packages in self._entries)

    def show(self, out: Console | None = None) -> None:
        """Print each non-empty diff under its backend section name.

        Args:
            out: Console to print to. Defaults to the shared console.
        """
        out = out or default_console
        first = True
        for backend, packages in self._entries:
            if not packages:
                continue
            if not first:
                out.print()
            first = False
            out.print(f"[section]\\[{backend.get_section()}][/section]")
            for package in packages:
                out.print(f"  {package}", highlight=False, markup=False)

    def as_dict(self) -> dict[str, list[str]]:
        """Convert to a mapping of section name to package strings."""
        return {
            backend.get_section(): [str(p) for p in packages] for backend, packages in self._entries
        }

    def install_missing_packages(self, noconfirm: bool = False) -> list[BackendOutcome]:
        """Install the collected packages, backend by backend.

        Args:
            noconfirm: Tell the package managers not to ask.

        Returns:
            One outcome per backend with a non-empty diff.
        """
        return self._execute(ActionType.INSTALL, noconfirm)

    def remove_unmanaged_packages(self, noconfirm: bool = False) -> list[BackendOutcome]:
        """Remove the collected packages, backend by backend.

        Args:
            noconfirm: Tell the package managers not to ask.

        Returns:
            One outcome per backend with a non-empty diff.
        """
        return self._execute(ActionType.REMOVE, noconfirm)

    def mark_packages_as_dependency(self) -> list[BackendOutcome]:
        """Re-mark the collected packages as dependencies, backend by backend.

        Returns:
            One outcome per backend with a non-empty diff.
        """
        return self._execute(ActionType.AS_DEPENDENCY, noconfirm=False)

    def _execute(self, action: ActionType, noconfirm: bool) -> list[BackendOutcome]:
        outcomes: list[BackendOutcome] = []

        for backend, packages in self._entries:
            if not packages:
                continue

            section = backend.get_section()
            try:
                if action is ActionType.INSTALL:
                    returncode = backend.install_packages(packages, noconfirm)
                elif action is ActionType.REMOVE:
                    returncode = backend.remove_unmanaged_packages(packages, noconfirm)
                else:
                    returncode = backend.make_dependency(packages)
            except BackendError as e:
                logger.warning("%s %s failed: %s", section, action.value, e)
                outcomes.append(
                    BackendOutcome(
                        section=section,
                        action=action,
                        packages=tuple(packages),
                        success=False,
                        error=str(e),
                    )
                )
                continue

            if returncode != 0:
                logger.warning("%s %s exited with code %d", section, action.value, returncode)
                outcomes.append(
                    BackendOutcome(
                        section=section,
                        action=action,
                        packages=tuple(packages),
                        success=False,
                        exit_code=returncode,
                        error=f"{backend.get_binary()} exited with code {returncode}",
                    )
                )
            else:
                outcomes.append(
                    BackendOutcome(
                        section=section,
                        action=action,
                        packages=tuple(packages),
                        exit_code=returncode,
                    )
                )

        return outcomes
