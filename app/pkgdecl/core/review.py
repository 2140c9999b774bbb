"""Decisions taken while reviewing unmanaged packages.

A review walks the unmanaged packages one by one. Each decision is
recorded in a ReviewPlan; nothing touches the system or the group files
until the plan is applied.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from pkgdecl.core.groups import append_to_group
from pkgdecl.core.todo import ToDoPerBackend
from pkgdecl.utils.formatting import console as default_console

if TYPE_CHECKING:
    from pkgdecl.backends.base import Backend
    from pkgdecl.models.outcome import BackendOutcome
    from pkgdecl.models.package import Package

logger = logging.getLogger(__name__)


class ReviewPlan:
    """Packages to assign to groups, remove, or re-mark as dependencies.

    Example:
        >>> plan = ReviewPlan()
        >>> plan.assign("desktop", "flatpak", Package(name="org.gnome.Maps"))
        >>> plan.remove(pacman, Package(name="bloat"))
        >>> outcomes = plan.apply()
    """

    def __init__(self) -> None:
        self.assignments: dict[str, dict[str, list[Package]]] = {}
        self._removals: dict[str, tuple[Backend, list[Package]]] = {}
        self._dependencies: dict[str, tuple[Backend, list[Package]]] = {}

    def assign(self, group: str, section: str, package: Package) -> None:
        """Declare a package in a group."""
        self.assignments.setdefault(group, {}).setdefault(section, []).append(package)

    def remove(self, backend: Backend, package: Package) -> None:
        """Uninstall a package."""
        _add(self._removals, backend, package)

    def mark_as_dependency(self, backend: Backend, package: Package) -> None:
        """Keep a package, but only as a dependency of something else."""
        _add(self._dependencies, backend, package)

    @property
    def to_remove(self) -> ToDoPerBackend:
        """Packages to remove, per backend."""
        return _to_todo(self._removals)

    @property
    def to_mark_as_dependency(self) -> ToDoPerBackend:
        """Packages to re-mark as dependencies, per backend."""
        return _to_todo(self._dependencies)

    @property
    def is_empty(self) -> bool:
        """Check whether no decision other than skipping was taken."""
        return not (self.assignments or self._removals or self._dependencies)

    def show(self, out: Console | None = None) -> None:
        """Print the planned changes."""
        out = out or default_console
        for group, sections in sorted(self.assignments.items()):
            out.print(f"[bold_header]Assign to {escape(group)}:[/bold_header]", highlight=False)
            for section, packages in sorted(sections.items()):
                for package in packages:
                    out.print(f"  {section}: {package}", highlight=False, markup=False)
        if self._removals:
            out.print("[bold_header]Remove:[/bold_header]")
            self.to_remove.show(out)
        if self._dependencies:
            out.print("[bold_header]Mark as dependency:[/bold_header]")
            self.to_mark_as_dependency.show(out)

    def apply(self, group_dir: Path | None = None, noconfirm: bool = False) -> list[BackendOutcome]:
        """Write group assignments, then run removals and re-marking.

        Args:
            group_dir: Group directory. If None, uses the default.
            noconfirm: Tell the package managers not to ask.

        Returns:
            Outcomes of the removal and re-marking runs.

        Raises:
            GroupError: If a group file cannot be written. No package
                manager has run at that point.
        """
        for group, sections in self.assignments.items():
            path = append_to_group(group, sections, group_dir)
            logger.info("Added %d package(s) to %s", sum(map(len, sections.values())), path)

        outcomes = self.to_remove.remove_unmanaged_packages(noconfirm)
        outcomes.extend(self.to_mark_as_dependency.mark_packages_as_dependency())
        return outcomes


def _add(
    entries: dict[str, tuple[Backend, list[Package]]],
    backend: Backend,
    package: Package,
) -> None:
    section = backend.get_section()
    if section not in entries:
        entries[section] = (backend, [])
    entries[section][1].append(package)


def _to_todo(entries: dict[str, tuple[Backend, list[Package]]]) -> ToDoPerBackend:
    todo = ToDoPerBackend()
    for backend, packages in entries.values():
        todo.push(backend, packages)
    return todo
