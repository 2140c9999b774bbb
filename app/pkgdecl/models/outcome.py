"""Outcome models for backend-level install and removal runs.

The aggregator drives each backend once per action; the result of that
run is captured here so the CLI can render it and pick an exit code.
"""

from dataclasses import dataclass, field
from enum import Enum

from pkgdecl.models.package import Package


class ActionType(Enum):
    """Type of package management action.

    Attributes:
        INSTALL: Install packages that are declared but missing.
        REMOVE: Remove packages that are installed but unmanaged.
        AS_DEPENDENCY: Re-mark installed packages as dependencies.
    """

    INSTALL = "install"
    REMOVE = "remove"
    AS_DEPENDENCY = "as-dependency"


@dataclass(frozen=True, slots=True)
class BackendOutcome:
    """Result of running one action on one backend.

    Attributes:
        section: Section name of the backend that ran the action.
        action: The action that was attempted.
        packages: Packages that were passed to the backend.
        success: Whether the backend finished with exit code 0.
        exit_code: Exit code of the failing (or last) command, if any ran.
        error: Error message if the action failed.
    """

    section: str
    action: ActionType
    packages: tuple[Package, ...] = field(default=())
    success: bool = True
    exit_code: int | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success
