"""Package manager backends.

This module exports the backend classes and the static registry that
fixes the order in which backends are evaluated.
"""

from collections.abc import Iterable

from pkgdecl.backends.apt import Apt
from pkgdecl.backends.base import Backend
from pkgdecl.backends.errors import (
    BackendError,
    CommandSpawnError,
    OutputParseError,
    QueryFailedError,
    UnsupportedOperationError,
)
from pkgdecl.backends.flatpak import Flatpak
from pkgdecl.backends.pacman import Pacman
from pkgdecl.backends.rustup import Rustup
from pkgdecl.core.config import Config

BACKENDS: tuple[type[Backend], ...] = (Apt, Flatpak, Pacman, Rustup)


def get_sections() -> list[str]:
    """Return the section names of all known backends, in registry order."""
    return [backend.SECTION for backend in BACKENDS]


def get_backends(config: Config, sections: Iterable[str] | None = None) -> list[Backend]:
    """Instantiate backends with config overrides applied.

    Args:
        config: Loaded configuration.
        sections: Optional section names to restrict to. None selects all.

    Returns:
        Backend instances in registry order.

    Raises:
        ValueError: If a requested section is unknown.
    """
    wanted = set(sections) if sections else None
    if wanted is not None:
        unknown = wanted - set(get_sections())
        if unknown:
            msg = f"Unknown backend(s): {', '.join(sorted(unknown))}"
            raise ValueError(msg)

    backends: list[Backend] = []
    for backend_cls in BACKENDS:
        if wanted is not None and backend_cls.SECTION not in wanted:
            continue
        if backend_cls is Pacman:
            backends.append(Pacman(binary=config.aur_helper, remove_args=config.aur_rm_args))
        else:
            backends.append(backend_cls())
    return backends


__all__ = [
    "BACKENDS",
    "Apt",
    "Backend",
    "BackendError",
    "CommandSpawnError",
    "Flatpak",
    "OutputParseError",
    "Pacman",
    "QueryFailedError",
    "Rustup",
    "UnsupportedOperationError",
    "get_backends",
    "get_sections",
]
