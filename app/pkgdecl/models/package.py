"""Package model shared by all backends.

A package is identified by its name and an optional repository tag.
The tag is a backend-specific sub-namespace: a pacman repository such as
``extra``, or ``toolchain``/``component`` for rustup.
"""

from dataclasses import dataclass, field
from functools import total_ordering


class MissingRepoError(ValueError):
    """Raised when a package lacks the repo tag its backend requires."""


@total_ordering
@dataclass(frozen=True, slots=True)
class Package:
    """A single installable unit.

    Packages are immutable and hashable so they can be used as set
    elements. Equality and ordering are defined on ``(repo, name)``;
    an absent repo sorts before any repo.

    Attributes:
        name: Package name (e.g. 'ripgrep', 'stable/clippy').
        repo: Optional sub-namespace tag (e.g. 'extra', 'toolchain').
    """

    name: str
    repo: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if self.repo == "":
            msg = f"Repository of package '{self.name}' cannot be empty"
            raise ValueError(msg)

    @classmethod
    def parse(cls, text: str) -> "Package":
        """Parse the ``repo/name`` declaration syntax.

        Only the first slash separates the repo, so
        ``component/stable/clippy`` yields repo ``component`` and
        name ``stable/clippy``.

        Args:
            text: Package as written in a group file.

        Returns:
            The parsed Package.

        Raises:
            ValueError: If name or repo is empty.
        """
        text = text.strip()
        if "/" not in text:
            return cls(name=text)
        repo, name = text.split("/", 1)
        return cls(name=name, repo=repo)

    @property
    def sort_key(self) -> tuple[str, str]:
        """Key used for deterministic ordering."""
        return (self.repo or "", self.name)

    def require_repo(self) -> str:
        """Return the repo tag, failing loudly when it is missing.

        Raises:
            MissingRepoError: If the package has no repo tag.
        """
        if self.repo is None:
            msg = f"Package '{self.name}' does not specify a repository"
            raise MissingRepoError(msg)
        return self.repo

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return (self.repo is not None, *self.sort_key) < (
            other.repo is not None,
            *other.sort_key,
        )

    def __str__(self) -> str:
        if self.repo is None:
            return self.name
        return f"{self.repo}/{self.name}"
