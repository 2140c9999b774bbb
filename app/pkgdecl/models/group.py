"""Group model for user-declared package collections."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pkgdecl.models.package import Package


@dataclass(frozen=True, slots=True, eq=False)
class Group:
    """A named bundle of packages, partitioned by backend section.

    Groups are built once from the group files and never mutated.
    Two groups are equal when their names are equal.

    Attributes:
        name: Group name (the group file name).
        sections: Mapping of backend section name to declared packages.
    """

    name: str
    sections: Mapping[str, frozenset[Package]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the name and freeze the section mapping."""
        if not self.name:
            msg = "Group name cannot be empty"
            raise ValueError(msg)
        frozen = {section: frozenset(packages) for section, packages in self.sections.items()}
        object.__setattr__(self, "sections", MappingProxyType(frozen))

    def packages_for(self, section: str) -> frozenset[Package]:
        """Return the packages this group declares for a backend section."""
        return self.sections.get(section, frozenset())

    @property
    def is_empty(self) -> bool:
        """Check if the group declares no packages at all."""
        return not any(self.sections.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Group):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __lt__(self, other: "Group") -> bool:
        return self.name < other.name

    def __str__(self) -> str:
        blocks: list[str] = []
        for section in sorted(self.sections):
            packages = sorted(self.sections[section])
            if not packages:
                continue
            lines = [f"[{section}]", *(str(p) for p in packages)]
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)
