"""Unit tests for the Group model."""

import pytest
from pkgdecl.models.group import Group
from pkgdecl.models.package import Package


@pytest.fixture
def rust_group() -> Group:
    """Create a group with rustup and pacman sections."""
    return Group(
        name="rust",
        sections={
            "rustup": {
                Package(name="stable", repo="toolchain"),
                Package(name="stable/clippy", repo="component"),
            },
            "pacman": {Package(name="sccache")},
        },
    )


class TestGroup:
    """Tests for Group dataclass."""

    def test_packages_for_section(self, rust_group: Group) -> None:
        """packages_for returns the packages of a section."""
        assert rust_group.packages_for("pacman") == frozenset({Package(name="sccache")})

    def test_packages_for_unknown_section_is_empty(self, rust_group: Group) -> None:
        """packages_for returns an empty set for undeclared sections."""
        assert rust_group.packages_for("flatpak") == frozenset()

    def test_sections_are_read_only(self, rust_group: Group) -> None:
        """Section mapping cannot be mutated."""
        with pytest.raises(TypeError):
            rust_group.sections["apt"] = frozenset()  # type: ignore[index]

    def test_empty_name_raises(self) -> None:
        """Empty group name raises ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            Group(name="")

    def test_equality_by_name(self, rust_group: Group) -> None:
        """Groups with the same name are equal and hash alike."""
        other = Group(name="rust")
        assert other == rust_group
        assert len({other, rust_group}) == 1

    def test_is_empty(self, rust_group: Group) -> None:
        """is_empty is True only when no section declares packages."""
        assert not rust_group.is_empty
        assert Group(name="empty").is_empty
        assert Group(name="blank", sections={"apt": set()}).is_empty

    def test_str_renders_sorted_sections(self, rust_group: Group) -> None:
        """str() renders sections and packages in sorted order."""
        assert str(rust_group) == (
            "[pacman]\nsccache\n\n[rustup]\ncomponent/stable/clippy\ntoolchain/stable"
        )
