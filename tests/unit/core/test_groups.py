"""Unit tests for group file loading."""

import logging
from pathlib import Path

import pytest
from pkgdecl.core.groups import (
    GroupError,
    GroupExistsError,
    GroupNotFoundError,
    append_to_group,
    find_groups,
    group_paths,
    import_groups,
    load_groups,
    new_groups,
    parse_group,
    remove_groups,
    search_packages,
)
from pkgdecl.core.paths import get_group_dir
from pkgdecl.models.group import Group
from pkgdecl.models.package import Package

SECTIONS = ["apt", "flatpak", "pacman", "rustup"]

RUST_GROUP = """\
# Rust development
[rustup]
toolchain/stable
component/stable/clippy   # lints

[pacman]
extra/sccache
"""


class TestParseGroup:
    """Tests for parse_group."""

    def test_parses_sections(self) -> None:
        """Packages are collected per section."""
        group = parse_group("rust", RUST_GROUP, SECTIONS)

        assert group.name == "rust"
        assert group.packages_for("rustup") == {
            Package(name="stable", repo="toolchain"),
            Package(name="stable/clippy", repo="component"),
        }
        assert group.packages_for("pacman") == {Package(name="sccache", repo="extra")}

    def test_comments_and_blank_lines_ignored(self) -> None:
        """Comment-only and blank lines produce nothing."""
        group = parse_group("empty", "# nothing\n\n   \n", SECTIONS)
        assert group.is_empty

    def test_unknown_section_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Packages in an unknown section are skipped with a warning."""
        with caplog.at_level(logging.WARNING):
            group = parse_group("mac", "[brew]\nwget\n[apt]\ncurl\n", SECTIONS)

        assert group.packages_for("brew") == frozenset()
        assert group.packages_for("apt") == {Package(name="curl")}
        assert "unknown section [brew]" in caplog.text

    def test_package_outside_section_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Packages before the first header are skipped with a warning."""
        with caplog.at_level(logging.WARNING):
            group = parse_group("loose", "curl\n[apt]\nwget\n", SECTIONS)

        assert group.packages_for("apt") == {Package(name="wget")}
        assert "outside of a section" in caplog.text

    def test_bad_package_line_raises(self) -> None:
        """A malformed package line is an error naming the line."""
        with pytest.raises(GroupError, match="line 2"):
            parse_group("bad", "[pacman]\nextra/\n", SECTIONS)


class TestLoadGroups:
    """Tests for load_groups."""

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A missing group directory is an error."""
        with pytest.raises(GroupError, match="not found"):
            load_groups(SECTIONS, tmp_path / "missing")

    def test_loads_every_file(self, tmp_path: Path) -> None:
        """Each file is one group named after the file."""
        (tmp_path / "rust").write_text(RUST_GROUP)
        (tmp_path / "base").write_text("[apt]\ncurl\n")
        (tmp_path / "subdir").mkdir()

        groups = load_groups(SECTIONS, tmp_path)

        assert {g.name for g in groups} == {"rust", "base"}

    def test_default_directory(self) -> None:
        """Without a directory the XDG group dir is used."""
        group_dir = get_group_dir()
        group_dir.mkdir(parents=True)
        (group_dir / "base").write_text("[apt]\ncurl\n")

        assert {g.name for g in load_groups(SECTIONS)} == {"base"}

    def test_symlinks_followed(self, tmp_path: Path) -> None:
        """Symlinked group files are read through the link."""
        source = tmp_path / "dotfiles"
        source.mkdir()
        (source / "base").write_text("[apt]\ncurl\n")
        group_dir = tmp_path / "groups"
        group_dir.mkdir()
        (group_dir / "base").symlink_to(source / "base")

        (group,) = load_groups(SECTIONS, group_dir)

        assert group.packages_for("apt") == {Package(name="curl")}

    def test_warn_not_symlinks(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Regular files are reported when symlinks are expected."""
        (tmp_path / "base").write_text("[apt]\ncurl\n")

        with caplog.at_level(logging.WARNING):
            load_groups(SECTIONS, tmp_path, warn_not_symlinks=True)

        assert "is not a symlink" in caplog.text


class TestFindGroups:
    """Tests for find_groups."""

    def test_preserves_requested_order(self) -> None:
        """Groups come back in the order they were asked for."""
        groups = {Group(name="a"), Group(name="b")}
        assert [g.name for g in find_groups(groups, ["b", "a"])] == ["b", "a"]

    def test_unknown_name(self) -> None:
        """An unknown group name raises GroupNotFoundError."""
        with pytest.raises(GroupNotFoundError, match="Group nope not found"):
            find_groups({Group(name="a")}, ["nope"])


class TestSearchPackages:
    """Tests for search_packages."""

    @pytest.fixture
    def groups(self) -> list[Group]:
        return [
            parse_group("rust", RUST_GROUP, SECTIONS),
            Group(name="base", sections={"pacman": {Package(name="ripgrep")}}),
        ]

    def test_matches_repo_and_name(self, groups: list[Group]) -> None:
        """The pattern is searched in repo/name, results sorted by group."""
        matches = search_packages(groups, "^(component|extra)/")

        assert [(g.name, s, str(p)) for g, s, p in matches] == [
            ("rust", "pacman", "extra/sccache"),
            ("rust", "rustup", "component/stable/clippy"),
        ]

    def test_no_match(self, groups: list[Group]) -> None:
        """A pattern matching nothing returns an empty list."""
        assert search_packages(groups, "emacs") == []

    def test_invalid_pattern(self, groups: list[Group]) -> None:
        """An invalid regular expression is a GroupError."""
        with pytest.raises(GroupError, match="Invalid search pattern"):
            search_packages(groups, "([")


class TestGroupFiles:
    """Tests for creating, importing, removing, and appending to group files."""

    def test_new_creates_empty_files(self, tmp_path: Path) -> None:
        """New groups are empty files, and the directory is created."""
        group_dir = tmp_path / "groups"

        paths = new_groups(["rust", "base"], group_dir)

        assert paths == [group_dir / "rust", group_dir / "base"]
        assert all(p.read_text() == "" for p in paths)

    def test_new_default_directory(self) -> None:
        """Without a directory the default group dir is used and created."""
        (path,) = new_groups(["rust"])
        assert path == get_group_dir() / "rust"
        assert path.is_file()

    def test_new_refuses_existing(self, tmp_path: Path) -> None:
        """No file is created if one of the groups exists."""
        tmp_path.joinpath("base").write_text("[apt]\ncurl\n")

        with pytest.raises(GroupExistsError):
            new_groups(["rust", "base"], tmp_path)

        assert not (tmp_path / "rust").exists()
        assert (tmp_path / "base").read_text() == "[apt]\ncurl\n"

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b"])
    def test_invalid_names(self, name: str, tmp_path: Path) -> None:
        """Names must be plain file names."""
        with pytest.raises(GroupError, match="Invalid group name"):
            group_paths([name], tmp_path)

    def test_remove_deletes_files(self, tmp_path: Path) -> None:
        """Existing groups are deleted."""
        tmp_path.joinpath("rust").write_text("")

        remove_groups(["rust"], tmp_path)

        assert not (tmp_path / "rust").exists()

    def test_remove_unknown_deletes_nothing(self, tmp_path: Path) -> None:
        """No file is removed if one of the groups is missing."""
        tmp_path.joinpath("rust").write_text("")

        with pytest.raises(GroupNotFoundError):
            remove_groups(["rust", "nope"], tmp_path)

        assert (tmp_path / "rust").exists()

    def test_remove_only_unlinks_symlink(self, tmp_path: Path) -> None:
        """Removing an imported group leaves the linked file alone."""
        target = tmp_path / "dotfiles" / "rust"
        target.parent.mkdir()
        target.write_text(RUST_GROUP)
        group_dir = tmp_path / "groups"
        import_groups([target], group_dir)

        remove_groups(["rust"], group_dir)

        assert not (group_dir / "rust").is_symlink()
        assert target.read_text() == RUST_GROUP

    def test_import_symlinks_absolute_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Imported files are linked by absolute path and load as groups."""
        dotfiles = tmp_path / "dotfiles"
        dotfiles.mkdir()
        dotfiles.joinpath("rust").write_text(RUST_GROUP)
        group_dir = tmp_path / "groups"
        monkeypatch.chdir(dotfiles)

        linked = import_groups([Path("rust")], group_dir)

        assert linked == [group_dir / "rust"]
        assert linked[0].is_symlink()
        assert Path(linked[0].readlink()) == dotfiles / "rust"
        groups = load_groups(SECTIONS, group_dir, warn_not_symlinks=True)
        assert {g.name for g in groups} == {"rust"}

    def test_import_skips_missing_and_taken(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Missing files and existing group names are skipped with a warning."""
        group_dir = tmp_path / "groups"
        group_dir.mkdir()
        group_dir.joinpath("rust").write_text("")
        source = tmp_path / "rust"
        source.write_text(RUST_GROUP)

        with caplog.at_level(logging.WARNING):
            linked = import_groups([tmp_path / "absent", source], group_dir)

        assert linked == []
        assert "does not exist" in caplog.text
        assert "already exists" in caplog.text
        assert group_dir.joinpath("rust").read_text() == ""

    def test_append_adds_section_blocks(self, tmp_path: Path) -> None:
        """Appended packages are merged with the existing declarations."""
        tmp_path.joinpath("base").write_text("[apt]\ncurl")

        append_to_group(
            "base",
            {"apt": [Package(name="htop")], "pacman": [Package(name="neovim", repo="extra")]},
            tmp_path,
        )

        group = parse_group("base", tmp_path.joinpath("base").read_text(), SECTIONS)
        assert group.packages_for("apt") == {Package(name="curl"), Package(name="htop")}
        assert group.packages_for("pacman") == {Package(name="neovim", repo="extra")}

    def test_append_to_unknown_group(self, tmp_path: Path) -> None:
        """Appending requires the group file to exist."""
        with pytest.raises(GroupNotFoundError):
            append_to_group("nope", {"apt": [Package(name="htop")]}, tmp_path)
