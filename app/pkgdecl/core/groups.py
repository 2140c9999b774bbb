"""Group file loading and management.

Each file in the group directory declares one group, named after the
file. Packages are listed one per line below a ``[section]`` header
naming the backend:

    [pacman]
    ripgrep
    extra/neovim   # pinned to a repository

    [rustup]
    toolchain/stable
    component/stable/clippy
"""

import logging
import re
from collections.abc import Collection, Iterable, Mapping
from pathlib import Path

from pkgdecl.core.paths import ensure_group_dir, get_group_dir
from pkgdecl.models.group import Group
from pkgdecl.models.package import Package

logger = logging.getLogger(__name__)

_SECTION_PATTERN = re.compile(r"^\[\s*([^\]\s]+)\s*\]$")


class GroupError(Exception):
    """Base exception for group loading errors."""


class GroupNotFoundError(GroupError):
    """Raised when a requested group does not exist."""


class GroupExistsError(GroupError):
    """Raised when a group to be created already exists."""


def parse_group(name: str, text: str, known_sections: Collection[str]) -> Group:
    """Parse the content of one group file.

    Args:
        name: Group name.
        text: File content.
        known_sections: Section names of the available backends.

    Returns:
        The parsed Group.

    Raises:
        GroupError: If a package line cannot be parsed.
    """
    sections: dict[str, set[Package]] = {}
    current: str | None = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue

        match = _SECTION_PATTERN.match(line)
        if match:
            current = match.group(1)
            if current not in known_sections:
                logger.warning("Group '%s' line %d: unknown section [%s]", name, lineno, current)
            continue

        if current is None:
            logger.warning(
                "Group '%s' line %d: package outside of a section, skipping", name, lineno
            )
            continue
        if current not in known_sections:
            continue

        try:
            package = Package.parse(line)
        except ValueError as e:
            msg = f"Group '{name}' line {lineno}: {e}"
            raise GroupError(msg) from e
        sections.setdefault(current, set()).add(package)

    return Group(name=name, sections={s: frozenset(p) for s, p in sections.items()})


def load_groups(
    known_sections: Collection[str],
    group_dir: Path | None = None,
    warn_not_symlinks: bool = False,
) -> set[Group]:
    """Load every group file from the group directory.

    Symlinks are followed. Subdirectories and broken links are skipped.

    Args:
        known_sections: Section names of the available backends.
        group_dir: Directory to read. If None, uses the default group dir.
        warn_not_symlinks: Log a warning for group files that are not symlinks.

    Returns:
        Set of loaded groups.

    Raises:
        GroupError: If the directory or a group file cannot be read.
    """
    directory = group_dir or get_group_dir()
    if not directory.is_dir():
        raise GroupError(f"Group directory not found: {directory}")

    groups: set[Group] = set()
    for path in sorted(directory.iterdir()):
        if not path.is_file():
            logger.debug("Skipping %s: not a regular file", path)
            continue
        if warn_not_symlinks and not path.is_symlink():
            logger.warning("Group file %s is not a symlink", path)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise GroupError(f"Failed to read group {path.name}: {e}") from e

        groups.add(parse_group(path.name, text, known_sections))

    logger.debug("Loaded %d group(s) from %s", len(groups), directory)
    return groups


def find_groups(groups: Iterable[Group], names: Iterable[str]) -> list[Group]:
    """Look up groups by name, preserving the requested order.

    Raises:
        GroupNotFoundError: If any name does not match a loaded group.
    """
    by_name = {group.name: group for group in groups}
    found: list[Group] = []
    for name in names:
        if name not in by_name:
            raise GroupNotFoundError(f"Group {name} not found")
        found.append(by_name[name])
    return found


def search_packages(groups: Iterable[Group], pattern: str) -> list[tuple[Group, str, Package]]:
    """Find declared packages matching a regular expression.

    The pattern is searched in the ``repo/name`` form of each package.

    Args:
        groups: Groups to search.
        pattern: Regular expression.

    Returns:
        ``(group, section, package)`` triples, sorted by group, section
        and package.

    Raises:
        GroupError: If the pattern is not a valid regular expression.
    """
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise GroupError(f"Invalid search pattern '{pattern}': {e}") from e

    matches: list[tuple[Group, str, Package]] = []
    for group in sorted(groups):
        for section in sorted(group.sections):
            for package in sorted(group.sections[section]):
                if regex.search(str(package)):
                    matches.append((group, section, package))
    return matches


def group_paths(names: Iterable[str], group_dir: Path | None = None) -> list[Path]:
    """Map group names to their files in the group directory.

    Raises:
        GroupError: If a name is not a plain file name.
    """
    directory = group_dir or get_group_dir()
    paths: list[Path] = []
    for name in names:
        if not name or name in {".", ".."} or "/" in name:
            raise GroupError(f"Invalid group name: '{name}'")
        paths.append(directory / name)
    return paths


def _prepare_dir(group_dir: Path | None) -> Path:
    try:
        if group_dir is None:
            return ensure_group_dir()
        group_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, RuntimeError) as e:
        raise GroupError(str(e)) from e
    return group_dir


def new_groups(names: Iterable[str], group_dir: Path | None = None) -> list[Path]:
    """Create empty group files.

    Nothing is created if any of the groups already exists.

    Returns:
        Paths of the created files.

    Raises:
        GroupExistsError: If a group file already exists.
        GroupError: If a name is invalid or a file cannot be created.
    """
    paths = group_paths(names, group_dir)
    for path in paths:
        if path.exists() or path.is_symlink():
            raise GroupExistsError(f"Group {path.name} already exists: {path}")

    _prepare_dir(group_dir)
    for path in paths:
        try:
            path.touch(exist_ok=False)
        except OSError as e:
            raise GroupError(f"Failed to create group {path.name}: {e}") from e
        logger.info("Created group %s", path)
    return paths


def remove_groups(names: Iterable[str], group_dir: Path | None = None) -> list[Path]:
    """Delete group files, or the symlinks pointing to them.

    Nothing is deleted if any of the groups does not exist.

    Returns:
        Paths of the removed files.

    Raises:
        GroupNotFoundError: If a group file does not exist.
        GroupError: If a name is invalid or a file cannot be removed.
    """
    paths = group_paths(names, group_dir)
    for path in paths:
        if not path.exists() and not path.is_symlink():
            raise GroupNotFoundError(f"Group {path.name} not found under {path.parent}")

    for path in paths:
        try:
            path.unlink()
        except OSError as e:
            raise GroupError(f"Failed to remove group {path.name}: {e}") from e
        logger.info("Removed group %s", path)
    return paths


def import_groups(files: Iterable[Path], group_dir: Path | None = None) -> list[Path]:
    """Link existing files into the group directory.

    Each file becomes a group named after it, through a symlink to its
    absolute path. Missing files and names that are already taken are
    skipped with a warning.

    Returns:
        Paths of the created symlinks.

    Raises:
        GroupError: If a symlink cannot be created.
    """
    directory = _prepare_dir(group_dir)
    linked: list[Path] = []

    for file in files:
        target = file.expanduser().absolute()
        if not target.is_file():
            logger.warning("File %s does not exist, skipping", target)
            continue

        link = directory / target.name
        if link.exists() or link.is_symlink():
            logger.warning("Group %s already exists, skipping", target.name)
            continue

        try:
            link.symlink_to(target)
        except OSError as e:
            raise GroupError(f"Failed to import {target}: {e}") from e
        logger.info("Imported %s as group %s", target, target.name)
        linked.append(link)

    return linked


def append_to_group(
    name: str,
    sections: Mapping[str, Iterable[Package]],
    group_dir: Path | None = None,
) -> Path:
    """Append packages to an existing group file.

    Each section is written as a new ``[section]`` block at the end of
    the file; repeated sections are merged when the group is loaded.

    Returns:
        Path of the group file.

    Raises:
        GroupNotFoundError: If the group file does not exist.
        GroupError: If the file cannot be written.
    """
    (path,) = group_paths([name], group_dir)
    if not path.is_file():
        raise GroupNotFoundError(f"Group {name} not found")

    lines: list[str] = []
    for section, packages in sections.items():
        lines.append(f"\n[{section}]")
        lines.extend(str(p) for p in packages)

    try:
        with path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
    except OSError as e:
        raise GroupError(f"Failed to write group {name}: {e}") from e
    return path
