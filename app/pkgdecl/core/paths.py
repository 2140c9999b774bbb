"""XDG-compliant path management for pkgdecl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and group files.

XDG defaults:
- Config: ~/.config/pkgdecl/
- Groups: ~/.config/pkgdecl/groups/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "pkgdecl"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/pkgdecl/ (or XDG_CONFIG_HOME/pkgdecl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/pkgdecl/pkgdecl.toml.
    """
    return get_config_dir() / "pkgdecl.toml"


def get_group_dir() -> Path:
    """Get the directory holding one file per group.

    Returns:
        Path to ~/.config/pkgdecl/groups/.
    """
    return get_config_dir() / "groups"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_group_dir() -> Path:
    """Create the group directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_group_dir(), "group")
