"""Configuration model and file I/O.

Configuration is stored in ~/.config/pkgdecl/pkgdecl.toml. A missing
file is not an error: the defaults apply.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pkgdecl.core.paths import get_config_path

logger = logging.getLogger(__name__)


class Config(BaseModel):
    """User configuration for pkgdecl.

    Attributes:
        aur_helper: Binary used for pacman installs and removals.
        aur_rm_args: Extra arguments passed to the AUR helper on removal.
        warn_not_symlinks: Warn about group files that are not symlinks.
    """

    model_config = ConfigDict(extra="forbid")

    aur_helper: Annotated[
        str,
        Field(min_length=1, description="AUR helper used for the pacman backend"),
    ] = "paru"
    aur_rm_args: Annotated[
        list[str],
        Field(default_factory=list, description="Extra arguments for package removal"),
    ]
    warn_not_symlinks: Annotated[
        bool,
        Field(description="Warn about group files that are not symlinks"),
    ] = True


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> Config:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path and
            falls back to the defaults when that file does not exist.

    Returns:
        Validated Config object.

    Raises:
        ConfigNotFoundError: If an explicit path does not exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        if path is not None:
            raise ConfigNotFoundError(f"Config not found: {config_path}")
        logger.debug("No config at %s, using defaults", config_path)
        return Config()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: Config, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The Config object to save.
        path: Path to save the config. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
