"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from pkgdecl.utils.shell import CommandResult


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temporary directory for every test."""
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("PKGDECL_TRACEBACK", raising=False)
    return config_home


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo root logger changes made by the CLI's logging setup."""
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


@pytest.fixture
def mock_toolchain_output() -> str:
    """Sample rustup toolchain list output for testing."""
    return """stable-x86_64-unknown-linux-gnu (default)
nightly-x86_64-unknown-linux-gnu"""


@pytest.fixture
def mock_stable_components_output() -> str:
    """Sample rustup component list --installed output for stable."""
    return """cargo-x86_64-unknown-linux-gnu
clippy-x86_64-unknown-linux-gnu
rust-src
rust-std-x86_64-unknown-linux-gnu
rustc-x86_64-unknown-linux-gnu"""


@pytest.fixture
def mock_nightly_components_output() -> str:
    """Sample rustup component list --installed output for nightly."""
    return """rustfmt-x86_64-unknown-linux-gnu
rust-analyzer-x86_64-unknown-linux-gnu"""


@pytest.fixture
def make_result() -> Callable[..., CommandResult]:
    """Factory for CommandResult objects."""

    def _make(stdout: str = "", stderr: str = "", returncode: int = 0) -> CommandResult:
        return CommandResult(stdout=stdout, stderr=stderr, returncode=returncode)

    return _make


@pytest.fixture
def write_group(isolated_config_home: Path) -> Callable[[str, str], Path]:
    """Factory writing a group file into the isolated group directory."""
    group_dir = isolated_config_home / "pkgdecl" / "groups"

    def _write(name: str, content: str) -> Path:
        group_dir.mkdir(parents=True, exist_ok=True)
        path = group_dir / name
        path.write_text(content)
        return path

    return _write
