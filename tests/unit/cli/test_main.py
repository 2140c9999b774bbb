"""Unit tests for the main CLI application."""

import logging

from pkgdecl import __version__
from pkgdecl.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestMain:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"pkgdecl version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        """--help lists every subcommand."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("sync", "clean", "unmanaged", "review", "groups", "config"):
            assert command in result.stdout


class TestConfigureLogging:
    """Tests for log level selection."""

    def test_default_level_is_warning(self) -> None:
        """Without flags only warnings and errors are logged."""
        configure_logging(verbose=False, quiet=False)
        assert logging.getLogger().level == logging.WARNING

    def test_verbose(self) -> None:
        """--verbose enables debug logging."""
        configure_logging(verbose=True, quiet=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet(self) -> None:
        """--quiet only logs errors."""
        configure_logging(verbose=False, quiet=True)
        assert logging.getLogger().level == logging.ERROR
