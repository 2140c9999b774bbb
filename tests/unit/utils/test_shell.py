"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from pkgdecl.utils.shell import CommandResult, run_command, run_interactive


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """Exit code 0 is success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success
        assert not CommandResult(stdout="", stderr="", returncode=1).success


class TestRunCommand:
    """Tests for run_command function."""

    @patch("pkgdecl.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command captures stdout and stderr as UTF-8 text."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=2)

        result = run_command(["pacman", "-Qq"], timeout=5)

        assert result == CommandResult(stdout="out", stderr="err", returncode=2)
        kwargs = mock_run.call_args.kwargs
        assert kwargs["capture_output"] is True
        assert kwargs["encoding"] == "utf-8"
        assert kwargs["check"] is False
        assert kwargs["timeout"] == 5

    @patch("pkgdecl.utils.shell.subprocess.run", side_effect=subprocess.TimeoutExpired("x", 1))
    def test_timeout_propagates(self, mock_run: MagicMock) -> None:
        """Timeouts are raised to the caller."""
        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["sleep", "10"], timeout=1)


class TestRunInteractive:
    """Tests for run_interactive function."""

    @patch("pkgdecl.utils.shell.subprocess.run")
    def test_returns_exit_code(self, mock_run: MagicMock) -> None:
        """run_interactive returns the subprocess exit code."""
        mock_run.return_value = MagicMock(returncode=1)

        assert run_interactive(["false"]) == 1

    @patch("pkgdecl.utils.shell.subprocess.run")
    def test_does_not_capture_output(self, mock_run: MagicMock) -> None:
        """run_interactive does not capture stdout/stderr (inherits TTY)."""
        mock_run.return_value = MagicMock(returncode=0)

        run_interactive(["echo", "hello"])

        call_kwargs = mock_run.call_args
        assert "capture_output" not in call_kwargs.kwargs
        assert "stdout" not in call_kwargs.kwargs
        assert "stderr" not in call_kwargs.kwargs

    @patch("pkgdecl.utils.shell.subprocess.run", side_effect=FileNotFoundError("nope"))
    def test_missing_binary_raises(self, mock_run: MagicMock) -> None:
        """A missing executable is raised to the caller."""
        with pytest.raises(FileNotFoundError):
            run_interactive(["nope"])
