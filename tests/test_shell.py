"""
Tests for running the ccusage command through a login shell.
"""
import subprocess
from unittest.mock import patch

import pytest

from ccost.errors import ExecutionError
from ccost.models import Granularity
from ccost.shell import build_command, run_command, select_shell, subprocess_env


def _completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def mock_run():
    with patch("ccost.shell.subprocess.run") as mock:
        yield mock


class TestSelectShell:
    def test_zsh_when_configured(self):
        assert select_shell({"SHELL": "/bin/zsh"}) == "zsh"
        assert select_shell({"SHELL": "/opt/homebrew/bin/zsh"}) == "zsh"

    def test_bash_otherwise(self):
        assert select_shell({"SHELL": "/bin/bash"}) == "bash"
        assert select_shell({"SHELL": "/usr/bin/fish"}) == "bash"
        assert select_shell({}) == "bash"


class TestBuildCommand:
    def test_appends_granularity_and_json_flag(self):
        assert build_command("npx ccusage@latest", Granularity.DAILY) == "npx ccusage@latest daily --json"
        assert build_command(" ccusage ", Granularity.WEEKLY) == "ccusage weekly --json"


class TestSubprocessEnv:
    def test_fills_missing_path(self):
        env = subprocess_env({"SHELL": "/bin/zsh"})
        assert env["PATH"] == "/usr/local/bin:/opt/homebrew/bin:/usr/bin:/bin"
        assert env["SHELL"] == "/bin/zsh"

    def test_keeps_existing_path(self):
        assert subprocess_env({"PATH": "/custom/bin"})["PATH"] == "/custom/bin"


class TestRunCommand:
    def test_returns_trimmed_stdout(self, mock_run):
        mock_run.return_value = _completed(stdout='  {"daily": []}\n')
        assert run_command("ccusage daily --json", env={"SHELL": "/bin/zsh", "PATH": "/bin"}) == '{"daily": []}'

        args, kwargs = mock_run.call_args
        assert args[0] == ["zsh", "-l", "-c", "ccusage daily --json"]
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True
        assert "timeout" not in kwargs

    def test_uses_bash_without_zsh(self, mock_run):
        mock_run.return_value = _completed(stdout="{}")
        run_command("ccusage weekly --json", env={"SHELL": "/bin/bash", "PATH": "/bin"})
        assert mock_run.call_args[0][0][0] == "bash"

    def test_stderr_only_raises_verbatim(self, mock_run):
        mock_run.return_value = _completed(stderr="zsh:1: command not found: npx\n", returncode=127)
        with pytest.raises(ExecutionError) as exc_info:
            run_command("npx ccusage@latest daily --json", env={"PATH": "/bin"})
        assert str(exc_info.value) == "zsh:1: command not found: npx\n"

    def test_stderr_with_zero_exit_still_fails(self, mock_run):
        mock_run.return_value = _completed(stdout="   ", stderr="boom")
        with pytest.raises(ExecutionError) as exc_info:
            run_command("ccusage daily --json", env={"PATH": "/bin"})
        assert str(exc_info.value) == "boom"

    def test_stderr_noise_is_ignored_when_stdout_present(self, mock_run):
        mock_run.return_value = _completed(stdout='{"weekly": []}', stderr="npm WARN deprecated")
        assert run_command("ccusage weekly --json", env={"PATH": "/bin"}) == '{"weekly": []}'

    def test_silent_failure_reports_status(self, mock_run):
        mock_run.return_value = _completed(returncode=2)
        with pytest.raises(ExecutionError, match="exited with status 2"):
            run_command("ccusage daily --json", env={"PATH": "/bin"})

    def test_missing_shell_raises_execution_error(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory", "zsh")
        with pytest.raises(ExecutionError):
            run_command("ccusage daily --json", env={"SHELL": "/bin/zsh", "PATH": "/bin"})
