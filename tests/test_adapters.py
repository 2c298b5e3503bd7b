"""
Tests for the shell runner protocol, mock runner and shell command adapter.
"""

import base64

from git2go.adapters.mock import MockShellAdapter
from git2go.adapters.shell.command import ShellCommandAdapter
from git2go.core.models.outcome import FailureReason, Outcome, ShellCommand
from git2go.core.platform import Platform

# ── Mock Runner Tests ────────────────────────────────────────────────


class TestMockShellAdapter:
    def test_default_success(self):
        mock = MockShellAdapter(runner_name="test-mock")
        outcome = mock.run(ShellCommand(command="git --version"))
        assert outcome.succeeded
        assert outcome.message == "[mock] executed"
        assert mock.call_count == 1

    def test_custom_output(self):
        mock = MockShellAdapter()
        mock.set_output(r"^git --version", "git version 2.43.0")
        assert mock.run(ShellCommand(command="git --version")).message == "git version 2.43.0"

    def test_set_failure(self):
        mock = MockShellAdapter()
        mock.set_failure("choco", error="Intentional failure")
        outcome = mock.run(ShellCommand(command="choco list --limit-output"))
        assert outcome.failed
        assert "Intentional failure" in outcome.error

    def test_first_match_wins(self):
        mock = MockShellAdapter()
        mock.set_output("git config", "first")
        mock.set_output("git", "second")
        assert mock.run(ShellCommand(command="git config --global user.name")).message == "first"

    def test_check_is_typed_boolean(self):
        mock = MockShellAdapter()
        mock.set_failure("test -f")
        assert mock.check(ShellCommand(command="test -f /nope")) is False
        assert mock.check(ShellCommand(command="true")) is True

    def test_call_log(self):
        mock = MockShellAdapter()
        for i in range(3):
            mock.run(ShellCommand(command=f"echo {i}"))
        assert mock.commands() == ["echo 0", "echo 1", "echo 2"]

    def test_reset(self):
        mock = MockShellAdapter()
        mock.set_failure("echo")
        mock.run(ShellCommand(command="echo"))
        mock.reset()
        assert mock.call_count == 0
        assert mock.run(ShellCommand(command="echo")).succeeded

    def test_is_available(self):
        assert MockShellAdapter(available=True).is_available()
        assert not MockShellAdapter(available=False).is_available()

    def test_repr(self):
        assert repr(MockShellAdapter()) == "<MockShellAdapter name='mock'>"


# ── Shell Command Adapter Tests ─────────────────────────────────────


def _posix_adapter(**kwargs) -> ShellCommandAdapter:
    return ShellCommandAdapter(platform=Platform.UNSUPPORTED, **kwargs)


class TestShellCommandAdapter:
    def test_is_available(self):
        adapter = _posix_adapter()
        assert adapter.is_available()
        assert adapter.name == "shell"

    def test_validate_empty_command(self):
        valid, msg = _posix_adapter().validate(ShellCommand(command="   "))
        assert not valid
        assert "Missing command" in msg

    def test_run_echo(self):
        outcome = _posix_adapter().run(ShellCommand(command="echo hello world"))
        assert outcome.succeeded
        assert outcome.message == "hello world"
        assert outcome.error is None
        assert outcome.metadata["return_code"] == 0

    def test_run_failure(self):
        outcome = _posix_adapter().run(ShellCommand(command="exit 3"))
        assert outcome.failed
        assert outcome.reason is FailureReason.SHELL_FAILURE
        assert outcome.metadata["return_code"] == 3
        assert "code 3" in outcome.error

    def test_run_captures_stderr(self):
        outcome = _posix_adapter().run(ShellCommand(command="echo broken >&2 && exit 1"))
        assert outcome.failed
        assert outcome.error == "broken"

    def test_run_passes_stdin(self):
        outcome = _posix_adapter().run(ShellCommand(command="cat", stdin="ssh-rsa AAAA\n"))
        assert outcome.message == "ssh-rsa AAAA"

    def test_timeout(self):
        outcome = _posix_adapter().run(ShellCommand(command="sleep 5", timeout=1))
        assert outcome.failed
        assert "timed out after 1s" in outcome.error

    def test_required_executable_missing(self):
        outcome = _posix_adapter().run(ShellCommand(
            command="echo never", required_executable="no-such-binary-git2go",
        ))
        assert outcome.failed
        assert outcome.reason is FailureReason.TOOL_ABSENT
        assert "no-such-binary-git2go" in outcome.error

    def test_required_executable_present(self):
        outcome = _posix_adapter().run(ShellCommand(command="echo ok", required_executable="sh"))
        assert outcome.succeeded

    def test_package_manager_precheck(self):
        adapter = _posix_adapter(package_manager="no-such-pm-git2go")
        outcome = adapter.run(ShellCommand(command="echo hi"))
        assert outcome.failed
        assert outcome.reason is FailureReason.TOOL_ABSENT
        assert "no-such-pm-git2go" in outcome.error

    def test_package_manager_precheck_skipped(self):
        adapter = _posix_adapter(package_manager="no-such-pm-git2go")
        outcome = adapter.run(ShellCommand(command="echo hi", skip_package_manager_check=True))
        assert outcome.succeeded

    def test_check(self, tmp_path):
        present = tmp_path / "id_rsa"
        present.write_text("key")
        adapter = _posix_adapter()
        assert adapter.check(ShellCommand(command=f"test -f {present}"))
        assert not adapter.check(ShellCommand(command=f"test -f {tmp_path / 'missing'}"))


class TestInvocationBuilding:
    def test_posix_plain(self):
        argv, use_shell = _posix_adapter()._build_invocation(ShellCommand(command="brew install git"))
        assert argv == "brew install git"
        assert use_shell is True

    def test_posix_elevated_uses_sudo(self, monkeypatch):
        monkeypatch.setattr("git2go.adapters.shell.command.os.geteuid", lambda: 1000)
        argv, _ = _posix_adapter()._build_invocation(
            ShellCommand(command="echo 'hi there'", require_elevation=True),
        )
        assert argv.startswith("sudo sh -c ")
        assert "hi there" in argv

    def test_posix_elevated_as_root(self, monkeypatch):
        monkeypatch.setattr("git2go.adapters.shell.command.os.geteuid", lambda: 0)
        argv, _ = _posix_adapter()._build_invocation(
            ShellCommand(command="echo hi", require_elevation=True),
        )
        assert argv == "echo hi"

    def test_windows_uses_powershell(self):
        adapter = ShellCommandAdapter(platform=Platform.WINDOWS)
        argv, use_shell = adapter._build_invocation(ShellCommand(command="choco --version"))
        assert use_shell is False
        assert argv[0] == "powershell"
        assert argv[-2:] == ["-Command", "choco --version"]

    def test_windows_elevated_encodes_script(self):
        adapter = ShellCommandAdapter(platform=Platform.WINDOWS)
        script = "choco install 'git' -y"
        argv, _ = adapter._build_invocation(ShellCommand(command=script, require_elevation=True))
        wrapper = argv[-1]
        assert "-Verb RunAs" in wrapper
        assert "exit $p.ExitCode" in wrapper
        encoded = wrapper.split("'-EncodedCommand','")[1].split("'")[0]
        assert base64.b64decode(encoded).decode("utf-16-le") == script


class TestOutcomeFromRunner:
    def test_success_has_message_only(self):
        outcome = _posix_adapter().run(ShellCommand(command="true"))
        assert isinstance(outcome, Outcome)
        assert outcome.message == ""
        assert outcome.error is None


class TestElevationGuards:
    def test_declined_uac_prompt_exits_nonzero(self):
        adapter = ShellCommandAdapter(platform=Platform.WINDOWS)
        argv, _ = adapter._build_invocation(
            ShellCommand(command="choco install 'git' -y", require_elevation=True),
        )
        wrapper = argv[-1]
        assert wrapper.startswith("$ErrorActionPreference = 'Stop'; ")
        assert wrapper.index("if (-not $p) { exit 1 }") < wrapper.index("exit $p.ExitCode")

    def test_interactive_output_not_captured(self):
        outcome = _posix_adapter().run(ShellCommand(command="echo to-the-terminal", interactive=True))
        assert outcome.succeeded
        assert outcome.message == ""

    def test_interactive_failure_keeps_exit_code(self):
        outcome = _posix_adapter().run(ShellCommand(command="exit 4", interactive=True))
        assert outcome.failed
        assert outcome.error == "Command exited with code 4"
