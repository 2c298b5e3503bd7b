"""
Shell command adapter — execute shell commands on the host OS.

The only place ``subprocess.run`` is called. Every git, ssh-keygen,
package-manager and clipboard invocation goes through it.

Dialects:
    POSIX    ``/bin/sh -c`` (``shell=True``); elevation via ``sudo``.
    Windows  ``powershell -NoProfile -Command``; elevation via
             ``Start-Process -Verb RunAs -Wait -PassThru``.
"""

from __future__ import annotations

import base64
import logging
import os
import shlex
import shutil
import subprocess
import time

from git2go.adapters.base import ShellRunner
from git2go.core.models.outcome import FailureReason, Outcome, ShellCommand
from git2go.core.platform import Platform

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 600

_POWERSHELL = ["powershell", "-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass"]


class ShellCommandAdapter(ShellRunner):
    """Run shell commands and capture their output.

    Args:
        platform: Host platform; selects the shell dialect.
        package_manager: Executable that must exist before running
            commands that do not set ``skip_package_manager_check``.
            ``None`` disables the pre-check.
        default_timeout: Seconds before a command is abandoned.
    """

    def __init__(
        self,
        platform: Platform,
        package_manager: str | None = None,
        default_timeout: int = DEFAULT_TIMEOUT,
    ):
        self._platform = platform
        self._package_manager = package_manager
        self._default_timeout = default_timeout

    @property
    def name(self) -> str:
        return "shell"

    @property
    def windows(self) -> bool:
        return self._platform is Platform.WINDOWS

    def is_available(self) -> bool:
        if self.windows:
            return shutil.which("powershell") is not None
        return shutil.which("sh") is not None

    def validate(self, command: ShellCommand) -> tuple[bool, str]:
        if not command.command.strip():
            return False, "Missing command"

        exe = command.required_executable
        if exe and shutil.which(exe) is None:
            return False, f"Required command '{exe}' not found on PATH"

        pm = self._package_manager
        if pm and not command.skip_package_manager_check and shutil.which(pm) is None:
            return False, f"Package manager '{pm}' is not installed"

        return True, ""

    def run(self, command: ShellCommand) -> Outcome:
        is_valid, error_msg = self.validate(command)
        if not is_valid:
            logger.debug("Rejected: %s (%s)", command.command, error_msg)
            return Outcome.failure(
                error_msg,
                reason=FailureReason.TOOL_ABSENT,
                metadata={"command": command.command},
            )

        timeout = command.timeout or self._default_timeout
        argv, use_shell = self._build_invocation(command)

        logger.debug(
            "Executing%s: %s", " (elevated)" if command.require_elevation else "",
            command.command,
        )
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                shell=use_shell,
                capture_output=not command.interactive,
                text=True,
                input=None if command.interactive else command.stdin,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Outcome.failure(
                f"Command timed out after {timeout}s",
                metadata={"command": command.command, "timeout": timeout},
            )
        except OSError as e:
            return Outcome.failure(
                f"Command execution error: {e}",
                metadata={"command": command.command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Outcome.success(
                output,
                duration_ms=elapsed_ms,
                metadata={
                    "command": command.command,
                    "return_code": result.returncode,
                    "stderr": stderr,
                },
            )

        logger.debug("Command failed (exit %d): %s", result.returncode, command.command)
        return Outcome.failure(
            stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={
                "command": command.command,
                "return_code": result.returncode,
                "stdout": output,
            },
        )

    # ── Invocation building ─────────────────────────────────────

    def _build_invocation(self, command: ShellCommand) -> tuple[str | list[str], bool]:
        """Return ``(argv, shell)`` for ``subprocess.run``."""
        if self.windows:
            script = command.command
            if command.require_elevation:
                script = _elevated_powershell(script)
            return [*_POWERSHELL, "-Command", script], False

        script = command.command
        if command.require_elevation and os.geteuid() != 0:
            script = f"sudo sh -c {shlex.quote(script)}"
        return script, True


def _elevated_powershell(script: str) -> str:
    """Wrap a PowerShell script so it runs in an administrator session.

    The inner script travels as ``-EncodedCommand`` (UTF-16LE base64),
    so no quoting survives into the elevated process. Output of the
    elevated process is not captured; callers that need it tee to a file.
    A declined UAC prompt leaves no process and exits 1.
    """
    encoded = base64.b64encode(script.encode("utf-16-le")).decode("ascii")
    return (
        "$ErrorActionPreference = 'Stop'; "
        "$p = Start-Process -FilePath powershell -Verb RunAs -Wait -PassThru "
        "-WindowStyle Hidden -ArgumentList "
        f"'-NoProfile','-ExecutionPolicy','Bypass','-EncodedCommand','{encoded}'; "
        "if (-not $p) { exit 1 }; exit $p.ExitCode"
    )
