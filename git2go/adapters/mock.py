"""
Mock shell runner — universal test double for shell operations.

Used in mock mode (``git2go --mock``) and in tests to simulate shell
behavior without touching the host. Returns success by default and can
be configured with custom outcomes per command pattern.
"""

from __future__ import annotations

import re

from git2go.adapters.base import ShellRunner
from git2go.core.models.outcome import Outcome, ShellCommand


class MockShellAdapter(ShellRunner):
    """Universal mock shell runner.

    Responses are matched against the command string with ``re.search``
    in registration order; the first match wins.
    """

    def __init__(
        self,
        runner_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = runner_name
        self._available = available
        self._default_output = default_output
        self._responses: list[tuple[re.Pattern[str], Outcome]] = []
        self._call_log: list[ShellCommand] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ShellCommand]:
        """All commands this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def commands(self) -> list[str]:
        """Command strings received, in order."""
        return [c.command for c in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, pattern: str, outcome: Outcome) -> None:
        """Set a custom outcome for commands matching *pattern*."""
        self._responses.append((re.compile(pattern), outcome))

    def set_output(self, pattern: str, output: str) -> None:
        """Configure matching commands to succeed with *output*."""
        self.set_response(pattern, Outcome.success(output))

    def set_failure(self, pattern: str, error: str = "Mock failure") -> None:
        """Configure matching commands to fail."""
        self.set_response(pattern, Outcome.failure(error))

    def validate(self, command: ShellCommand) -> tuple[bool, str]:
        return True, ""

    def run(self, command: ShellCommand) -> Outcome:
        self._call_log.append(command)

        for pattern, outcome in self._responses:
            if pattern.search(command.command):
                return outcome

        return Outcome.success(self._default_output, metadata={"mock": True})

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
