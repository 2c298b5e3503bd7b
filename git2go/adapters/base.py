"""
Shell runner base — the protocol contract between the core and the host OS.

This defines the abstract interface that every shell runner must
implement. The core only talks to the operating system through this
protocol, never directly through ``subprocess``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from git2go.core.models.outcome import Outcome, ShellCommand


class ShellRunner(ABC):
    """Abstract base class for all shell runners.

    Runners perform external side effects and return outcomes.
    They NEVER raise exceptions — failures are captured in the Outcome.

    To create a new runner:
        1. Subclass ShellRunner
        2. Implement name, is_available, validate, run
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying shell exists. Fast, never raises."""

    @abstractmethod
    def validate(self, command: ShellCommand) -> tuple[bool, str]:
        """Validate that the command can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def run(self, command: ShellCommand) -> Outcome:
        """Execute the command and return an outcome.

        MUST never raise exceptions. All failures are captured
        in the Outcome with ``succeeded=False``.
        """

    def check(self, command: ShellCommand) -> bool:
        """Typed check: True iff the command exits cleanly."""
        return self.run(command).succeeded

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
