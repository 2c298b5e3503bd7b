"""
ShellCommand and Outcome models — the execution contract.

Commands represent requested shell invocations. Outcomes represent results.
This is the fundamental I/O contract between the core and the shell
runner: the core sends ShellCommands, runners return Outcomes. Never
exceptions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class FailureReason(str, Enum):
    """Why an Outcome failed."""

    TOOL_ABSENT = "tool_absent"       # binary or package manager missing, not remediable
    SHELL_FAILURE = "shell_failure"   # command exited non-zero or produced error text


class ShellCommand(BaseModel):
    """A requested shell invocation.

    The command string is written in the dialect of the host shell
    (``/bin/sh`` on POSIX, PowerShell on Windows).
    """

    command: str
    require_elevation: bool = False
    required_executable: str | None = None  # must be on PATH before running
    skip_package_manager_check: bool = False
    stdin: str | None = None
    timeout: int | None = None              # None = runner default
    interactive: bool = False               # inherit the terminal; output is not captured


class Outcome(BaseModel):
    """Result of a shell-backed operation.

    Exactly one of ``message`` / ``error`` is set, consistent with
    ``succeeded``. An empty string still counts as set.
    """

    succeeded: bool
    message: str | None = None
    error: str | None = None
    reason: FailureReason | None = None

    finished_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_message_xor_error(self) -> Outcome:
        if self.succeeded:
            if self.message is None or self.error is not None:
                raise ValueError("successful outcome needs a message and no error")
        elif self.error is None or self.message is not None:
            raise ValueError("failed outcome needs an error and no message")
        return self

    @property
    def failed(self) -> bool:
        """Whether the operation failed."""
        return not self.succeeded

    @classmethod
    def success(cls, message: str = "", **kwargs: Any) -> Outcome:
        """Create a success outcome."""
        return cls(succeeded=True, message=message, **kwargs)

    @classmethod
    def failure(
        cls,
        error: str,
        reason: FailureReason = FailureReason.SHELL_FAILURE,
        **kwargs: Any,
    ) -> Outcome:
        """Create a failure outcome."""
        return cls(succeeded=False, error=error, reason=reason, **kwargs)
