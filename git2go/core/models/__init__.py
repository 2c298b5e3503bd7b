"""
Domain models — Pydantic types for git2go.

All models are re-exported here for convenient access:

    from git2go.core.models import Outcome, ShellCommand, GitIdentity
"""

from git2go.core.models.identity import GitIdentity
from git2go.core.models.outcome import FailureReason, Outcome, ShellCommand

__all__ = [
    "FailureReason",
    "GitIdentity",
    "Outcome",
    "ShellCommand",
]
