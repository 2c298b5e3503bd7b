"""Adapters — shell runner bindings for the host OS.

Public re-exports for convenient access.
"""

from git2go.adapters.base import ShellRunner
from git2go.adapters.mock import MockShellAdapter
from git2go.adapters.shell.command import ShellCommandAdapter

__all__ = [
    "MockShellAdapter",
    "ShellCommandAdapter",
    "ShellRunner",
]
