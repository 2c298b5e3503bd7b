"""
Workflow context — everything a git2go operation is allowed to touch.

Instead of process-wide singletons, every core service receives a
``WorkflowContext``. It carries:

    - the platform support object (all OS branching)
    - the shell runner (all OS interaction)
    - the package-manager installer
    - the host capabilities (prompt, progress, notifications)
    - settings
    - the memoized SSH key directory

Entry points build one with ``create_context``; tests build one by hand
with fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from git2go.adapters.base import ShellRunner
from git2go.core.config.loader import Settings
from git2go.core.platform import Platform, PlatformSupport, get_platform_support


# ── Host capabilities ───────────────────────────────────────────


class Prompter(Protocol):
    def ask(self, prompt: str, default: str = "") -> str | None:
        """Return the user's answer, or None if the prompt was dismissed."""


class ProgressSink(Protocol):
    def report(self, message: str, increment: int = 0) -> None:
        """Report a status string and a completion increment (percent)."""


class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class PackageManagerInstaller(Protocol):
    def ensure_installed(self, progress: ProgressSink, weight: int) -> bool:
        """Make sure the platform package manager exists."""


class NullProgress:
    """ProgressSink that discards everything."""

    def report(self, message: str, increment: int = 0) -> None:
        pass


# ── Context ─────────────────────────────────────────────────────


@dataclass
class WorkflowContext:
    support: PlatformSupport
    shell: ShellRunner
    package_manager: PackageManagerInstaller
    prompter: Prompter
    notifier: Notifier
    progress: ProgressSink = field(default_factory=NullProgress)
    settings: Settings = field(default_factory=Settings)
    key_directory: Path | None = None   # memoized by ssh_keys.resolve_key_directory

    @property
    def platform(self) -> Platform:
        return self.support.platform


def create_context(
    prompter: Prompter,
    notifier: Notifier,
    progress: ProgressSink | None = None,
    settings: Settings | None = None,
    platform: Platform | None = None,
    shell: ShellRunner | None = None,
) -> WorkflowContext:
    """Wire up a context for the real host.

    Args:
        platform: Override detection (mostly for tests).
        shell: Override the shell runner (``--mock`` uses MockShellAdapter).
    """
    from git2go.adapters.shell.command import ShellCommandAdapter
    from git2go.core.services.package_manager import BootstrapPackageManager

    settings = settings or Settings()
    support = get_platform_support(platform)

    if shell is None:
        # Only Chocolatey-backed commands get the package-manager pre-check
        shell = ShellCommandAdapter(
            platform=support.platform,
            package_manager=support.package_manager
            if support.platform is Platform.WINDOWS else None,
            default_timeout=settings.command_timeout,
        )

    return WorkflowContext(
        support=support,
        shell=shell,
        package_manager=BootstrapPackageManager(support, shell),
        prompter=prompter,
        notifier=notifier,
        progress=progress or NullProgress(),
        settings=settings,
    )
