"""
Install / configure workflow — the user-facing operations.

    install    presence → install (if needed) → configure → copy key
    configure  configure with force (always re-prompt)
    check      report whether git is installed
    copy-key   public key → clipboard

State trail per install::

    start → check_presence → {already_installed | installing} → configuring → done
                                                   installing → failed

A failed install stops before configuration; nothing is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from git2go.core.context import WorkflowContext
from git2go.core.models.outcome import Outcome
from git2go.core.services import ssh_keys
from git2go.core.services.git_identity import ConfigureReport, configure
from git2go.core.services.git_installer import ALREADY_INSTALLED, install_git
from git2go.core.services.git_presence import is_git_installed

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    START = "start"
    CHECK_PRESENCE = "check_presence"
    ALREADY_INSTALLED = "already_installed"
    INSTALLING = "installing"
    CONFIGURING = "configuring"
    DONE = "done"
    FAILED = "failed"


@dataclass
class WorkflowResult:
    """Outcome of one workflow invocation."""

    operation: str
    states: list[WorkflowState] = field(default_factory=lambda: [WorkflowState.START])
    install: Outcome | None = None
    configure: ConfigureReport | None = None
    copy_key: Outcome | None = None

    @property
    def state(self) -> WorkflowState:
        return self.states[-1]

    @property
    def ok(self) -> bool:
        return self.state is WorkflowState.DONE

    def advance(self, state: WorkflowState) -> None:
        logger.debug("%s: %s → %s", self.operation, self.state.value, state.value)
        self.states.append(state)

    def to_dict(self) -> dict:
        result: dict = {
            "operation": self.operation,
            "ok": self.ok,
            "state": self.state.value,
            "states": [s.value for s in self.states],
        }
        if self.install:
            result["install"] = self.install.model_dump(mode="json")
        if self.configure:
            result["configure"] = self.configure.to_dict()
        if self.copy_key:
            result["copy_key"] = self.copy_key.model_dump(mode="json")
        return result


def run_install(ctx: WorkflowContext, copy_key: bool = True) -> WorkflowResult:
    """Install git if needed, then configure it (non-forced)."""
    result = WorkflowResult(operation="install")
    ctx.progress.report("Start...", 5)

    result.advance(WorkflowState.CHECK_PRESENCE)
    outcome = install_git(ctx)
    result.install = outcome

    if outcome.failed:
        # install_git checks presence itself; record the branch it took
        result.advance(WorkflowState.INSTALLING)
        result.advance(WorkflowState.FAILED)
        ctx.notifier.error(f"Installation failed. {outcome.error}")
        return result

    if outcome.message == ALREADY_INSTALLED:
        result.advance(WorkflowState.ALREADY_INSTALLED)
    else:
        result.advance(WorkflowState.INSTALLING)

    ctx.progress.report("Configure...", 20)
    result.advance(WorkflowState.CONFIGURING)
    result.configure = configure(ctx, force=False)

    result.advance(WorkflowState.DONE)
    ctx.progress.report("Success", 20)
    ctx.notifier.info("Git installed and configured.")

    if copy_key:
        result.copy_key = copy_public_key(ctx)

    return result


def run_configure(ctx: WorkflowContext) -> WorkflowResult:
    """Re-run configuration, always prompting for name and email."""
    result = WorkflowResult(operation="configure")
    result.advance(WorkflowState.CONFIGURING)
    result.configure = configure(ctx, force=True)
    result.advance(WorkflowState.DONE)
    ctx.notifier.info("Git Configured")
    return result


def check_installation(ctx: WorkflowContext) -> bool:
    """Tell the user whether git is installed."""
    installed = is_git_installed(ctx)
    if installed:
        ctx.notifier.info("Git is installed on your system")
    else:
        ctx.notifier.warning("Git is not installed")
    return installed


def copy_public_key(ctx: WorkflowContext) -> Outcome:
    """Copy the public key to the clipboard and tell the user."""
    outcome = ssh_keys.copy_public_key(ctx)
    if outcome.succeeded:
        ctx.notifier.info(f"Public Key on your Clipboard\n{outcome.message}")
    else:
        ctx.notifier.error(outcome.error or "")
    return outcome
