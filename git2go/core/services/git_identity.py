"""
Git identity configurator.

Configuration is an ordered pipeline of steps. Each step reads and/or
writes one global git config key and reports ``applied``, ``skipped`` or
``failed``. The pipeline never stops on a failed step: git config access
is best-effort, a failed read counts as an empty value.

Default pipeline:
    1. core.editor   — always written
    2. user.name     — prompted when empty, or always with ``force``
    3. user.email    — same policy

After the pipeline the identity is re-read from git (a write may have
been skipped or failed), reported, and handed to the SSH key manager.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from git2go.core.config.loader import Settings
from git2go.core.context import WorkflowContext
from git2go.core.models.identity import GitIdentity
from git2go.core.models.outcome import Outcome
from git2go.core.services.git_presence import is_git_installed
from git2go.core.services.ssh_keys import ALREADY_HAD_KEYS, generate_keys

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepResult:
    key: str
    status: StepStatus
    value: str = ""

    def to_dict(self) -> dict:
        return {"key": self.key, "status": self.status.value, "value": self.value}


Step = Callable[[WorkflowContext, bool], StepResult]


# ── Global config access ────────────────────────────────────────


def read_config(ctx: WorkflowContext, key: str) -> str:
    """Global git config value; unset or unreadable → ``""``."""
    result = ctx.shell.run(ctx.support.git_config_command(key))
    if result.succeeded:
        return (result.message or "").strip()
    return ""


def write_config(ctx: WorkflowContext, key: str, value: str) -> bool:
    result = ctx.shell.run(ctx.support.git_config_command(key, value))
    if result.failed:
        logger.warning("Could not set %s: %s", key, result.error)
    return result.succeeded


def read_identity(ctx: WorkflowContext) -> GitIdentity:
    return GitIdentity(
        name=read_config(ctx, "user.name"),
        email=read_config(ctx, "user.email"),
    )


# ── Step combinators ────────────────────────────────────────────


def set_value(key: str, value: str) -> Step:
    """Step that writes *value* unconditionally."""

    def step(ctx: WorkflowContext, force: bool) -> StepResult:
        if write_config(ctx, key, value):
            return StepResult(key, StepStatus.APPLIED, value)
        return StepResult(key, StepStatus.FAILED, value)

    return step


def prompt_if_missing(key: str, prompt: str) -> Step:
    """Step that asks for *key* when it is empty or when forced.

    The prompt is pre-filled with the current value. A dismissed or blank
    answer leaves the config untouched.
    """

    def step(ctx: WorkflowContext, force: bool) -> StepResult:
        current = read_config(ctx, key)
        if current and not force:
            return StepResult(key, StepStatus.SKIPPED, current)

        answer = ctx.prompter.ask(prompt, current)
        answer = (answer or "").strip()
        if not answer:
            logger.debug("No value supplied for %s, keeping %r", key, current)
            return StepResult(key, StepStatus.SKIPPED, current)

        if write_config(ctx, key, answer):
            return StepResult(key, StepStatus.APPLIED, answer)
        return StepResult(key, StepStatus.FAILED, current)

    return step


def identity_steps(settings: Settings) -> list[Step]:
    return [
        set_value("core.editor", settings.editor),
        prompt_if_missing("user.name", "[Git] your name"),
        prompt_if_missing("user.email", "[Git] your email"),
    ]


def run_steps(ctx: WorkflowContext, steps: list[Step], force: bool) -> list[StepResult]:
    results = []
    for step in steps:
        result = step(ctx, force)
        logger.debug("Step %s: %s", result.key, result.status.value)
        results.append(result)
    return results


# ── Configure ───────────────────────────────────────────────────


@dataclass
class ConfigureReport:
    identity: GitIdentity
    steps: list[StepResult] = field(default_factory=list)
    ssh_keys: Outcome | None = None

    def to_dict(self) -> dict:
        return {
            "identity": self.identity.model_dump(),
            "steps": [s.to_dict() for s in self.steps],
            "ssh_keys": self.ssh_keys.model_dump(mode="json") if self.ssh_keys else None,
        }


def configure(ctx: WorkflowContext, force: bool = False) -> ConfigureReport | None:
    """Configure editor, identity and SSH keys.

    Returns:
        The report, or None when git is not installed (nothing is done).

    Raises:
        UnsupportedPlatformError: From key-directory resolution.
    """
    if not is_git_installed(ctx):
        logger.info("Git is not installed, skipping configuration")
        return None

    ctx.notifier.info("Configure git settings")
    steps = run_steps(ctx, identity_steps(ctx.settings), force)

    identity = read_identity(ctx)
    ctx.notifier.info(
        f"git configured:\nuser.name: '{identity.name}'\nuser.email: '{identity.email}'"
    )

    key_outcome = generate_keys(ctx, identity)
    if key_outcome.message != ALREADY_HAD_KEYS:
        if key_outcome.succeeded:
            ctx.notifier.info(key_outcome.message or "")
        else:
            ctx.notifier.error(key_outcome.error or "")

    return ConfigureReport(identity=identity, steps=steps, ssh_keys=key_outcome)
