"""
SSH key manager.

Resolves the per-platform key directory, checks for an existing private
key and generates a passphrase-less key pair commented with the user's
git email.

Generation is idempotent: when a key already exists the sentinel
``ALREADY_HAD_KEYS`` message is returned and nothing is run. Callers
compare against it to avoid announcing work that did not happen.
"""

from __future__ import annotations

import logging
from pathlib import Path

from git2go.core.context import WorkflowContext
from git2go.core.models.identity import GitIdentity
from git2go.core.models.outcome import FailureReason, Outcome

logger = logging.getLogger(__name__)

ALREADY_HAD_KEYS = "Already had SSH Keys"


def resolve_key_directory(ctx: WorkflowContext) -> Path:
    """The SSH key directory, computed once per context.

    Raises:
        UnsupportedPlatformError: On platforms without a known convention.
    """
    if ctx.key_directory is None:
        ctx.key_directory = ctx.support.key_directory()
        logger.debug("SSH key directory: %s", ctx.key_directory)
    return ctx.key_directory


def private_key_path(ctx: WorkflowContext) -> Path:
    return resolve_key_directory(ctx) / ctx.settings.key_file


def public_key_path(ctx: WorkflowContext) -> Path:
    return resolve_key_directory(ctx) / f"{ctx.settings.key_file}.pub"


def has_keys(ctx: WorkflowContext) -> bool:
    """Whether the private key exists. Any failed check means no."""
    return ctx.shell.check(ctx.support.key_exists_command(private_key_path(ctx)))


def generate_keys(ctx: WorkflowContext, identity: GitIdentity) -> Outcome:
    """Ensure an SSH key pair exists, generating one if needed.

    An empty ``identity.email`` is accepted; the key comment is then empty.
    """
    key_dir = resolve_key_directory(ctx)

    if has_keys(ctx):
        logger.info("SSH key already present in %s", key_dir)
        return Outcome.success(ALREADY_HAD_KEYS)

    ctx.support.prepare_key_directory(key_dir)

    command = ctx.support.keygen_command(
        identity.email, private_key_path(ctx), ctx.settings.key_type,
    )
    logger.info("Generating %s key pair in %s", ctx.settings.key_type, key_dir)
    result = ctx.shell.run(command)

    if result.failed:
        return Outcome.failure(
            f"Command failed: '{command.command}'.\n{result.error}",
            reason=result.reason or FailureReason.SHELL_FAILURE,
        )
    return Outcome.success(f"SSH Key Pairs generated in {key_dir}")


def read_public_key(ctx: WorkflowContext) -> str | None:
    """Contents of the public key file, or None if it is missing."""
    path = public_key_path(ctx)
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None


def copy_public_key(ctx: WorkflowContext) -> Outcome:
    """Put the public key on the clipboard."""
    pub_key = read_public_key(ctx)
    if not pub_key:
        return Outcome.failure(
            f"No public key found at {public_key_path(ctx)}",
            reason=FailureReason.TOOL_ABSENT,
        )

    command = ctx.support.clipboard_command().model_copy(update={"stdin": pub_key + "\n"})
    result = ctx.shell.run(command)
    if result.failed:
        return Outcome.failure(
            f"Could not copy public key to clipboard: {result.error}",
            reason=result.reason or FailureReason.SHELL_FAILURE,
        )
    return Outcome.success(pub_key)
