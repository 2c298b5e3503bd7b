"""
Git installer.

Installs git through the platform package manager. Idempotent: when git
is already present nothing is mutated and ``"Already installed"`` is
returned, so re-running after a failure is always safe.

Progress weights (percent of the install workflow):
    package manager ready   25
    install command issued  10
    install complete        20
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from git2go.core.context import WorkflowContext
from git2go.core.models.outcome import FailureReason, Outcome
from git2go.core.platform import Platform
from git2go.core.services.git_presence import is_git_installed

logger = logging.getLogger(__name__)

ALREADY_INSTALLED = "Already installed"

PACKAGE_MANAGER_WEIGHT = 25
ISSUED_WEIGHT = 10
COMPLETE_WEIGHT = 20


def install_log_path(log_dir: Path, package: str, now: datetime | None = None) -> Path:
    """Timestamped log artifact path, e.g. ``git-install-20250101-120000.log``."""
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return log_dir / f"{package}-install-{stamp}.log"


def install_git(ctx: WorkflowContext) -> Outcome:
    """Install git if it is missing.

    Returns:
        Success with ``"Already installed"`` or the install output;
        failure with the captured error text.
    """
    if is_git_installed(ctx):
        return Outcome.success(ALREADY_INSTALLED)

    if ctx.platform is Platform.UNSUPPORTED:
        return Outcome.failure("Unsupported platform", reason=FailureReason.TOOL_ABSENT)

    if not ctx.package_manager.ensure_installed(ctx.progress, PACKAGE_MANAGER_WEIGHT):
        return Outcome.failure(
            "Package manager could not be installed",
            reason=FailureReason.TOOL_ABSENT,
        )

    package = ctx.settings.package
    log_dir = ctx.settings.log_dir
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Cannot create log directory %s: %s", log_dir, e)
        return Outcome.failure(f"Cannot create log directory {log_dir}: {e}")
    log_file = install_log_path(log_dir, package)

    command = ctx.support.install_command(package, log_file)
    ctx.progress.report(f"Install {package}", ISSUED_WEIGHT)
    logger.info("Installing %s: %s", package, command.command)

    result = ctx.shell.run(command)

    if not ctx.support.writes_own_install_log:
        _write_install_log(log_file, command.command, result)

    if result.failed:
        logger.error("Install of %s failed (log: %s): %s", package, log_file, result.error)
        return Outcome.failure(
            result.error or "Install failed",
            reason=result.reason or FailureReason.SHELL_FAILURE,
            metadata={"log_file": str(log_file)},
        )

    ctx.support.refresh_environment(ctx.shell)
    if not is_git_installed(ctx):
        logger.error("Install of %s reported success but git is still missing", package)
        return Outcome.failure(
            f"{package} install finished but git is still not available",
            reason=FailureReason.TOOL_ABSENT,
            metadata={"log_file": str(log_file)},
        )

    ctx.progress.report(f"{package} installed", COMPLETE_WEIGHT)
    logger.info("Installed %s (log: %s)", package, log_file)
    return Outcome.success(
        result.message or f"{package} installed",
        metadata={"log_file": str(log_file)},
    )


def _write_install_log(log_file: Path, command: str, result: Outcome) -> None:
    """Write combined output/error of an install command."""
    lines = [f"$ {command}", ""]
    if result.message:
        lines.append(result.message)
    stderr = result.metadata.get("stderr") or ""
    stdout = result.metadata.get("stdout") or ""
    if stdout:
        lines.append(stdout)
    if stderr:
        lines.append(stderr)
    if result.error:
        lines.append(result.error)
    lines.append("")
    lines.append("exit: ok" if result.succeeded else "exit: failed")

    try:
        log_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as e:
        logger.warning("Could not write install log %s: %s", log_file, e)
