"""
Git presence check.

Answers "is git installed?" without ever raising. The platform support
object decides how: ``git --version`` on POSIX hosts, the Chocolatey
package listing on Windows.
"""

from __future__ import annotations

import logging

from git2go.core.context import WorkflowContext

logger = logging.getLogger(__name__)


def is_git_installed(ctx: WorkflowContext) -> bool:
    """Whether git is present on this workstation."""
    try:
        installed = ctx.support.presence_check(ctx.shell)
    except Exception as e:
        logger.warning("Presence check errored, assuming git is absent: %s", e)
        installed = False

    logger.info("Git installed: %s", installed)
    return installed
