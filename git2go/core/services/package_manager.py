"""
Package manager bootstrap — make sure Homebrew / Chocolatey exists.

git2go does not manage packages itself. It asks the package manager for
its version and, if that fails, runs the vendor's official installer
script once, then asks again.
"""

from __future__ import annotations

import logging

from git2go.adapters.base import ShellRunner
from git2go.core.platform import PlatformSupport

logger = logging.getLogger(__name__)


class BootstrapPackageManager:
    """PackageManagerInstaller backed by the vendor bootstrap scripts."""

    def __init__(self, support: PlatformSupport, shell: ShellRunner):
        self._support = support
        self._shell = shell

    def version(self) -> str | None:
        """Installed package manager version, or None if absent."""
        result = self._shell.run(self._support.package_manager_version_command())
        if result.succeeded and result.message:
            return result.message.splitlines()[0].strip()
        return None

    def ensure_installed(self, progress, weight: int) -> bool:
        pm = self._support.package_manager
        if pm is None:
            logger.warning("No package manager known for %s", self._support.platform.value)
            return False

        version = self.version()
        if version:
            logger.info("%s already installed: %s", pm, version)
            progress.report(f"{pm} {version}", weight)
            return True

        logger.info("%s not found — running bootstrap installer", pm)
        progress.report(f"Installing {pm}...", weight // 2)

        for command in self._support.package_manager_bootstrap_commands():
            result = self._shell.run(command)
            if result.failed:
                logger.error("%s bootstrap failed at %r: %s", pm, command.command, result.error)
                return False

        self._support.refresh_environment(self._shell)

        version = self.version()
        if not version:
            logger.error("%s bootstrap finished but '%s --version' still fails", pm, pm)
            return False

        progress.report(f"{pm} {version}", weight - weight // 2)
        return True
