"""
Platform capability — every OS-specific branch lives here.

The host platform is detected once (``detect_platform``) and mapped to a
support object (``get_platform_support``) that knows how to:

    - check whether git is present
    - build the package-manager install command
    - locate the SSH key directory
    - build key-existence / key generation / clipboard commands
    - quote values for its shell dialect
    - refresh the process environment after an install

Core services never look at ``sys.platform`` themselves.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import sys
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from git2go.core.models.outcome import ShellCommand

if TYPE_CHECKING:
    from git2go.adapters.base import ShellRunner

logger = logging.getLogger(__name__)


class Platform(str, Enum):
    MACOS = "macos"
    WINDOWS = "windows"
    UNSUPPORTED = "unsupported"


class UnsupportedPlatformError(RuntimeError):
    """Raised when an operation has no known convention on this platform.

    Not recoverable: callers are expected to let it surface.
    """

    def __init__(self, operation: str, platform: Platform | str = Platform.UNSUPPORTED):
        self.operation = operation
        self.platform = platform
        super().__init__(f"Platform not supported for {operation}: {sys.platform}")


def detect_platform(system: str | None = None) -> Platform:
    """Map ``sys.platform`` (or *system*) to a Platform."""
    system = system or sys.platform
    if system == "darwin":
        return Platform.MACOS
    if system == "win32":
        return Platform.WINDOWS
    return Platform.UNSUPPORTED


# Homebrew prefixes (Apple Silicon, Intel)
_BREW_BIN_DIRS = ("/opt/homebrew/bin", "/usr/local/bin")

_HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
_CHOCOLATEY_INSTALL_URL = "https://community.chocolatey.org/install.ps1"


class PlatformSupport(ABC):
    """Per-OS strategy. One instance per process."""

    platform: Platform
    package_manager: str | None = None

    @abstractmethod
    def quote(self, value: str) -> str:
        """Quote *value* as a single argument in this shell dialect."""

    @abstractmethod
    def presence_check(self, shell: ShellRunner) -> bool:
        """Whether git is callable / installed."""

    @abstractmethod
    def key_directory(self) -> Path:
        """The user's SSH key directory."""

    @abstractmethod
    def key_exists_command(self, key_path: Path) -> ShellCommand:
        """A command that exits 0 iff *key_path* is an existing file."""

    @abstractmethod
    def keygen_command(self, email: str, key_path: Path, key_type: str) -> ShellCommand:
        """Generate a passphrase-less key pair at *key_path*."""

    @abstractmethod
    def install_command(self, package: str, log_file: Path) -> ShellCommand:
        """Install *package* with the platform package manager."""

    @abstractmethod
    def package_manager_version_command(self) -> ShellCommand:
        """Report the package manager version (fails if absent)."""

    @abstractmethod
    def package_manager_bootstrap_commands(self) -> list[ShellCommand]:
        """Install the package manager itself; run in order, stop on failure."""

    @abstractmethod
    def clipboard_command(self) -> ShellCommand:
        """Copy stdin to the clipboard. The caller fills ``stdin``."""

    @property
    def writes_own_install_log(self) -> bool:
        """Whether ``install_command`` tees its own log file."""
        return False

    def prepare_key_directory(self, key_dir: Path) -> None:
        """Create the key directory if this platform expects us to."""

    def refresh_environment(self, shell: ShellRunner) -> None:
        """Make freshly installed binaries callable from this process."""

    def git_config_command(self, key: str, value: str | None = None) -> ShellCommand:
        """Read (``value=None``) or write a global git config value."""
        cmd = f"git config --global {key}"
        if value is not None:
            cmd = f"{cmd} {self.quote(value)}"
        return ShellCommand(
            command=cmd,
            required_executable="git",
            skip_package_manager_check=True,
        )


class _PosixSupport(PlatformSupport):
    """Shared ``/bin/sh`` behavior."""

    def quote(self, value: str) -> str:
        return shlex.quote(value)

    def presence_check(self, shell: ShellRunner) -> bool:
        result = shell.run(ShellCommand(
            command="git --version",
            required_executable="git",
            skip_package_manager_check=True,
        ))
        return result.succeeded and bool(result.message)

    def key_exists_command(self, key_path: Path) -> ShellCommand:
        return ShellCommand(
            command=f"test -f {self.quote(str(key_path))}",
            skip_package_manager_check=True,
        )

    def keygen_command(self, email: str, key_path: Path, key_type: str) -> ShellCommand:
        return ShellCommand(
            command=(
                f"ssh-keygen -t {self.quote(key_type)} -C {self.quote(email)} "
                f"-f {self.quote(str(key_path))} -q -N '' < /dev/null"
            ),
            required_executable="ssh-keygen",
            skip_package_manager_check=True,
        )


class MacOSSupport(_PosixSupport):
    platform = Platform.MACOS
    package_manager = "brew"

    def key_directory(self) -> Path:
        return Path.home() / ".ssh"

    def install_command(self, package: str, log_file: Path) -> ShellCommand:
        return ShellCommand(command=f"brew install {self.quote(package)}")

    def package_manager_version_command(self) -> ShellCommand:
        return ShellCommand(
            command="brew --version",
            required_executable="brew",
            skip_package_manager_check=True,
        )

    def package_manager_bootstrap_commands(self) -> list[ShellCommand]:
        # install.sh under NONINTERACTIVE only tries `sudo -n`; cache credentials first
        return [
            ShellCommand(
                command="sudo -v",
                required_executable="sudo",
                skip_package_manager_check=True,
                interactive=True,
            ),
            ShellCommand(
                command=f'NONINTERACTIVE=1 /bin/bash -c "$(curl -fsSL {_HOMEBREW_INSTALL_URL})"',
                required_executable="curl",
                skip_package_manager_check=True,
                interactive=True,
            ),
        ]

    def clipboard_command(self) -> ShellCommand:
        return ShellCommand(
            command="pbcopy",
            required_executable="pbcopy",
            skip_package_manager_check=True,
        )

    def refresh_environment(self, shell: ShellRunner) -> None:
        path_dirs = os.environ.get("PATH", "").split(os.pathsep)
        missing = [d for d in _BREW_BIN_DIRS if d not in path_dirs and Path(d).is_dir()]
        if missing:
            logger.debug("Adding Homebrew prefixes to PATH: %s", missing)
            os.environ["PATH"] = os.pathsep.join([*missing, *path_dirs])


class WindowsSupport(PlatformSupport):
    platform = Platform.WINDOWS
    package_manager = "choco"

    # choco list --limit-output prints "id|version"; git ships as git + git.install
    _GIT_PACKAGE_RE = re.compile(r"^git(\.install)?\|", re.IGNORECASE | re.MULTILINE)

    def quote(self, value: str) -> str:
        return "'" + value.replace("'", "''") + "'"

    def presence_check(self, shell: ShellRunner) -> bool:
        result = shell.run(ShellCommand(command="choco list --limit-output"))
        if not result.succeeded:
            return False
        return bool(self._GIT_PACKAGE_RE.search(result.message or ""))

    def key_directory(self) -> Path:
        drive = os.environ.get("HOMEDRIVE", "")
        home = os.environ.get("HOMEPATH", "")
        if drive and home:
            return Path(f"{drive}{home}") / ".ssh"
        profile = os.environ.get("USERPROFILE")
        return (Path(profile) if profile else Path.home()) / ".ssh"

    def prepare_key_directory(self, key_dir: Path) -> None:
        key_dir.mkdir(parents=True, exist_ok=True)

    def key_exists_command(self, key_path: Path) -> ShellCommand:
        return ShellCommand(
            command=(
                f"if (Test-Path -LiteralPath {self.quote(str(key_path))} -PathType Leaf) "
                "{ exit 0 } else { exit 1 }"
            ),
            skip_package_manager_check=True,
        )

    def keygen_command(self, email: str, key_path: Path, key_type: str) -> ShellCommand:
        # Windows PowerShell drops empty '' arguments; '""' survives as "".
        comment = self.quote(email) if email else "'\"\"'"
        return ShellCommand(
            command=(
                f"ssh-keygen -t {self.quote(key_type)} -C {comment} "
                f"-f {self.quote(str(key_path))} -q -N '\"\"'"
            ),
            required_executable="ssh-keygen",
            skip_package_manager_check=True,
        )

    @property
    def writes_own_install_log(self) -> bool:
        return True

    def install_command(self, package: str, log_file: Path) -> ShellCommand:
        return ShellCommand(
            command=(
                f"choco install {self.quote(package)} -y --no-progress *>&1 "
                f"| Tee-Object -FilePath {self.quote(str(log_file))}; "
                "exit $LASTEXITCODE"
            ),
            require_elevation=True,
        )

    def package_manager_version_command(self) -> ShellCommand:
        return ShellCommand(
            command="choco --version",
            required_executable="choco",
            skip_package_manager_check=True,
        )

    def package_manager_bootstrap_commands(self) -> list[ShellCommand]:
        return [ShellCommand(
            command=(
                "Set-ExecutionPolicy Bypass -Scope Process -Force; "
                "[System.Net.ServicePointManager]::SecurityProtocol = "
                "[System.Net.ServicePointManager]::SecurityProtocol -bor 3072; "
                "iex ((New-Object System.Net.WebClient).DownloadString("
                f"'{_CHOCOLATEY_INSTALL_URL}'))"
            ),
            require_elevation=True,
            skip_package_manager_check=True,
        )]

    def clipboard_command(self) -> ShellCommand:
        return ShellCommand(
            command="Set-Clipboard -Value ([Console]::In.ReadToEnd())",
            skip_package_manager_check=True,
        )

    def refresh_environment(self, shell: ShellRunner) -> None:
        result = shell.run(ShellCommand(
            command=(
                "[Environment]::GetEnvironmentVariable('Path','Machine') + ';' + "
                "[Environment]::GetEnvironmentVariable('Path','User')"
            ),
            skip_package_manager_check=True,
        ))
        if result.succeeded and result.message:
            logger.debug("Refreshed PATH from machine and user environment")
            os.environ["PATH"] = result.message


class UnsupportedSupport(_PosixSupport):
    """Any other OS: git may be present, but nothing can be installed."""

    platform = Platform.UNSUPPORTED

    def key_directory(self) -> Path:
        raise UnsupportedPlatformError("SSH key directory")

    def install_command(self, package: str, log_file: Path) -> ShellCommand:
        raise UnsupportedPlatformError("package installation")

    def package_manager_version_command(self) -> ShellCommand:
        raise UnsupportedPlatformError("package manager detection")

    def package_manager_bootstrap_commands(self) -> list[ShellCommand]:
        raise UnsupportedPlatformError("package manager installation")

    def clipboard_command(self) -> ShellCommand:
        raise UnsupportedPlatformError("clipboard access")


_SUPPORT: dict[Platform, type[PlatformSupport]] = {
    Platform.MACOS: MacOSSupport,
    Platform.WINDOWS: WindowsSupport,
    Platform.UNSUPPORTED: UnsupportedSupport,
}


def get_platform_support(platform: Platform | None = None) -> PlatformSupport:
    """Return the support object for *platform* (default: detected)."""
    return _SUPPORT[platform or detect_platform()]()
