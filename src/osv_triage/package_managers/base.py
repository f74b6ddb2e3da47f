"""
Package Managers for osv-triage

This module defines the abstract base class for Node.js package managers and the
shared helper used to run their command-line tools.
"""
import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..constants import MAX_OUTPUT_BYTES, NO_TRANSCRIPT_SENTINEL
from ..utils import handle_command_errors

logger = logging.getLogger(__name__)


def run_command(cmd: List[str], cwd: Optional[str] = None, capture: bool = True) -> subprocess.CompletedProcess:
    """
    Run an external command without raising on a non-zero exit code.

    Args:
        cmd: The command and its arguments.
        cwd: Working directory, defaults to the current one.
        capture: Capture stdout/stderr as text; when False the child inherits
                 the terminal.

    Returns:
        The completed process.

    Raises:
        RuntimeError: If the executable is missing or the output exceeds MAX_OUTPUT_BYTES.
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        if not capture:
            return subprocess.run(cmd, check=False, cwd=cwd)

        process = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            check=False,
            cwd=cwd
        )
    except FileNotFoundError:
        raise RuntimeError(f"'{cmd[0]}' not found. Please install it and ensure it's in your PATH.")

    if process.stdout and len(process.stdout.encode('utf-8')) > MAX_OUTPUT_BYTES:
        raise RuntimeError(f"Output of '{' '.join(cmd)}' exceeds {MAX_OUTPUT_BYTES} bytes")

    return process


class PackageManager(ABC):
    """
    Abstract base class for a package manager.

    Each package manager knows its lockfile and how to query its tool for the
    version, an update, and the dependency chain of an installed package.
    """

    def __init__(self, cwd: Optional[str] = None):
        self.cwd = cwd

    @property
    @abstractmethod
    def name(self) -> str:
        """The name of the package manager (e.g., 'yarn', 'npm')."""
        pass

    @property
    @abstractmethod
    def lockfile(self) -> str:
        """The lockfile name (e.g., 'yarn.lock')."""
        pass

    @property
    def update_args(self) -> List[str]:
        """Arguments of the update command."""
        return ['update']

    @property
    def why_success_codes(self) -> Tuple[int, ...]:
        """Exit codes of the "why" command whose output is still a usable transcript."""
        return (0,)

    def is_available(self) -> bool:
        """Check if the package manager executable is on the PATH."""
        return shutil.which(self.name) is not None

    @handle_command_errors(fallback=None)
    def get_version(self) -> Optional[str]:
        """
        Get the package manager version.

        Returns:
            The version string, or None if the tool is missing or fails.
        """
        process = run_command([self.name, '--version'], cwd=self.cwd)
        return process.stdout.strip() if process.returncode == 0 else None

    @handle_command_errors(fallback=False)
    def update(self) -> bool:
        """Update the project packages, streaming the tool output to the terminal."""
        process = run_command([self.name] + self.update_args, cwd=self.cwd, capture=False)
        return process.returncode == 0

    @abstractmethod
    def get_dependency_chain(self, package_name: str, version: str) -> str:
        """
        Explain why ``package_name@version`` is installed.

        Args:
            package_name: The installed package.
            version: The installed version.

        Returns:
            A human-readable dependency chain, or NO_TRANSCRIPT_SENTINEL when the
            tool produced no output or failed.
        """
        pass


class RawOutputPackageManager(PackageManager):
    """Package manager whose "why" output is passed through unparsed."""

    @abstractmethod
    def why_args(self, package_name: str, version: str) -> List[str]:
        """Arguments of the dependency explanation command."""
        pass

    @handle_command_errors(fallback=NO_TRANSCRIPT_SENTINEL)
    def get_dependency_chain(self, package_name: str, version: str) -> str:
        process = run_command([self.name] + self.why_args(package_name, version), cwd=self.cwd)
        if process.returncode not in self.why_success_codes:
            logger.debug(f"{self.name} why exited with {process.returncode} for {package_name}@{version}")
            return NO_TRANSCRIPT_SENTINEL
        output = (process.stdout or '').strip()
        return output or NO_TRANSCRIPT_SENTINEL
