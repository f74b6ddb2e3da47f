"""
Package Manager for yarn
"""
import logging
from typing import List

from ..constants import NO_TRANSCRIPT_SENTINEL
from ..utils import handle_command_errors
from ..yarn_why import parse_yarn_why_output
from .base import PackageManager, run_command

logger = logging.getLogger(__name__)


class YarnPackageManager(PackageManager):
    """Package manager using the 'yarn' command-line tool."""

    @property
    def name(self) -> str:
        return 'yarn'

    @property
    def lockfile(self) -> str:
        return 'yarn.lock'

    @property
    def update_args(self) -> List[str]:
        return ['upgrade']

    @handle_command_errors(fallback=NO_TRANSCRIPT_SENTINEL)
    def get_dependency_chain(self, package_name: str, version: str) -> str:
        """Run `yarn why --json` and summarise the chains for ``version``."""
        process = run_command(['yarn', 'why', '--json', package_name], cwd=self.cwd)
        if process.returncode not in self.why_success_codes:
            logger.debug(f"yarn why exited with {process.returncode} for {package_name}")
            return NO_TRANSCRIPT_SENTINEL
        return parse_yarn_why_output(process.stdout, version)
