"""
Package Manager for npm
"""
from typing import List, Tuple

from .base import RawOutputPackageManager


class NpmPackageManager(RawOutputPackageManager):
    """Package manager using the 'npm' command-line tool."""

    @property
    def name(self) -> str:
        return 'npm'

    @property
    def lockfile(self) -> str:
        return 'package-lock.json'

    @property
    def why_success_codes(self) -> Tuple[int, ...]:
        # `npm ls` exits 1 on extraneous, invalid or missing packages but still prints the tree
        return (0, 1)

    def why_args(self, package_name: str, version: str) -> List[str]:
        return ['ls', f'{package_name}@{version}', '--all']
