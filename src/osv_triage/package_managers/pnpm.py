"""
Package Manager for pnpm
"""
from typing import List

from .base import RawOutputPackageManager


class PnpmPackageManager(RawOutputPackageManager):
    """Package manager using the 'pnpm' command-line tool."""

    @property
    def name(self) -> str:
        return 'pnpm'

    @property
    def lockfile(self) -> str:
        return 'pnpm-lock.yaml'

    def why_args(self, package_name: str, version: str) -> List[str]:
        return ['why', f'{package_name}@{version}']
