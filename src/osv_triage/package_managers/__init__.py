"""
Node.js package manager abstractions.

Only yarn output goes through the `yarn why` chain parser; npm and pnpm output is
passed through as the tools print it.
"""

from .base import PackageManager, RawOutputPackageManager, run_command
from .detector import PACKAGE_MANAGER_CLASSES, detect_package_manager
from .npm import NpmPackageManager
from .pnpm import PnpmPackageManager
from .yarn import YarnPackageManager

__all__ = [
    "PackageManager",
    "RawOutputPackageManager",
    "YarnPackageManager",
    "NpmPackageManager",
    "PnpmPackageManager",
    "PACKAGE_MANAGER_CLASSES",
    "detect_package_manager",
    "run_command",
]
