"""
Package manager detection for a Node.js project.
"""
import json
import logging
import os
from typing import Optional

from ..constants import PACKAGE_JSON
from .base import PackageManager
from .npm import NpmPackageManager
from .pnpm import PnpmPackageManager
from .yarn import YarnPackageManager

logger = logging.getLogger(__name__)

# Prioritized list of package managers, used for lockfile detection
PACKAGE_MANAGER_CLASSES = [
    YarnPackageManager,
    NpmPackageManager,
    PnpmPackageManager,
]


def _declared_package_manager(project_dir: str) -> Optional[str]:
    """Return the ``packageManager`` field of package.json, if any."""
    try:
        with open(os.path.join(project_dir, PACKAGE_JSON), 'r', encoding='utf-8') as f:
            package_json = json.load(f)
    except (OSError, ValueError):
        return None

    if not isinstance(package_json, dict):
        return None
    declared = package_json.get('packageManager')
    return declared if isinstance(declared, str) else None


def detect_package_manager(project_dir: str = '.') -> Optional[PackageManager]:
    """
    Detect the package manager used by the project.

    The ``packageManager`` field of package.json wins (e.g. "yarn@1.22.19");
    otherwise the first lockfile found in the order yarn, npm, pnpm.

    Args:
        project_dir: The project root.

    Returns:
        A PackageManager instance bound to ``project_dir``, or None if not detected.
    """
    managers = [manager_class(cwd=project_dir) for manager_class in PACKAGE_MANAGER_CLASSES]

    declared = _declared_package_manager(project_dir)
    if declared:
        for manager in managers:
            if declared.startswith(manager.name):
                logger.info(f"Package manager declared in package.json: {declared}")
                return manager

    for manager in managers:
        if os.path.exists(os.path.join(project_dir, manager.lockfile)):
            logger.info(f"Package manager detected from lockfile: {manager.lockfile}")
            return manager

    return None
