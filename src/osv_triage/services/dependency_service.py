"""
Project dependency discovery from package.json files, workspaces included.
"""
import json
import logging
import os
from typing import List, Set, Tuple

from ..constants import PACKAGE_JSON

logger = logging.getLogger(__name__)


def _read_package_json(path: str) -> dict:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return data if isinstance(data, dict) else {}


def extract_dependencies(package_json_path: str) -> Tuple[Set[str], Set[str]]:
    """
    Read the dependency names declared in a package.json.

    Returns:
        (dependencies, devDependencies); two empty sets if the file cannot be read.
    """
    try:
        package_json = _read_package_json(package_json_path)
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot read {package_json_path}: {e}")
        return set(), set()

    deps = set((package_json.get('dependencies') or {}).keys())
    dev_deps = set((package_json.get('devDependencies') or {}).keys())
    return deps, dev_deps


def get_workspace_paths(workspaces: List[str], project_dir: str = '.') -> List[str]:
    """
    Resolve workspace patterns to package.json paths.

    A pattern containing "*" lists every direct subdirectory of the pattern
    with "/*" removed; other patterns name a single directory.
    """
    paths = []
    for pattern in workspaces:
        if '*' in pattern:
            base_dir = os.path.join(project_dir, pattern.replace('/*', ''))
            if not os.path.isdir(base_dir):
                continue
            for entry in sorted(os.listdir(base_dir)):
                package_json = os.path.join(base_dir, entry, PACKAGE_JSON)
                if os.path.exists(package_json):
                    paths.append(package_json)
        else:
            package_json = os.path.join(project_dir, pattern, PACKAGE_JSON)
            if os.path.exists(package_json):
                paths.append(package_json)
    return paths


def _workspace_patterns(package_json: dict) -> List[str]:
    workspaces = package_json.get('workspaces') or []
    if isinstance(workspaces, dict):
        workspaces = workspaces.get('packages') or []
    if not isinstance(workspaces, list):
        return []
    return [pattern for pattern in workspaces if isinstance(pattern, str)]


def get_dependencies(project_dir: str = '.') -> Tuple[Set[str], Set[str]]:
    """Collect dependency and dev dependency names of the root project and its workspaces."""
    root_package_json = os.path.join(project_dir, PACKAGE_JSON)
    all_deps, all_dev_deps = extract_dependencies(root_package_json)

    try:
        patterns = _workspace_patterns(_read_package_json(root_package_json))
    except (OSError, ValueError):
        patterns = []

    for workspace_package_json in get_workspace_paths(patterns, project_dir):
        deps, dev_deps = extract_dependencies(workspace_package_json)
        all_deps |= deps
        all_dev_deps |= dev_deps

    logger.info(f"Found {len(all_deps)} dependencies and {len(all_dev_deps)} dev dependencies")
    return all_deps, all_dev_deps
