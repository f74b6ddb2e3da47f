"""
Dependency chain resolution for vulnerable packages.

Each lookup runs the package manager's "why" command; lookups are independent,
so they run on a bounded thread pool whose size limits the number of concurrent
external processes.
"""
import concurrent.futures
import logging
from typing import List

from ..constants import NO_TRANSCRIPT_SENTINEL
from ..models import VulnerablePackage
from ..package_managers import PackageManager

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class ChainResolver:
    """Fills in the dependency chain of vulnerable packages."""

    def __init__(self, package_manager: PackageManager, max_workers: int = DEFAULT_MAX_WORKERS):
        self.package_manager = package_manager
        self.max_workers = max(1, max_workers)

    def resolve_one(self, finding: VulnerablePackage) -> str:
        try:
            return self.package_manager.get_dependency_chain(finding.name, finding.version)
        except Exception as e:
            logger.warning(f"Dependency chain lookup failed for {finding.key}: {e}")
            return NO_TRANSCRIPT_SENTINEL

    def resolve(self, findings: List[VulnerablePackage]) -> List[VulnerablePackage]:
        """
        Resolve chains for all findings, keeping their order.

        Returns:
            The same findings with ``dependency_chain`` set.
        """
        if not findings:
            return findings

        logger.info(
            f"Resolving {len(findings)} dependency chain(s) with {self.package_manager.name} "
            f"(max_workers={self.max_workers})"
        )
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            chains = list(executor.map(self.resolve_one, findings))

        for finding, chain in zip(findings, chains):
            finding.dependency_chain = chain
        return findings
