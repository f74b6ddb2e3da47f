"""
osv-scanner invocation and result parsing.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from ..constants import CONFIG_FILE
from ..models import OsvTriageError, VulnerablePackage
from ..package_managers import run_command
from ..utils import handle_command_errors

logger = logging.getLogger(__name__)

SCANNER = 'osv-scanner'


class ScannerError(OsvTriageError):
    """Raised when osv-scanner cannot be run."""

    pass


class ScannerService:
    """Runs osv-scanner against a project lockfile."""

    def __init__(self, cwd: Optional[str] = None):
        self.cwd = cwd

    @handle_command_errors(fallback=False)
    def is_available(self) -> bool:
        """Check that `osv-scanner --version` succeeds."""
        return run_command([SCANNER, '--version'], cwd=self.cwd).returncode == 0

    def run_scan(self, lockfile: str) -> Optional[Dict[str, Any]]:
        """
        Scan a lockfile, ignoring any existing osv-scanner configuration.

        Returns:
            The decoded JSON report, or None when the scanner printed nothing
            or something that is not JSON.

        Raises:
            ScannerError: If the scanner cannot be run.
        """
        logger.info(f"Scanning with osv-scanner (lockfile: {lockfile})")
        try:
            process = run_command(
                [SCANNER, f'--lockfile={lockfile}', '--format=json', '--config=/dev/null'],
                cwd=self.cwd
            )
        except RuntimeError as e:
            raise ScannerError(str(e)) from e

        if not process.stdout:
            return None
        try:
            return json.loads(process.stdout)
        except ValueError as e:
            logger.error(f"Failed to parse osv-scanner JSON output: {e}")
            return None

    @handle_command_errors(fallback=False)
    def verify_config(self, lockfile: str, config_path: str = CONFIG_FILE) -> bool:
        """Re-run the scanner with the generated configuration; True when nothing is reported."""
        logger.info(f"Verifying configuration {config_path}")
        process = run_command([SCANNER, f'--lockfile={lockfile}', f'--config={config_path}'], cwd=self.cwd)
        return process.returncode == 0


def collect_findings(scan_result: Optional[Dict[str, Any]]) -> List[VulnerablePackage]:
    """
    Flatten an osv-scanner JSON report into vulnerable packages.

    Packages without vulnerabilities are skipped.
    """
    findings: List[VulnerablePackage] = []
    if not scan_result or not scan_result.get('results'):
        return findings

    for result in scan_result['results']:
        for pkg in result.get('packages') or []:
            package = pkg.get('package') or {}
            vulnerability_ids = []
            severities = []
            for vuln in pkg.get('vulnerabilities') or []:
                vulnerability_ids.append(vuln.get('id') or 'unknown')
                database_specific = vuln.get('database_specific')
                if isinstance(database_specific, dict):
                    severities.append(database_specific.get('severity') or 'UNKNOWN')

            if vulnerability_ids:
                findings.append(VulnerablePackage(
                    name=package.get('name') or 'unknown',
                    version=package.get('version') or 'unknown',
                    vulnerability_ids=vulnerability_ids,
                    severities=severities,
                ))

    logger.info(f"Collected {len(findings)} vulnerable package(s)")
    return findings
