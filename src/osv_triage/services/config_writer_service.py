"""
osv-scanner.toml and markdown report generation.
"""
import json
import logging
import os
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional

from ..constants import ALTERNATIVE_REASONS, CONFIG_FILE, REPORT_FILE
from ..models import TriagedVulnerability
from .suggestion_service import split_chain

logger = logging.getLogger(__name__)

GENERATOR_NAME = "generate-osv-config"


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _timestamp(now: datetime) -> str:
    return now.strftime("%Y-%m-%d %H:%M:%S")


def _toml_string(value: str) -> str:
    # JSON string escaping is valid for TOML basic strings
    return json.dumps(value, ensure_ascii=False)


def _sorted(vulnerabilities: List[TriagedVulnerability]) -> List[TriagedVulnerability]:
    return sorted(vulnerabilities, key=lambda v: (v.name, v.version))


def generate_toml_config(
    vulnerabilities: List[TriagedVulnerability],
    package_manager_name: str,
    now: Optional[datetime] = None
) -> str:
    """
    Render the osv-scanner configuration ignoring the triaged packages.

    Entries are sorted by package name then version.
    """
    lines = [
        f"# Generated by {GENERATOR_NAME}",
        f"# Date: {_timestamp(_now(now))}",
        f"# Package Manager: {package_manager_name}",
        f"# Total vulnerabilities ignored: {len(vulnerabilities)}",
        "",
    ]

    for vuln in _sorted(vulnerabilities):
        lines.append("[[PackageOverrides]]")
        lines.append("# Used by:")
        lines.extend(f"#   {line}" for line in split_chain(vuln.dependency_chain))
        lines.append(f"# Vulnerability IDs: {', '.join(vuln.vulnerability_ids)}")
        lines.append(f"# Severity: {vuln.severity_label}")
        if vuln.show_alternatives:
            lines.append("#")
            lines.append("# Alternative reasons to consider:")
            lines.extend(f"#   {i}. {reason}" for i, reason in enumerate(ALTERNATIVE_REASONS, start=1))
        lines.append('ecosystem = "npm"')
        lines.append(f"name = {_toml_string(vuln.name)}")
        lines.append(f"version = {_toml_string(vuln.version)}")
        lines.append("ignore = true")
        lines.append(f"reason = {_toml_string(vuln.reason)}")
        lines.append("")

    return "\n".join(lines) + "\n"


def generate_report(vulnerabilities: List[TriagedVulnerability], now: Optional[datetime] = None) -> str:
    """Render the markdown summary of ignored vulnerabilities."""
    lines = [
        "# OSV-Scanner Vulnerability Report",
        "",
        f"**Generated:** {_timestamp(_now(now))}  ",
        f"**Total vulnerabilities ignored:** {len(vulnerabilities)}",
        "",
        "## Summary by Severity",
        "",
    ]

    severity_counts = Counter(severity for vuln in vulnerabilities for severity in vuln.severities)
    for severity, count in sorted(severity_counts.items()):
        lines.append(f"- **{severity}**: {count}")

    lines.extend(["", "## Ignored Vulnerabilities", ""])
    for vuln in _sorted(vulnerabilities):
        lines.extend([
            f"### {vuln.name}@{vuln.version}",
            "",
            f"- **Vulnerability IDs:** {', '.join(vuln.vulnerability_ids)}",
            f"- **Severity:** {vuln.severity_label}",
            f"- **Reason:** {vuln.reason}",
            f"- **Used by:** {vuln.dependency_chain}",
            "",
        ])

    lines.extend([
        "",
        "## Recommendations",
        "",
        "- Review this configuration in 30 days",
        "- Monitor for new vulnerabilities regularly",
        "- Update dependencies when fixes become available",
    ])
    return "\n".join(lines) + "\n"


def write_file(path: str, content: str) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info(f"Wrote {path}")


def write_config(content: str, path: str = CONFIG_FILE) -> None:
    write_file(path, content)


def write_report(vulnerabilities: List[TriagedVulnerability], path: str = REPORT_FILE,
                 now: Optional[datetime] = None) -> None:
    write_file(path, generate_report(vulnerabilities, now))


def backup_config(path: str = CONFIG_FILE, now: Optional[datetime] = None) -> str:
    """
    Move an existing configuration aside.

    Returns:
        The backup path, e.g. "osv-scanner.toml.backup.2026-10-18_09-30-00".
    """
    backup_path = f"{path}.backup.{_now(now).strftime('%Y-%m-%d_%H-%M-%S')}"
    os.replace(path, backup_path)
    logger.info(f"Backed up {path} to {backup_path}")
    return backup_path
