"""
Data models shared by the triage services.
"""
from dataclasses import dataclass, field
from typing import List


class OsvTriageError(Exception):
    """Base exception for osv-triage errors."""

    pass


@dataclass
class VulnerablePackage:
    """
    A package reported by osv-scanner with at least one vulnerability.

    Attributes:
        name: Package name
        version: Installed version
        vulnerability_ids: OSV/GHSA/CVE identifiers
        severities: Severity labels from database_specific.severity
        dependency_chain: Why the package is installed, filled in after scanning
    """
    name: str
    version: str
    vulnerability_ids: List[str] = field(default_factory=list)
    severities: List[str] = field(default_factory=list)
    dependency_chain: str = ""

    @property
    def key(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass
class Suggestion:
    """Disposition suggested by the remote model."""
    choice: str
    justification: str


@dataclass
class TriagedVulnerability:
    """A vulnerable package with the reason chosen to ignore it."""
    name: str
    version: str
    vulnerability_ids: List[str]
    severities: List[str]
    dependency_chain: str
    reason: str
    show_alternatives: bool = False

    @property
    def severity_label(self) -> str:
        return ", ".join(self.severities) if self.severities else "UNKNOWN"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "vulnerability_ids": self.vulnerability_ids,
            "severities": self.severities,
            "dependency_chain": self.dependency_chain,
            "reason": self.reason,
            "show_alternatives": self.show_alternatives,
        }
