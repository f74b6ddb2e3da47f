"""
Services for osv-triage.

Each service owns one step of the triage workflow:
- scanner_service: running osv-scanner and collecting findings
- dependency_service: reading package.json dependencies
- chain_service: resolving dependency chains through the package manager
- suggestion_service: dev dependency heuristic and remote suggestions
- triage_service: interactive disposition of each finding
- config_writer_service: osv-scanner.toml and report output
"""

from .chain_service import ChainResolver
from .scanner_service import ScannerError, ScannerService, collect_findings
from .suggestion_service import SuggestionService
from .triage_service import TriageService

__all__ = [
    "ChainResolver",
    "ScannerError",
    "ScannerService",
    "SuggestionService",
    "TriageService",
    "collect_findings",
]
