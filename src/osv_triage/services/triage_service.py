"""
Interactive triage of vulnerable packages.

For each finding the user sees the package, its vulnerabilities, why it is
installed, and any suggestion, then picks the reason used to ignore it.
"""
import logging
from typing import Callable, List, Optional, Set

from ..constants import MAX_CHAINS, SEVERITY_HIGHLIGHT, TRIAGE_CHOICES
from ..models import Suggestion, TriagedVulnerability, VulnerablePackage
from ..utils import question
from .suggestion_service import SuggestionService, is_dev_dependency, split_chain

logger = logging.getLogger(__name__)

RULE = "═" * 70


class TriageService:
    """Walks the user through every vulnerable package."""

    def __init__(
        self,
        suggestion_service: SuggestionService,
        dependencies: Set[str],
        dev_dependencies: Set[str],
        ask: Callable[[str], str] = question,
        output: Callable[[str], None] = print
    ):
        self.suggestion_service = suggestion_service
        self.dependencies = dependencies
        self.dev_dependencies = dev_dependencies
        self.ask = ask
        self.output = output

    def _display(self, finding: VulnerablePackage, is_dev: bool, suggestion: Optional[Suggestion]) -> None:
        out = self.output
        out(f"\n{RULE}")
        out("VULNERABILITY DETECTED")
        out(RULE)
        out(f"\n📦 Package: {finding.key}")
        out(f"🔍 Vulnerability IDs: {', '.join(finding.vulnerability_ids)}")

        severity = ", ".join(finding.severities) if finding.severities else "UNKNOWN"
        marker = "‼️ " if any(s in SEVERITY_HIGHLIGHT for s in finding.severities) else ""
        out(f"⚡ Severity: {marker}{severity}")

        out("\nUsed by:")
        for line in split_chain(finding.dependency_chain)[:MAX_CHAINS]:
            out(f"  {line}")

        if is_dev:
            out("\n✓ Detected as a development dependency")

        if suggestion:
            out("\n🤖 AI suggestion:")
            out(f"   Recommended choice: {suggestion.choice}")
            out(f"   {suggestion.justification}")

        out("\nChoose the reason to ignore this vulnerability:\n")
        for key, (label, _, _) in TRIAGE_CHOICES.items():
            hint = " (suggested)" if key == "2" and is_dev else ""
            out(f"  {key}. {label}{hint}")

    def _read_choice(self) -> str:
        while True:
            choice = self.ask("\nYour choice (1-4)")
            if choice in TRIAGE_CHOICES:
                return choice
            self.output("Invalid choice, please enter a number between 1 and 4")

    def triage(self, finding: VulnerablePackage) -> TriagedVulnerability:
        is_dev = is_dev_dependency(finding.dependency_chain, self.dev_dependencies)
        suggestion = self.suggestion_service.suggest(
            finding, is_dev, self.dependencies, self.dev_dependencies
        )
        self._display(finding, is_dev, suggestion)

        choice = self._read_choice()
        _, reason, show_alternatives = TRIAGE_CHOICES[choice]
        logger.debug(f"{finding.key}: choice {choice}")

        return TriagedVulnerability(
            name=finding.name,
            version=finding.version,
            vulnerability_ids=list(finding.vulnerability_ids),
            severities=list(finding.severities),
            dependency_chain=finding.dependency_chain,
            reason=reason,
            show_alternatives=show_alternatives,
        )

    def triage_all(self, findings: List[VulnerablePackage]) -> List[TriagedVulnerability]:
        return [self.triage(finding) for finding in findings]
