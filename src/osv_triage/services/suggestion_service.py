"""
Disposition suggestions for vulnerable packages.

Combines a local dev dependency heuristic with an optional remote model that
recommends one of the four triage choices.
"""
import json
import logging
import re
from typing import List, Optional, Set

from ..constants import CHAIN_SEPARATOR, TREE_SEPARATOR
from ..models import OsvTriageError, Suggestion, VulnerablePackage

logger = logging.getLogger(__name__)

PACKAGE_NAME_PATTERN = re.compile(r'^(@?[^@\s]+)')
JSON_OBJECT_PATTERN = re.compile(r'\{[\s\S]*\}')
DEV_DEPENDENCY_MARKERS = ('devdependencies', 'dev-dep')

SUGGESTION_MODEL = 'gpt-4'
SUGGESTION_MAX_TOKENS = 2000
SUGGESTION_TEMPERATURE = 0.3


def split_chain(chain: str) -> List[str]:
    """Split a chain summary into its display lines."""
    if CHAIN_SEPARATOR in chain:
        return chain.split(CHAIN_SEPARATOR)
    return chain.split(TREE_SEPARATOR)


def extract_package_names(chain: str) -> List[str]:
    """Return the leading package name of each part of a chain summary."""
    names = []
    for part in split_chain(chain):
        match = PACKAGE_NAME_PATTERN.match(part.strip())
        if match:
            names.append(match.group(1))
    return names


def is_dev_dependency(chain: str, dev_dependencies: Set[str]) -> bool:
    if any(name in dev_dependencies for name in extract_package_names(chain)):
        return True
    lowered = chain.lower()
    return any(marker in lowered for marker in DEV_DEPENDENCY_MARKERS)


def build_prompt(
    finding: VulnerablePackage,
    is_dev: bool,
    dependencies: Set[str],
    dev_dependencies: Set[str]
) -> str:
    return f"""You are a Node.js application security expert. Analyse this vulnerability and recommend an action.

Package: {finding.name}@{finding.version}
Vulnerability IDs: {', '.join(finding.vulnerability_ids)}
Severities: {', '.join(finding.severities)}
Is dev dependency: {'Yes' if is_dev else 'No'}
Dependency chain: {finding.dependency_chain}

Production dependencies: {', '.join(sorted(dependencies))}
Dev dependencies: {', '.join(sorted(dev_dependencies))}

Answer ONLY with JSON in this exact format:
{{
  "choice": "1" or "2" or "3" or "4",
  "justification": "short explanation"
}}

Choices:
1. No fixed version available
2. Dev dependency only
3. Code not executed in production
4. Requires manual action"""


def parse_suggestion(response: Optional[str]) -> Optional[Suggestion]:
    """Decode the first JSON object of a model answer."""
    if not response:
        return None
    match = JSON_OBJECT_PATTERN.search(response)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except ValueError:
        logger.warning("Model answer is not valid JSON")
        return None
    if not isinstance(parsed, dict) or 'choice' not in parsed:
        return None
    return Suggestion(choice=str(parsed['choice']), justification=str(parsed.get('justification', '')))


class SuggestionService:
    """
    Asks the remote model for a disposition.

    The client is created lazily; when it cannot be configured the service
    disables itself and suggestions are simply skipped.
    """

    def __init__(self, client=None, client_factory=None):
        self._client = client
        self._client_factory = client_factory
        self._disabled = client is None and client_factory is None

    def _get_client(self):
        if self._client is None and not self._disabled:
            try:
                self._client = self._client_factory()
            except OsvTriageError as e:
                logger.warning(f"AI suggestions disabled: {e}")
                self._disabled = True
        return self._client

    def suggest(
        self,
        finding: VulnerablePackage,
        is_dev: bool,
        dependencies: Set[str],
        dev_dependencies: Set[str]
    ) -> Optional[Suggestion]:
        client = self._get_client()
        if client is None:
            return None

        prompt = build_prompt(finding, is_dev, dependencies, dev_dependencies)
        try:
            response = client.ask_question(
                prompt, SUGGESTION_MODEL, SUGGESTION_MAX_TOKENS, SUGGESTION_TEMPERATURE
            )
        except Exception as e:
            logger.warning(f"AI suggestion failed for {finding.key}: {e}")
            return None
        return parse_suggestion(response)
