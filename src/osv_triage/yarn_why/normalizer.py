"""
Chain normalization, deduplication and capping.
"""
from typing import Iterable, List, Optional

from ..constants import CHAIN_SEPARATOR, MAX_CHAINS

PROJECT_TOKEN = "_project_#"
WORKSPACE_AGGREGATOR_MARKERS = ("workspace aggregator", "workspace-aggregator")


def normalize_chain(chain: str) -> Optional[str]:
    """
    Clean a candidate chain.

    Removes every ``_project_#`` root token and rejects synthetic workspace
    aggregator entries.

    Returns:
        The cleaned chain, or None when it should be discarded.
    """
    cleaned = chain
    # one pass can rebuild the token, e.g. "_project__project_##"
    while PROJECT_TOKEN in cleaned:
        cleaned = cleaned.replace(PROJECT_TOKEN, "")
    if not cleaned:
        return None
    if any(marker in cleaned for marker in WORKSPACE_AGGREGATOR_MARKERS):
        return None
    return cleaned


def deduplicate(chains: Iterable[str]) -> List[str]:
    """Drop exact duplicates, keeping first-seen order."""
    seen = set()
    unique = []
    for chain in chains:
        if chain not in seen:
            seen.add(chain)
            unique.append(chain)
    return unique


def cap(chains: List[str], limit: int = MAX_CHAINS) -> List[str]:
    return chains[:limit]


def join_chains(chains: Iterable[str]) -> str:
    return CHAIN_SEPARATOR.join(chains)
