"""
Entry point turning a `yarn why --json` transcript into a dependency chain summary.
"""
import logging
from typing import List, Optional

from ..constants import MAX_CHAINS, NO_TRANSCRIPT_SENTINEL, UNPARSEABLE_OUTPUT_SENTINEL
from .extractor import ChainExtractor
from .normalizer import cap, join_chains
from .records import parse_records
from .segmenter import retained_records

logger = logging.getLogger(__name__)


def extract_chains(
    output: str,
    version: str,
    limit: int = MAX_CHAINS,
    exact_version: bool = False
) -> List[str]:
    """
    Extract the unique dependency chains explaining ``version``.

    Args:
        output: Captured stdout of `yarn why --json <package>`.
        version: The installed version to explain.
        limit: Maximum number of chains returned.
        exact_version: Require the version marker to end at a token boundary.

    Returns:
        At most ``limit`` chains in first-seen order.
    """
    records = retained_records(parse_records(output), version, exact_version=exact_version)
    chains = ChainExtractor().extract(records)
    logger.debug(f"Extracted {len(chains)} chain(s) from {len(records)} record(s) for version {version}")
    return cap(chains, limit)


def parse_yarn_why_output(output: Optional[str], version: str, exact_version: bool = False) -> str:
    """
    Summarise a `yarn why --json` transcript for one package version.

    Returns:
        Up to five chains joined with " | ", UNPARSEABLE_OUTPUT_SENTINEL when the
        transcript yields no chain, or NO_TRANSCRIPT_SENTINEL when there is no
        transcript at all.
    """
    if not output or not output.strip():
        return NO_TRANSCRIPT_SENTINEL

    chains = extract_chains(output, version, exact_version=exact_version)
    if chains:
        return join_chains(chains)

    return UNPARSEABLE_OUTPUT_SENTINEL
