"""
Parsing of `yarn why --json` transcripts.

This package contains the dependency chain extraction pipeline:
- records: typed transcript records
- segmenter: per-version block segmentation
- extractor: chain extraction strategies
- normalizer: chain cleanup, deduplication and capping
"""

from .extractor import ChainExtractor
from .parser import extract_chains, parse_yarn_why_output
from .records import parse_record, parse_records
from .segmenter import VersionBlockSegmenter, retained_records

__all__ = [
    "ChainExtractor",
    "VersionBlockSegmenter",
    "extract_chains",
    "parse_record",
    "parse_records",
    "parse_yarn_why_output",
    "retained_records",
]
