"""
Version block segmentation for `yarn why` transcripts.

`yarn why` reports every installed copy of a package in turn, each introduced by
an ``=> Found "<path>@<version>"`` info line. The segmenter keeps only the
records that follow a marker for the target version, up to the next marker.
"""
import re
from enum import Enum
from typing import Iterable, List

from .records import InfoRecord, Record

FOUND_MARKER = "=> Found"

# Characters that continue a version token after "@<version>"
_VERSION_CONTINUATION = re.compile(r"[0-9A-Za-z.+\-]")

VersionBlock = List[Record]


class SegmenterState(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


def marker_matches_version(message: str, version: str, exact_version: bool = False) -> bool:
    """
    Check whether a marker message announces the target version.

    The default is a plain substring test on ``@<version>``, so ``1.0`` also
    matches ``@1.0.0``. With ``exact_version`` the version must not be followed
    by another version character.
    """
    needle = f"@{version}"
    if not exact_version:
        return needle in message

    start = message.find(needle)
    while start != -1:
        end = start + len(needle)
        if end >= len(message) or not _VERSION_CONTINUATION.match(message[end]):
            return True
        start = message.find(needle, start + 1)
    return False


class VersionBlockSegmenter:
    """
    Two-state machine partitioning a record stream into target-version blocks.

    Usage:
        segmenter = VersionBlockSegmenter("7.0.3")
        for record in records:
            segmenter.feed(record)
        blocks = segmenter.finish()
    """

    def __init__(self, version: str, exact_version: bool = False):
        self.version = version
        self.exact_version = exact_version
        self.state = SegmenterState.OUTSIDE
        self._current: VersionBlock = []
        self._blocks: List[VersionBlock] = []

    def _flush(self) -> None:
        if self._current:
            self._blocks.append(self._current)
        self._current = []

    def feed(self, record: Record) -> None:
        """Apply the transition for one record, then accumulate it if inside a block."""
        if isinstance(record, InfoRecord) and FOUND_MARKER in record.message:
            if marker_matches_version(record.message, self.version, self.exact_version):
                self._flush()
                self.state = SegmenterState.INSIDE
            else:
                if self.state is SegmenterState.INSIDE:
                    self._flush()
                self._current = []
                self.state = SegmenterState.OUTSIDE

        if self.state is SegmenterState.INSIDE:
            self._current.append(record)

    def finish(self) -> List[VersionBlock]:
        """Flush the open block, if any, and return all completed blocks."""
        if self.state is SegmenterState.INSIDE:
            self._flush()
        return list(self._blocks)

    def segment(self, records: Iterable[Record]) -> List[VersionBlock]:
        for record in records:
            self.feed(record)
        return self.finish()


def retained_records(records: Iterable[Record], version: str, exact_version: bool = False) -> List[Record]:
    """Concatenate, in encounter order, every block announcing the target version."""
    blocks = VersionBlockSegmenter(version, exact_version=exact_version).segment(records)
    return [record for block in blocks for record in block]
