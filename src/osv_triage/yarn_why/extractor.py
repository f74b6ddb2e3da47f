"""
Chain Extraction Strategies

This module defines the abstract base class for chain extraction strategies and
the three concrete strategies applied to the records of a version block:
reasons lists, dependency trees, and "depends on it" info messages.
"""
import re
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional

from ..constants import TREE_SEPARATOR
from .normalizer import deduplicate, normalize_chain
from .records import InfoRecord, ListRecord, Record, TreeNode, TreeRecord

REASONS_LIST_TYPE = "reasons"

# Also covers the 'This module exists because "<X>" depends on it.' wording
DEPENDS_ON_IT_PATTERN = re.compile(r'"([^"]+)" depends on it')


def strip_quotes(item: str) -> str:
    """Strip a single leading and a single trailing double quote."""
    if item.startswith('"'):
        item = item[1:]
    if item.endswith('"'):
        item = item[:-1]
    return item


def walk_first_children(root: TreeNode) -> Optional[str]:
    """
    Build a chain by following only the first child at each level.

    Real dependency graphs branch; only the first path is reported.

    Returns:
        The arrow-joined chain, or None when the walk hits a null child or
        every visited name is empty.
    """
    chain = ""
    node: Optional[TreeNode] = root
    while node is not None:
        chain = f"{chain}{TREE_SEPARATOR}{node.name}" if chain else node.name
        if not node.children:
            return chain or None
        node = node.children[0]
    return None


class ChainStrategy(ABC):
    """
    Abstract base class for a chain extraction strategy.

    Each strategy looks at one kind of record and yields candidate chains.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The name of the strategy."""
        pass

    @abstractmethod
    def extract(self, record: Record) -> Iterator[str]:
        """
        Yield the chains contributed by a single record.

        Args:
            record: A record from a retained version block.

        Returns:
            An iterator of chains, already normalized where the strategy requires it.
        """
        pass


class ReasonsListStrategy(ChainStrategy):
    """Chains listed in a ``reasons`` list record."""

    @property
    def name(self) -> str:
        return 'reasons'

    def extract(self, record: Record) -> Iterator[str]:
        if not isinstance(record, ListRecord) or record.list_type != REASONS_LIST_TYPE:
            return
        for item in record.items:
            chain = normalize_chain(strip_quotes(item))
            if chain:
                yield chain


class TreeWalkStrategy(ChainStrategy):
    """
    First-child paths of a dependency tree record.

    Yarn node names are already clean, so normalization only matters for odd
    transcripts that put root tokens or aggregators in a tree.
    """

    @property
    def name(self) -> str:
        return 'tree'

    def extract(self, record: Record) -> Iterator[str]:
        if not isinstance(record, TreeRecord):
            return
        for root in record.trees:
            if root is None:
                continue
            chain = walk_first_children(root)
            if chain:
                chain = normalize_chain(chain)
            if chain:
                yield chain


class DependsOnItStrategy(ChainStrategy):
    """Chains quoted in ``"<X>" depends on it`` info messages."""

    @property
    def name(self) -> str:
        return 'depends-on-it'

    def extract(self, record: Record) -> Iterator[str]:
        if not isinstance(record, InfoRecord):
            return
        match = DEPENDS_ON_IT_PATTERN.search(record.message)
        if match:
            chain = normalize_chain(match.group(1))
            if chain:
                yield chain


DEFAULT_STRATEGY_CLASSES = [
    ReasonsListStrategy,
    TreeWalkStrategy,
    DependsOnItStrategy,
]


class ChainExtractor:
    """Applies every strategy to each retained record and deduplicates the result."""

    def __init__(self, strategies: Optional[List[ChainStrategy]] = None):
        if strategies is None:
            strategies = [strategy_class() for strategy_class in DEFAULT_STRATEGY_CLASSES]
        self.strategies = strategies

    def iter_chains(self, records: Iterable[Record]) -> Iterator[str]:
        for record in records:
            for strategy in self.strategies:
                yield from strategy.extract(record)

    def extract(self, records: Iterable[Record]) -> List[str]:
        """Return unique chains in first-seen order."""
        return deduplicate(self.iter_chains(records))
