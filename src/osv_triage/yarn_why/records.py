"""
Typed records for `yarn why --json` transcripts.

Each transcript line is a self-describing JSON object with a ``type`` field and
a ``data`` payload. Lines that are not such objects are dropped; objects with a
kind or payload we do not recognise become inert ``UnknownRecord``s.
"""
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Union


class RecordKind(Enum):
    """Kinds of transcript records."""
    STEP = "step"
    INFO = "info"
    LIST = "list"
    TREE = "tree"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TreeNode:
    """A node of a dependency tree; ``None`` children stand for null entries."""
    name: str
    children: List[Optional["TreeNode"]] = field(default_factory=list)


@dataclass(frozen=True)
class StepRecord:
    data: Any = None
    kind: RecordKind = field(default=RecordKind.STEP, init=False)


@dataclass(frozen=True)
class InfoRecord:
    message: str
    kind: RecordKind = field(default=RecordKind.INFO, init=False)


@dataclass(frozen=True)
class ListRecord:
    list_type: str
    items: List[str] = field(default_factory=list)
    kind: RecordKind = field(default=RecordKind.LIST, init=False)


@dataclass(frozen=True)
class TreeRecord:
    trees: List[Optional[TreeNode]] = field(default_factory=list)
    kind: RecordKind = field(default=RecordKind.TREE, init=False)


@dataclass(frozen=True)
class UnknownRecord:
    type_name: str
    data: Any = None
    kind: RecordKind = field(default=RecordKind.UNKNOWN, init=False)


Record = Union[StepRecord, InfoRecord, ListRecord, TreeRecord, UnknownRecord]


def _node_name(name: Any) -> str:
    """Non-zero numeric names are kept as text; other non-string values become ""."""
    if isinstance(name, str):
        return name
    if isinstance(name, (int, float)) and not isinstance(name, bool) and name:
        return str(name)
    return ""


def _parse_tree_node(raw: Any) -> Optional[TreeNode]:
    if not isinstance(raw, dict):
        return None
    children = raw.get("children")
    if not isinstance(children, list):
        children = []
    return TreeNode(
        name=_node_name(raw.get("name")),
        children=[_parse_tree_node(child) for child in children],
    )


def _parse_payload(type_name: str, data: Any) -> Record:
    if type_name == RecordKind.INFO.value and isinstance(data, str):
        return InfoRecord(message=data)

    if type_name == RecordKind.LIST.value and isinstance(data, dict):
        list_type = data.get("type")
        items = data.get("items")
        if isinstance(list_type, str) and isinstance(items, list):
            return ListRecord(
                list_type=list_type,
                items=[item for item in items if isinstance(item, str)],
            )

    if type_name == RecordKind.TREE.value and isinstance(data, dict):
        trees = data.get("trees")
        if isinstance(trees, list):
            return TreeRecord(trees=[_parse_tree_node(tree) for tree in trees])

    if type_name == RecordKind.STEP.value:
        return StepRecord(data=data)

    return UnknownRecord(type_name=type_name, data=data)


def parse_record(line: str) -> Optional[Record]:
    """
    Parse one transcript line into a typed record.

    Args:
        line: A raw line of `yarn why --json` output.

    Returns:
        The typed record, or None when the line is not a JSON object with a
        string ``type`` field.
    """
    # RecursionError: pathologically nested arrays or trees
    try:
        raw = json.loads(line)
    except (ValueError, TypeError, RecursionError):
        return None

    if not isinstance(raw, dict):
        return None

    type_name = raw.get("type")
    if not isinstance(type_name, str):
        return None

    try:
        return _parse_payload(type_name, raw.get("data"))
    except RecursionError:
        return None


def parse_records(text: str) -> Iterator[Record]:
    """Yield the typed records of a transcript, skipping malformed lines."""
    for line in text.strip().split("\n"):
        record = parse_record(line)
        if record is not None:
            yield record
