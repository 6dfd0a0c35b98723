"""Tree model and builder for grouping test records by labels.

Records are classified into nested groups, one level per configured label
name, in a single streaming pass:

    suites
    ├─ parent-suite
    │   ├─ suite
    │   │   ├─ sub-suite
    │   │   │   ├─ test_a
    │   │   │   └─ test_b
    ...

Sibling order is first-seen order; callers sort records by start time
before building (see ``suitetree.sort_by_start``).
"""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Optional, Sequence, Union

from suitetree import TestRecord

logger = logging.getLogger(__name__)

DEFAULT_TREE_NAME = "suites"
DEFAULT_PLACEHOLDER = "unknown"

PathExtractor = Callable[[TestRecord], Sequence[str]]


def node_uid(*names: str) -> str:
    """Deterministic identifier for a node from its ancestor names."""
    digest = hashlib.md5()
    for name in names:
        digest.update(name.encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()


@dataclass(eq=False)
class Leaf:
    """A terminal node wrapping exactly one test record."""

    uid: str
    name: str
    record: TestRecord
    parent_uid: Optional[str] = None

    kind = "leaf"


@dataclass(eq=False)
class Group:
    """A classification level holding ordered children."""

    uid: str
    name: str
    children: list[TreeNode] = field(default_factory=list)

    kind = "group"

    def find_group(self, name: str) -> Optional[Group]:
        """Return the first child group with the given name."""
        for child in self.children:
            match child:
                case Group(name=child_name) if child_name == name:
                    return child
        return None

    @property
    def groups(self) -> list[Group]:
        return [c for c in self.children if c.kind == Group.kind]

    @property
    def leaves(self) -> list[Leaf]:
        return [c for c in self.children if c.kind == Leaf.kind]


TreeNode = Union[Group, Leaf]

# The root of a tree is an ordinary group named after the tree.
Tree = Group


def group_by_labels(
    *label_names: str,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> PathExtractor:
    """Build a label path extractor for the given label names.

    The returned function maps a record to one path segment per label name:
    the first value of that label, or ``placeholder`` when the label is
    missing or blank. Every record therefore lands on exactly one path.
    """
    names = tuple(label_names)

    def extract(record: TestRecord) -> tuple[str, ...]:
        path = []
        for name in names:
            value = record.find_label(name)
            path.append(value if value and value.strip() else placeholder)
        return tuple(path)

    return extract


class TreeBuilder:
    """Streams records into a tree, creating groups on first sight."""

    def __init__(self, path_extractor: PathExtractor, name: str = DEFAULT_TREE_NAME) -> None:
        self.path_extractor = path_extractor
        self.root: Tree = Group(uid=node_uid(name), name=name)
        self.record_count = 0
        self._leaf_uids: set[str] = set()

    def add(self, record: TestRecord) -> Leaf:
        """Classify one record and append it as a leaf.

        Returns:
            The leaf created for the record.
        """
        current = self.root
        path: list[str] = [self.root.name]
        for segment in self.path_extractor(record):
            path.append(segment)
            child = current.find_group(segment)
            if child is None:
                child = Group(uid=node_uid(*path), name=segment)
                current.children.append(child)
                logger.debug("Created group %s under %s", segment, current.name)
            current = child

        uid = record.uid
        if not uid or uid in self._leaf_uids:
            if uid:
                logger.debug("Duplicate result uid %s for %s, using a derived uid", uid, record.name)
            uid = node_uid(*path, record.name, str(len(current.children)))
        self._leaf_uids.add(uid)
        leaf = Leaf(uid=uid, name=record.name, record=record, parent_uid=current.uid)
        current.children.append(leaf)
        self.record_count += 1
        return leaf

    def add_all(self, records: Iterable[TestRecord]) -> None:
        for record in records:
            self.add(record)

    def build(self) -> Tree:
        logger.debug(
            "Built tree %s: %d records, %d top-level nodes",
            self.root.name,
            self.record_count,
            len(self.root.children),
        )
        return self.root


def build_tree(
    records: Iterable[TestRecord],
    path_extractor: PathExtractor,
    name: str = DEFAULT_TREE_NAME,
) -> Tree:
    """Build a tree from records in the order given."""
    builder = TreeBuilder(path_extractor, name=name)
    builder.add_all(records)
    return builder.build()


def walk(node: TreeNode) -> Iterator[TreeNode]:
    """Yield a node and all its descendants, depth first."""
    yield node
    match node:
        case Group(children=children):
            for child in children:
                yield from walk(child)


def iter_leaves(node: TreeNode) -> Iterator[Leaf]:
    for n in walk(node):
        match n:
            case Leaf():
                yield n


def format_tree(tree: Tree, stats: Optional[Callable[[Group], str]] = None) -> str:
    """Render a tree as indented text, one node per line."""
    lines: list[str] = []

    def visit(node: TreeNode, depth: int) -> None:
        indent = "  " * depth
        match node:
            case Group(children=children):
                suffix = f"  {stats(node)}" if stats else ""
                lines.append(f"{indent}▼ {node.name}{suffix}")
                for child in children:
                    visit(child, depth + 1)
            case Leaf(record=record):
                lines.append(f"{indent}- {node.name} [{record.status.value}]")

    visit(tree, 0)
    return "\n".join(lines)
