"""Report views over a pruned suite tree.

Three independent projections:
- full tree document (``suites.json``)
- flat export rows, one per record (``suites.csv``)
- top-level widget summary sorted by severity (``widgets/suites.json``)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from suitetree import TestRecord
from suitetree.statistic import Statistic, severity_key, statistic_of
from suitetree.tree import Group, Leaf, Tree, TreeNode


# ============================================================================
# Full tree
# ============================================================================


def _render_node(node: TreeNode) -> dict[str, Any]:
    match node:
        case Group():
            return {
                "uid": node.uid,
                "name": node.name,
                "statistic": statistic_of(node).to_dict(),
                "children": [_render_node(child) for child in node.children],
            }
        case Leaf(record=record):
            return {
                "uid": node.uid,
                "parentUid": node.parent_uid,
                "name": node.name,
                "status": record.status.value,
                "time": record.time.to_dict(),
                "parameters": [value for _, value in record.parameters],
            }
    raise TypeError(f"Not a tree node: {node!r}")


def render_full_tree(tree: Tree) -> dict[str, Any]:
    """Serialize the whole tree, keeping structure and child order."""
    return _render_node(tree)


# ============================================================================
# Tabular export
# ============================================================================


EXPORT_COLUMNS = (
    "Status",
    "Start Time",
    "Stop Time",
    "Duration in ms",
    "Parent Suite",
    "Suite",
    "Sub Suite",
    "Test Class",
    "Test Method",
    "Name",
    "Description",
)


@dataclass(frozen=True)
class ExportRow:
    """One record projected into the suites export schema."""

    status: str
    start: Optional[int]
    stop: Optional[int]
    duration: Optional[int]
    parent_suite: Optional[str]
    suite: Optional[str]
    sub_suite: Optional[str]
    test_class: Optional[str]
    test_method: Optional[str]
    name: str
    description: Optional[str]

    @classmethod
    def from_record(cls, record: TestRecord) -> ExportRow:
        return cls(
            status=record.status.value,
            start=record.time.start,
            stop=record.time.stop,
            duration=record.time.effective_duration,
            parent_suite=record.find_label("parentSuite"),
            suite=record.find_label("suite"),
            sub_suite=record.find_label("subSuite"),
            test_class=record.find_label("testClass"),
            test_method=record.find_label("testMethod"),
            name=record.name,
            description=record.description,
        )

    def as_row(self) -> list[Any]:
        """Values in EXPORT_COLUMNS order; None becomes an empty cell."""
        values = (
            self.status,
            self.start,
            self.stop,
            self.duration,
            self.parent_suite,
            self.suite,
            self.sub_suite,
            self.test_class,
            self.test_method,
            self.name,
            self.description,
        )
        return ["" if v is None else v for v in values]


def render_rows(records: Iterable[TestRecord]) -> list[ExportRow]:
    """One export row per record, in the order supplied."""
    return [ExportRow.from_record(r) for r in records]


# ============================================================================
# Widget summary
# ============================================================================


@dataclass
class WidgetItem:
    uid: str
    name: str
    statistic: Statistic

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "statistic": self.statistic.to_dict(),
        }


@dataclass
class WidgetData:
    """Top-level summary: severity-sorted items and the root child count."""

    items: list[WidgetItem] = field(default_factory=list)
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
        }


def render_widget(tree: Tree) -> WidgetData:
    """Summarize the direct children of the root, most severe first.

    Only groups become items. ``total`` counts every direct child of the
    root, including stray leaves.
    """
    items = [
        WidgetItem(uid=group.uid, name=group.name, statistic=statistic_of(group))
        for group in tree.groups
    ]
    items.sort(key=lambda item: severity_key(item.statistic, item.uid))
    return WidgetData(items=items, total=len(tree.children))
