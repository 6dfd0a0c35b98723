"""Outcome counting and severity ordering for tree nodes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from suitetree import Status
from suitetree.tree import Group, Leaf, TreeNode

# Status priority used when ranking statistics, most severe first.
SEVERITY_ORDER = (
    Status.FAILED,
    Status.BROKEN,
    Status.PASSED,
    Status.SKIPPED,
    Status.UNKNOWN,
)


@dataclass
class Statistic:
    """Per-status outcome counts with a derived total."""

    failed: int = 0
    broken: int = 0
    skipped: int = 0
    passed: int = 0
    unknown: int = 0

    @property
    def total(self) -> int:
        return self.failed + self.broken + self.skipped + self.passed + self.unknown

    def count(self, status: Status) -> int:
        return getattr(self, status.value)

    def increment(self, status: Status, amount: int = 1) -> None:
        setattr(self, status.value, self.count(status) + amount)

    def update(self, other: Statistic) -> None:
        """Add another statistic's counts to this one."""
        for status in Status:
            self.increment(status, other.count(status))

    @classmethod
    def merge(cls, stats: Iterable[Statistic]) -> Statistic:
        result = cls()
        for s in stats:
            result.update(s)
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "failed": self.failed,
            "broken": self.broken,
            "skipped": self.skipped,
            "passed": self.passed,
            "unknown": self.unknown,
            "total": self.total,
        }


def statistic_of(node: TreeNode) -> Statistic:
    """Count outcomes of every leaf beneath a node.

    A leaf counts once against its record's status. A group sums its
    children recursively, so nested groups contribute all of their leaves.
    """
    match node:
        case Leaf(record=record):
            stat = Statistic()
            stat.increment(record.status)
            return stat
        case Group(children=children):
            return Statistic.merge(statistic_of(child) for child in children)
    raise TypeError(f"Not a tree node: {node!r}")


def severity_key(statistic: Statistic, uid: str = "") -> tuple:
    """Sort key placing the most severe statistic first.

    Counts are compared in SEVERITY_ORDER, then by total, all descending;
    the uid breaks remaining ties so the order never depends on input order.
    """
    counts = tuple(-statistic.count(status) for status in SEVERITY_ORDER)
    return counts + (-statistic.total, uid)
