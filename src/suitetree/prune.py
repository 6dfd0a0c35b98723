"""Remove groups that repeat their parent's name.

Mis-tagged suites often carry the same value in two label levels, e.g.
``parentSuite=checkout`` and ``suite=checkout``, which renders as a
``checkout > checkout`` level of noise in the report. This pass drops every
child group named like its parent, together with that child's subtree.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from suitetree.tree import Group, Leaf, Tree

logger = logging.getLogger(__name__)


@dataclass
class RemovedNode:
    """A group dropped by the pruning pass."""

    parent_name: str
    uid: str
    name: str
    child_count: int


@dataclass
class PruneReport:
    """Outcome of a pruning pass.

    Attributes:
        removed: Groups that were dropped, in removal order.
        failures: Marked groups that were no longer in their parent's list.
        visited: Number of groups inspected.
    """

    removed: list[RemovedNode] = field(default_factory=list)
    failures: int = 0
    visited: int = 0

    @property
    def removed_count(self) -> int:
        return len(self.removed)


def _remove_marked(parent: Group, marked: list[Group], report: PruneReport) -> None:
    remaining = list(parent.children)
    for node in marked:
        index = next((i for i, c in enumerate(remaining) if c is node), None)
        if index is None:
            report.failures += 1
            logger.error(
                "Failed to remove group %s (%s) from %s: not among its children",
                node.name,
                node.uid,
                parent.name,
            )
            continue
        del remaining[index]
        report.removed.append(
            RemovedNode(
                parent_name=parent.name,
                uid=node.uid,
                name=node.name,
                child_count=len(node.children),
            )
        )
        logger.warning(
            "Removing group %s (%s) duplicating its parent's name, dropping %d children",
            node.name,
            node.uid,
            len(node.children),
        )
    parent.children = remaining


def _prune_group(group: Group, report: PruneReport) -> None:
    report.visited += 1
    snapshot = tuple(group.children)
    marked: list[Group] = []
    for child in snapshot:
        match child:
            case Group(name=name):
                _prune_group(child, report)
                if name == group.name:
                    marked.append(child)
            case Leaf():
                pass

    if marked:
        _remove_marked(group, marked, report)


def prune(tree: Tree) -> PruneReport:
    """Prune duplicate-named child groups in place, bottom-up per branch.

    Leaves are never removed. Removal failures are counted and logged but
    do not stop the pass.

    Returns:
        PruneReport describing what was removed.
    """
    report = PruneReport()
    _prune_group(tree, report)
    if report.removed or report.failures:
        logger.info(
            "Pruned %d duplicate groups from %s (%d failures)",
            report.removed_count,
            tree.name,
            report.failures,
        )
    return report
