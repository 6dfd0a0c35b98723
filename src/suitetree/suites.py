"""Suites report generation.

One report build runs these phases in order, never interleaved:

1. sort records by start time (timeless first)
2. build the tree grouped by the configured labels
3. prune groups that duplicate their parent's name
4. render the full tree, export rows and widget summary

Nothing is cached between builds; each call works on its own tree.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from suitetree import TestRecord, sort_by_start
from suitetree.config import Config, get_config
from suitetree.prune import PruneReport, prune
from suitetree.tree import DEFAULT_TREE_NAME, PathExtractor, Tree, build_tree, format_tree, group_by_labels
from suitetree.views import ExportRow, WidgetData, render_full_tree, render_rows, render_widget
from suitetree.writers import write_csv, write_json

logger = logging.getLogger(__name__)


def build_and_prune(
    records: Iterable[TestRecord],
    label_path: PathExtractor,
    name: str = DEFAULT_TREE_NAME,
) -> Tree:
    """Sort, build and prune a tree for one report."""
    tree, _ = _build_and_prune(sort_by_start(records), label_path, name)
    return tree


def _build_and_prune(
    ordered: list[TestRecord],
    label_path: PathExtractor,
    name: str,
) -> tuple[Tree, PruneReport]:
    logger.info("Building %s tree from %d records", name, len(ordered))
    tree = build_tree(ordered, label_path, name=name)
    report = prune(tree)
    logger.info("Built %s tree with %d top-level nodes", name, len(tree.children))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Tree %s:\n%s", name, format_tree(tree))
    return tree, report


@dataclass
class SuitesData:
    """Everything produced by one report build."""

    tree: Tree
    tree_document: dict[str, Any]
    rows: list[ExportRow]
    widget: WidgetData
    prune_report: PruneReport


class SuitesReport:
    """Generates the suites tree, export and widget for a set of records."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or get_config()

    def label_path(self) -> PathExtractor:
        return group_by_labels(*self.config.labels, placeholder=self.config.placeholder)

    def generate(self, records: Iterable[TestRecord]) -> SuitesData:
        """Run all phases and return the rendered views."""
        ordered = sort_by_start(records)
        tree, prune_report = _build_and_prune(ordered, self.label_path(), self.config.tree_name)
        return SuitesData(
            tree=tree,
            tree_document=render_full_tree(tree),
            rows=render_rows(ordered),
            widget=render_widget(tree),
            prune_report=prune_report,
        )

    def write(self, records: Iterable[TestRecord], report_dir: str | Path) -> SuitesData:
        """Generate and write ``suites.json``, ``suites.csv`` and the widget file.

        Layout under ``report_dir``:
            data/suites.json
            data/suites.csv
            widgets/suites.json
        """
        report_dir = Path(report_dir)
        data = self.generate(records)
        data_dir = report_dir / self.config.data_dir
        write_json(data_dir / self.config.json_file, data.tree_document)
        write_csv(data_dir / self.config.csv_file, data.rows)
        write_json(report_dir / self.config.widgets_dir / self.config.json_file, data.widget.to_dict())
        logger.info("Wrote suites report to %s", report_dir)
        return data
