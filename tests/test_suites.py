"""Tests for the composed suites report pipeline."""
from __future__ import annotations

import csv
import json
from pathlib import Path

from suitetree import Status
from suitetree.config import Config, set_config
from suitetree.suites import SuitesReport, build_and_prune
from suitetree.tree import Group, Leaf, group_by_labels, iter_leaves
from suitetree.views import EXPORT_COLUMNS

SUITE_ONLY = group_by_labels("suite")


class TestBuildAndPrune:
    """Tests for build_and_prune."""

    def test_end_to_end_example(self, record) -> None:
        records = [
            record("first", start=5, suite="s1"),
            record("second", start=3, suite="s1"),
            record("third", start=1, suite="s2"),
        ]
        tree = build_and_prune(records, SUITE_ONLY)

        assert sorted(c.name for c in tree.children) == ["s1", "s2"]
        # Groups appear in first-seen order after the time sort.
        assert [c.name for c in tree.children] == ["s2", "s1"]
        s1 = tree.find_group("s1")
        assert [leaf.record.start for leaf in s1.children] == [3, 5]

    def test_sorts_before_building(self, record) -> None:
        records = [
            record("second", start=12, suite="s"),
            record("first", start=10, suite="s"),
            record("timeless", suite="s"),
        ]
        tree = build_and_prune(records, SUITE_ONLY)
        assert [c.name for c in tree.children[0].children] == ["timeless", "first", "second"]

    def test_prunes(self, record) -> None:
        tree = build_and_prune(
            [record("a", parentSuite="X", suite="X"), record("b", parentSuite="X", suite="Y")],
            group_by_labels("parentSuite", "suite"),
        )
        assert [c.name for c in tree.children[0].children] == ["Y"]

    def test_does_not_mutate_input_list(self, record) -> None:
        records = [record("b", start=2), record("a", start=1)]
        build_and_prune(records, SUITE_ONLY)
        assert [r.name for r in records] == ["b", "a"]


class TestSuitesReport:
    """Tests for SuitesReport."""

    def test_generate(self, record) -> None:
        records = [
            record("late", status=Status.FAILED, start=20, parentSuite="web", suite="auth"),
            record("early", start=10, parentSuite="web", suite="auth"),
            record("shop", status=Status.BROKEN, start=15, parentSuite="shop", suite="cart"),
        ]
        data = SuitesReport(Config()).generate(records)

        assert [row.name for row in data.rows] == ["early", "shop", "late"]
        assert data.tree_document["name"] == "suites"
        assert [c["name"] for c in data.tree_document["children"]] == ["web", "shop"]
        assert [item.name for item in data.widget.items] == ["web", "shop"]
        assert data.widget.total == 2
        assert data.prune_report.removed_count == 0

    def test_uses_configured_labels_and_placeholder(self, record) -> None:
        config = Config(labels=["feature"], placeholder="(none)", tree_name="features")
        data = SuitesReport(config).generate([record("a", feature="login"), record("b")])
        assert data.tree.name == "features"
        assert [c.name for c in data.tree.children] == ["login", "(none)"]

    def test_defaults_to_global_config(self, record) -> None:
        set_config(Config(labels=["epic"]))
        data = SuitesReport().generate([record("a", epic="e1")])
        assert [c.name for c in data.tree.children] == ["e1"]

    def test_invocations_share_no_state(self, record) -> None:
        report = SuitesReport(Config(labels=["suite"]))
        first = report.generate([record("a", suite="s")])
        second = report.generate([record("b", suite="t")])
        assert [c.name for c in first.tree.children] == ["s"]
        assert [c.name for c in second.tree.children] == ["t"]

    def test_every_record_is_a_leaf(self, record) -> None:
        records = [record(str(i), suite=f"s{i % 3}", start=i) for i in range(10)]
        data = SuitesReport(Config()).generate(records)
        assert len(list(iter_leaves(data.tree))) == 10
        assert all(isinstance(c, Group) for c in data.tree.children)

    def test_empty_labels_put_leaves_at_root(self, record) -> None:
        data = SuitesReport(Config(labels=[])).generate([record("a", suite="s")])
        assert isinstance(data.tree.children[0], Leaf)
        assert data.widget.items == []
        assert data.widget.total == 1

    def test_write(self, record, tmp_path: Path) -> None:
        records = [
            record("a", status=Status.FAILED, start=1, suite="s1"),
            record("b", start=2, suite="s2"),
        ]
        SuitesReport(Config(labels=["suite"])).write(records, tmp_path / "report")

        tree_doc = json.loads((tmp_path / "report" / "data" / "suites.json").read_text(encoding="utf-8"))
        assert [c["name"] for c in tree_doc["children"]] == ["s1", "s2"]

        with (tmp_path / "report" / "data" / "suites.csv").open(encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == list(EXPORT_COLUMNS)
        assert [r[9] for r in rows[1:]] == ["a", "b"]

        widget = json.loads((tmp_path / "report" / "widgets" / "suites.json").read_text(encoding="utf-8"))
        assert widget["total"] == 2
        assert [i["name"] for i in widget["items"]] == ["s1", "s2"]
        assert widget["items"][0]["statistic"]["failed"] == 1
