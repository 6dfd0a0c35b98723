"""Suitetree test configuration and fixtures."""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

# Add src to path for imports
SRC_DIR = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))

from suitetree import Label, Status, TestRecord, TimeInfo  # noqa: E402
from suitetree.config import set_config  # noqa: E402


def make_record(
    name: str,
    status: Status = Status.PASSED,
    start: Optional[int] = None,
    stop: Optional[int] = None,
    **labels: str,
) -> TestRecord:
    """Build a record; keyword arguments become labels in the given order."""
    return TestRecord(
        name=name,
        labels=tuple(Label(k, v) for k, v in labels.items()),
        status=status,
        time=TimeInfo(start=start, stop=stop),
    )


@pytest.fixture
def record() -> Callable[..., TestRecord]:
    """Return the record factory."""
    return make_record


@pytest.fixture(autouse=True)
def reset_config():
    """Keep the process-level config from leaking between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def write_result(tmp_path: Path) -> Callable[..., Path]:
    """Write a result document into tmp_path/results and return its path."""
    results_dir = tmp_path / "results"
    results_dir.mkdir(exist_ok=True)

    def _write(file_name: str, data: Any) -> Path:
        path = results_dir / file_name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def results_dir(write_result: Callable[..., Path], tmp_path: Path) -> Path:
    """A results directory with four valid results across two suites."""
    write_result("a-result.json", {
        "name": "test_login",
        "status": "passed",
        "time": {"start": 30, "stop": 45},
        "labels": [{"name": "parentSuite", "value": "web"}, {"name": "suite", "value": "auth"}],
    })
    write_result("b-result.json", {
        "name": "test_logout",
        "status": "failed",
        "time": {"start": 10, "stop": 20},
        "labels": [{"name": "parentSuite", "value": "web"}, {"name": "suite", "value": "auth"}],
    })
    write_result("c-result.json", {
        "name": "test_cart",
        "status": "broken",
        "time": {"start": 20},
        "labels": [{"name": "parentSuite", "value": "shop"}, {"name": "suite", "value": "cart"}],
    })
    write_result("d-result.json", {
        "name": "test_timeless",
        "status": "skipped",
        "labels": [{"name": "parentSuite", "value": "shop"}, {"name": "suite", "value": "cart"}],
    })
    return tmp_path / "results"
