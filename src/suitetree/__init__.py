"""Suite tree reporting for test execution results.

This module provides the data structures for test records consumed by the
suite tree engine, plus the time ordering applied before a tree is built.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

__version__ = "0.1.0"


class Status(str, Enum):
    """Outcome of a single test execution."""

    PASSED = "passed"
    FAILED = "failed"
    BROKEN = "broken"
    SKIPPED = "skipped"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> Status:
        """Parse a status value, falling back to UNKNOWN."""
        if isinstance(value, Status):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Label:
    """A single name/value label attached to a record."""

    name: str
    value: str


@dataclass(frozen=True)
class TimeInfo:
    """Execution time of a record in epoch milliseconds.

    Attributes:
        start: When execution started, or None for timeless records.
        stop: When execution finished.
        duration: Explicit duration; derived from start/stop when missing.
    """

    start: Optional[int] = None
    stop: Optional[int] = None
    duration: Optional[int] = None

    @property
    def effective_duration(self) -> Optional[int]:
        if self.duration is not None:
            return self.duration
        if self.start is not None and self.stop is not None:
            return self.stop - self.start
        return None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> TimeInfo:
        data = data or {}
        return cls(
            start=data.get("start"),
            stop=data.get("stop"),
            duration=data.get("duration"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start,
            "stop": self.stop,
            "duration": self.effective_duration,
        }


@dataclass(frozen=True)
class TestRecord:
    """One observed test execution.

    Records are immutable; the tree engine only ever holds references to
    them.

    Attributes:
        name: Display name of the test.
        labels: Ordered labels; a label name may repeat or be absent.
        status: Execution outcome.
        time: Start/stop timing.
        uid: Stable identifier supplied by the producer, if any.
        full_name: Fully qualified test name.
        description: Free-form description.
        parameters: Ordered (name, value) parameter pairs.
    """

    __test__ = False

    name: str
    labels: tuple[Label, ...] = ()
    status: Status = Status.UNKNOWN
    time: TimeInfo = field(default_factory=TimeInfo)
    uid: Optional[str] = None
    full_name: Optional[str] = None
    description: Optional[str] = None
    parameters: tuple[tuple[str, str], ...] = ()

    @property
    def start(self) -> Optional[int]:
        return self.time.start

    def find_all_labels(self, name: str) -> list[str]:
        """Return every value of the named label, in order."""
        return [label.value for label in self.labels if label.name == name]

    def find_label(self, name: str) -> Optional[str]:
        """Return the first value of the named label, or None."""
        for label in self.labels:
            if label.name == name:
                return label.value
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TestRecord:
        """Create a record from a result document."""
        labels = tuple(
            Label(name=str(item["name"]), value=str(item["value"]))
            for item in data.get("labels", [])
            if item.get("name") is not None and item.get("value") is not None
        )
        parameters = tuple(
            (str(item.get("name", "")), str(item.get("value", "")))
            for item in data.get("parameters", [])
        )
        time_data = data.get("time")
        if time_data is None and ("start" in data or "stop" in data):
            time_data = {"start": data.get("start"), "stop": data.get("stop")}
        return cls(
            name=data["name"],
            labels=labels,
            status=Status.parse(data.get("status")),
            time=TimeInfo.from_dict(time_data),
            uid=data.get("uid"),
            full_name=data.get("fullName"),
            description=data.get("description"),
            parameters=parameters,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "uid": self.uid,
            "name": self.name,
            "fullName": self.full_name,
            "status": self.status.value,
            "time": self.time.to_dict(),
            "labels": [{"name": l.name, "value": l.value} for l in self.labels],
            "parameters": [{"name": n, "value": v} for n, v in self.parameters],
            "description": self.description,
        }


def sort_by_start(records: Iterable[TestRecord]) -> list[TestRecord]:
    """Stable sort by start time; records without a start time come first."""

    def key(r: TestRecord):
        return (r.start is not None, r.start or 0)

    return sorted(records, key=key)
