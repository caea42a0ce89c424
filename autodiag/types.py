"""Typed structures shared by the diagnosis pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum


@dataclass(slots=True, frozen=True)
class TimeWindow:
    """Absolute ``[start, end)`` interval shared by every fetch of a run."""

    start: datetime
    end: datetime
    time_zone: tzinfo

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()

    def describe(self) -> str:
        """Return the window rendered in its display time zone."""

        fmt = "%Y-%m-%d %H:%M:%S %Z"
        start = self.start.astimezone(self.time_zone).strftime(fmt)
        end = self.end.astimezone(self.time_zone).strftime(fmt)
        return f"{start} - {end}"


@dataclass(slots=True, frozen=True)
class Fragment:
    """Rendered output of one successful datasource fetch."""

    order_no: int
    title: str
    body: str


@dataclass(slots=True, frozen=True)
class Prompt:
    """Assembled prompt text and the number of sections it holds."""

    text: str
    sections: int


@dataclass(slots=True, frozen=True)
class ComputeInstance:
    """Descriptive fields of an EC2 instance."""

    instance_id: str
    name: str
    instance_type: str
    state: str
    cpu_core_count: int | None = None
    threads_per_core: int | None = None


@dataclass(slots=True, frozen=True)
class DatabaseInstance:
    """Descriptive fields of an RDS instance."""

    identifier: str
    instance_class: str
    engine: str
    engine_version: str
    storage_type: str
    status: str
    multi_az: bool


@dataclass(slots=True, frozen=True)
class MetricPoint:
    """Single datapoint of a metric series."""

    timestamp: datetime
    value: float


class LogQueryStatus(str, Enum):
    """Lifecycle states reported for a Logs Insights query."""

    SCHEDULED = "Scheduled"
    RUNNING = "Running"
    COMPLETE = "Complete"
    FAILED = "Failed"
    CANCELLED = "Cancelled"
    TIMEOUT = "Timeout"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> LogQueryStatus:
        for member in cls:
            if member.value == value:
                return member
        return cls.UNKNOWN


# Each row is the list of ``(field, value)`` pairs returned for one match.
LogRow = list[tuple[str, str]]


__all__ = [
    "ComputeInstance",
    "DatabaseInstance",
    "Fragment",
    "LogQueryStatus",
    "LogRow",
    "MetricPoint",
    "Prompt",
    "TimeWindow",
]
