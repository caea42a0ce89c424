from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import pytest

from autodiag.types import (
    ComputeInstance,
    DatabaseInstance,
    LogQueryStatus,
    LogRow,
    MetricPoint,
    TimeWindow,
)


class FakeClients:
    """In-memory ``ServiceClients`` recording every call."""

    def __init__(
        self,
        *,
        instances: dict[str, list[ComputeInstance]] | None = None,
        databases: dict[str, list[DatabaseInstance]] | None = None,
        metrics: dict[str, list[MetricPoint]] | None = None,
        log_statuses: list[LogQueryStatus] | None = None,
        log_rows: list[LogRow] | None = None,
    ) -> None:
        self.instances = instances or {}
        self.databases = databases or {}
        self.metrics = metrics or {}
        self.log_statuses = list(log_statuses or [LogQueryStatus.COMPLETE])
        self.log_rows = log_rows or []
        self.calls: list[tuple] = []
        self.stopped: list[str] = []

    def lookup_compute_instance(self, name: str) -> list[ComputeInstance]:
        self.calls.append(("ec2", name))
        return self.instances.get(name, [])

    def lookup_database_instance(self, identifier: str) -> list[DatabaseInstance]:
        self.calls.append(("rds", identifier))
        return self.databases.get(identifier, [])

    def query_metric(self, **kwargs) -> list[MetricPoint]:
        self.calls.append(("metric", kwargs))
        return self.metrics.get(kwargs["query_id"], [])

    def start_log_query(self, *, log_group: str, query: str, window: TimeWindow) -> str:
        self.calls.append(("logs", log_group, query))
        return "query-1"

    def get_log_query_results(self, query_id: str):
        if len(self.log_statuses) > 1:
            status = self.log_statuses.pop(0)
        else:
            status = self.log_statuses[0]
        rows = self.log_rows if status is LogQueryStatus.COMPLETE else []
        return status, rows

    def stop_log_query(self, query_id: str) -> None:
        self.stopped.append(query_id)


def web_instance(instance_id: str = "i-0abc", name: str = "web-1") -> ComputeInstance:
    return ComputeInstance(
        instance_id=instance_id,
        name=name,
        instance_type="t3a.medium",
        state="running",
        cpu_core_count=1,
        threads_per_core=2,
    )


@pytest.fixture
def fake_clients() -> FakeClients:
    return FakeClients()


@pytest.fixture
def window() -> TimeWindow:
    return TimeWindow(
        start=datetime(2023, 10, 12, 9, 30, tzinfo=UTC),
        end=datetime(2023, 10, 12, 11, 0, tzinfo=UTC),
        time_zone=ZoneInfo("Asia/Manila"),
    )
