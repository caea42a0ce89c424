"""Capability protocol for the cloud service clients used by datasources."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .types import (
    ComputeInstance,
    DatabaseInstance,
    LogQueryStatus,
    LogRow,
    MetricPoint,
    TimeWindow,
)


class ServiceClients(Protocol):
    """One capability per consumed cloud service.

    Implementations are shared read-only by concurrent fetches and must be
    safe to call from several threads.
    """

    def lookup_compute_instance(self, name: str) -> Sequence[ComputeInstance]:
        """Return every instance whose ``Name`` tag equals ``name``."""

    def lookup_database_instance(
        self, identifier: str
    ) -> Sequence[DatabaseInstance]:
        """Return every database instance with ``identifier``."""

    def query_metric(
        self,
        *,
        query_id: str,
        namespace: str,
        name: str,
        dimension: tuple[str, str],
        stat: str,
        unit: str | None,
        period: int,
        window: TimeWindow,
    ) -> Sequence[MetricPoint]:
        """Return the datapoints of one metric over ``window``."""

    def start_log_query(
        self, *, log_group: str, query: str, window: TimeWindow
    ) -> str:
        """Submit a Logs Insights query and return its id."""

    def get_log_query_results(
        self, query_id: str
    ) -> tuple[LogQueryStatus, list[LogRow]]:
        """Return the current status and rows of query ``query_id``."""

    def stop_log_query(self, query_id: str) -> None:
        """Ask the service to stop query ``query_id``."""


__all__ = ["ServiceClients"]
