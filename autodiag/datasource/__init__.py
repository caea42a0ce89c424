"""Datasource variants and the single ``fetch`` entry point."""

from __future__ import annotations

import threading
from collections.abc import Callable

from ..clients import ServiceClients
from ..types import Fragment, TimeWindow
from . import app_description, compute, database, log_query, metric
from .specs import (
    AppDescription,
    ComputeInstanceDescription,
    DatabaseInstanceDescription,
    DatasourceSpec,
    LogQueryResult,
    MetricSeries,
)

_FETCHERS: dict[type, Callable[..., Fragment]] = {
    AppDescription: app_description.fetch,
    ComputeInstanceDescription: compute.fetch,
    DatabaseInstanceDescription: database.fetch,
    MetricSeries: metric.fetch,
    LogQueryResult: log_query.fetch,
}

# Fetchers that poll remote work and accept a ``cancel`` event.
_CANCELLABLE = frozenset({LogQueryResult})


def fetch(
    spec: DatasourceSpec,
    window: TimeWindow,
    clients: ServiceClients,
    *,
    cancel: threading.Event | None = None,
) -> Fragment:
    """Fetch ``spec`` over ``window`` and return its rendered fragment.

    ``cancel`` reaches the fetchers that wait on remote work; the others
    finish in a single round trip and ignore it.
    """

    try:
        fetcher = _FETCHERS[type(spec)]
    except KeyError:
        raise TypeError(f"unsupported datasource: {type(spec).__name__}") from None
    if type(spec) in _CANCELLABLE:
        return fetcher(spec, window, clients, cancel=cancel)
    return fetcher(spec, window, clients)


__all__ = [
    "AppDescription",
    "ComputeInstanceDescription",
    "DatabaseInstanceDescription",
    "DatasourceSpec",
    "LogQueryResult",
    "MetricSeries",
    "fetch",
]
