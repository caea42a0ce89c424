"""CloudWatch Logs Insights datasource."""

from __future__ import annotations

import csv
import io
import logging
import threading
import time
from collections.abc import Callable, Sequence

from ..clients import ServiceClients
from ..errors import FetchCancelledError, QueryFailedError, QueryTimeoutError
from ..types import Fragment, LogQueryStatus, LogRow, TimeWindow
from .specs import LogQueryResult

LOGGER = logging.getLogger(__name__)

TITLE = "CloudWatch Logs Insights"
LOG_QUERY_TIMEOUT = 60.0
POLL_INTERVAL = 1.0
NO_DATA = "No applicable data found"

_PENDING = {LogQueryStatus.SCHEDULED, LogQueryStatus.RUNNING}


def to_csv(rows: Sequence[LogRow], columns: Sequence[str]) -> str:
    """Return ``rows`` as CSV with values placed under ``columns``.

    Values are matched by field name, so fields returned in a different
    order still land in the declared column. Undeclared fields such as
    ``@ptr`` are dropped and missing ones are left empty.
    """

    if not rows:
        return f"{NO_DATA}\n"
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(columns)
    for row in rows:
        values = dict(row)
        writer.writerow([values.get(column, "") for column in columns])
    return buf.getvalue()


def _stop(clients: ServiceClients, query_id: str) -> None:
    try:
        clients.stop_log_query(query_id)
    except Exception:  # pragma: no cover - best effort
        LOGGER.debug("failed to stop log query %s", query_id, exc_info=True)


def wait_for_results(
    clients: ServiceClients,
    query_id: str,
    *,
    timeout: float = LOG_QUERY_TIMEOUT,
    poll_interval: float = POLL_INTERVAL,
    sleep: Callable[[float], object] | None = None,
    clock: Callable[[], float] = time.monotonic,
    cancel: threading.Event | None = None,
    source: str | None = None,
) -> list[LogRow]:
    """Poll query ``query_id`` until it completes or ``timeout`` elapses.

    Setting ``cancel`` wakes the poll loop, stops the remote query and
    raises ``FetchCancelledError``. Without an explicit ``sleep`` the loop
    waits on ``cancel`` between polls.
    """

    if cancel is None:
        cancel = threading.Event()
    pause = sleep if sleep is not None else cancel.wait
    deadline = clock() + timeout
    while True:
        if cancel.is_set():
            _stop(clients, query_id)
            raise FetchCancelledError(f"query {query_id} was cancelled", source=source)
        try:
            status, rows = clients.get_log_query_results(query_id)
        except Exception as exc:
            raise QueryFailedError(
                f"reading results of query {query_id} failed: {exc}", source=source
            ) from exc
        LOGGER.debug("log query %s status %s", query_id, status.value)
        if status is LogQueryStatus.COMPLETE:
            return rows
        if status not in _PENDING:
            raise QueryFailedError(
                f"query {query_id} ended with status {status.value}", source=source
            )
        if clock() >= deadline:
            _stop(clients, query_id)
            raise QueryTimeoutError(
                f"query {query_id} did not complete within {timeout:g}s",
                source=source,
            )
        pause(poll_interval)


def fetch(
    spec: LogQueryResult,
    window: TimeWindow,
    clients: ServiceClients,
    *,
    timeout: float = LOG_QUERY_TIMEOUT,
    poll_interval: float = POLL_INTERVAL,
    sleep: Callable[[float], object] | None = None,
    clock: Callable[[], float] = time.monotonic,
    cancel: threading.Event | None = None,
) -> Fragment:
    if cancel is not None and cancel.is_set():
        raise FetchCancelledError(
            "cancelled before the query started", source=spec.label()
        )
    try:
        query_id = clients.start_log_query(
            log_group=spec.log_group_name, query=spec.query, window=window
        )
    except Exception as exc:
        raise QueryFailedError(
            f"starting query on {spec.log_group_name} failed: {exc}",
            source=spec.label(),
        ) from exc
    LOGGER.debug("started log query %s on %s", query_id, spec.log_group_name)
    rows = wait_for_results(
        clients,
        query_id,
        timeout=timeout,
        poll_interval=poll_interval,
        sleep=sleep,
        clock=clock,
        cancel=cancel,
        source=spec.label(),
    )
    body = "\n".join(
        [
            f"Description: [{spec.description}]",
            f"Log Group: [`{spec.log_group_name}`]",
            "Data:",
            "```",
            to_csv(rows, spec.result_columns).rstrip("\n"),
            "```",
        ]
    )
    return Fragment(order_no=spec.order_no, title=TITLE, body=body)


__all__ = ["LOG_QUERY_TIMEOUT", "POLL_INTERVAL", "fetch", "to_csv", "wait_for_results"]
