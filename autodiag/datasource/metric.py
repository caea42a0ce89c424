"""CloudWatch metric datasource."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence

from ..clients import ServiceClients
from ..errors import NoDataPointsError
from ..types import Fragment, MetricPoint, TimeWindow
from .compute import resolve_instance
from .specs import MetricSeries

LOGGER = logging.getLogger(__name__)

MAX_POINTS = 120
_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def _number(value: float) -> str:
    return f"{value:g}"


def _dimension_value(spec: MetricSeries, clients: ServiceClients) -> str:
    # EC2 metrics are keyed by instance id while the config names instances.
    if spec.metric_namespace == "AWS/EC2" and spec.dimension_name == "InstanceId":
        instance = resolve_instance(
            clients, spec.dimension_value, source=spec.label()
        )
        return instance.instance_id
    return spec.dimension_value


def summarize(points: Sequence[MetricPoint]) -> str:
    values = [p.value for p in points]
    avg = sum(values) / len(values)
    return (
        f"count={len(values)}, min={_number(min(values))}, "
        f"max={_number(max(values))}, avg={_number(round(avg, 4))}"
    )


def to_csv(
    points: Sequence[MetricPoint], window: TimeWindow, *, max_points: int = MAX_POINTS
) -> str:
    """Return ``points`` as CSV, newest first, limited to ``max_points``."""

    ordered = sorted(points, key=lambda p: p.timestamp, reverse=True)
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["timestamp", "value"])
    for point in ordered[:max_points]:
        local = point.timestamp.astimezone(window.time_zone)
        writer.writerow([local.strftime(_TIMESTAMP_FORMAT), _number(point.value)])
    omitted = len(ordered) - max_points
    if omitted > 0:
        buf.write(f"... {omitted} older point(s) omitted\n")
    return buf.getvalue()


def fetch(
    spec: MetricSeries,
    window: TimeWindow,
    clients: ServiceClients,
    *,
    max_points: int = MAX_POINTS,
) -> Fragment:
    dimension = (spec.dimension_name, _dimension_value(spec, clients))
    points = list(
        clients.query_metric(
            query_id=spec.metric_identifier,
            namespace=spec.metric_namespace,
            name=spec.metric_name,
            dimension=dimension,
            stat=spec.metric_stat,
            unit=spec.metric_unit,
            period=spec.period,
            window=window,
        )
    )
    LOGGER.debug("metric %s returned %d point(s)", spec.metric_identifier, len(points))
    if not points:
        raise NoDataPointsError(
            f"no datapoints for {spec.metric_namespace}/{spec.metric_name} "
            f"on {dimension[0]}={dimension[1]}",
            source=spec.label(),
        )

    lines = [
        f"Metric: [`{spec.metric_name}`]",
        f"Identifier: [`{spec.metric_identifier}`]",
        f"Dimension: [`{dimension[0]}:{dimension[1]}`]",
        f"Statistic: [{spec.metric_stat}]",
    ]
    if spec.metric_unit:
        lines.append(f"Unit: [{spec.metric_unit}]")
    lines.append(f"Summary: [{summarize(points)}]")
    lines.append("Data:")
    lines.append("```")
    lines.append(to_csv(points, window, max_points=max_points).rstrip("\n"))
    lines.append("```")
    return Fragment(
        order_no=spec.order_no,
        title=f"CloudWatch {spec.metric_namespace}",
        body="\n".join(lines),
    )


__all__ = ["MAX_POINTS", "fetch", "summarize", "to_csv"]
