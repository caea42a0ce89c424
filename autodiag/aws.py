"""boto3-backed implementation of the ``ServiceClients`` protocol."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

from .types import (
    ComputeInstance,
    DatabaseInstance,
    LogQueryStatus,
    LogRow,
    MetricPoint,
    TimeWindow,
)

LOGGER = logging.getLogger(__name__)

# Terminated instances keep their tags for a while and would make names ambiguous.
_LIVE_STATES = ["pending", "running", "shutting-down", "stopping", "stopped"]


def _instance_name(instance: dict[str, Any]) -> str:
    for tag in instance.get("Tags", []):
        if tag.get("Key") == "Name":
            return str(tag.get("Value", ""))
    return ""


def _compute_instance(instance: dict[str, Any]) -> ComputeInstance:
    cpu = instance.get("CpuOptions", {})
    return ComputeInstance(
        instance_id=instance["InstanceId"],
        name=_instance_name(instance),
        instance_type=instance.get("InstanceType", "unknown"),
        state=instance.get("State", {}).get("Name", "unknown"),
        cpu_core_count=cpu.get("CoreCount"),
        threads_per_core=cpu.get("ThreadsPerCore"),
    )


def _database_instance(instance: dict[str, Any]) -> DatabaseInstance:
    return DatabaseInstance(
        identifier=instance["DBInstanceIdentifier"],
        instance_class=instance.get("DBInstanceClass", "unknown"),
        engine=instance.get("Engine", "unknown"),
        engine_version=instance.get("EngineVersion", ""),
        storage_type=instance.get("StorageType", "unknown"),
        status=instance.get("DBInstanceStatus", "unknown"),
        multi_az=bool(instance.get("MultiAZ", False)),
    )


class AwsClients:
    """Service clients bound to one AWS profile.

    boto3 clients are safe to share between threads once created, so all
    of them are built up front.
    """

    def __init__(
        self,
        profile: str | None = None,
        *,
        session: Any | None = None,
    ) -> None:
        if session is None:
            session = boto3.session.Session(profile_name=profile)
        self.ec2 = session.client("ec2")
        self.rds = session.client("rds")
        self.cloudwatch = session.client("cloudwatch")
        self.logs = session.client("logs")

    def lookup_compute_instance(self, name: str) -> list[ComputeInstance]:
        paginator = self.ec2.get_paginator("describe_instances")
        filters = [
            {"Name": "tag:Name", "Values": [name]},
            {"Name": "instance-state-name", "Values": _LIVE_STATES},
        ]
        found: list[ComputeInstance] = []
        for page in paginator.paginate(Filters=filters):
            for reservation in page.get("Reservations", []):
                for instance in reservation.get("Instances", []):
                    found.append(_compute_instance(instance))
        return found

    def lookup_database_instance(self, identifier: str) -> list[DatabaseInstance]:
        try:
            resp = self.rds.describe_db_instances(DBInstanceIdentifier=identifier)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "DBInstanceNotFound":
                return []
            raise
        return [_database_instance(i) for i in resp.get("DBInstances", [])]

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
    ) -> list[MetricPoint]:
        metric_stat: dict[str, Any] = {
            "Metric": {
                "Namespace": namespace,
                "MetricName": name,
                "Dimensions": [{"Name": dimension[0], "Value": dimension[1]}],
            },
            "Period": period,
            "Stat": stat,
        }
        if unit:
            metric_stat["Unit"] = unit
        kwargs: dict[str, Any] = {
            "MetricDataQueries": [
                {"Id": query_id, "MetricStat": metric_stat, "ReturnData": True}
            ],
            "StartTime": window.start,
            "EndTime": window.end,
        }
        points: list[MetricPoint] = []
        while True:
            resp = self.cloudwatch.get_metric_data(**kwargs)
            for result in resp.get("MetricDataResults", []):
                for ts, value in zip(result.get("Timestamps", []), result.get("Values", [])):
                    points.append(MetricPoint(timestamp=ts, value=float(value)))
            token = resp.get("NextToken")
            if not token:
                return points
            kwargs["NextToken"] = token

    def start_log_query(
        self, *, log_group: str, query: str, window: TimeWindow
    ) -> str:
        resp = self.logs.start_query(
            logGroupName=log_group,
            startTime=int(window.start.timestamp()),
            endTime=int(window.end.timestamp()),
            queryString=query,
        )
        return str(resp["queryId"])

    def get_log_query_results(
        self, query_id: str
    ) -> tuple[LogQueryStatus, list[LogRow]]:
        resp = self.logs.get_query_results(queryId=query_id)
        status = LogQueryStatus.parse(resp.get("status"))
        rows: list[LogRow] = [
            [(field["field"], field.get("value", "")) for field in result]
            for result in resp.get("results", [])
        ]
        return status, rows

    def stop_log_query(self, query_id: str) -> None:
        self.logs.stop_query(queryId=query_id)
        LOGGER.debug("stopped log query %s", query_id)


__all__ = ["AwsClients"]
