"""Typed datasource specifications, one model per variant."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class _Spec(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    order_no: int = Field(..., description="Sort key for the final prompt")


class AppDescription(_Spec):
    """Free-text description of the application under diagnosis."""

    kind: Literal["app_description"] = "app_description"
    description: str

    def label(self) -> str:
        return "App description"


class ComputeInstanceDescription(_Spec):
    """EC2 instance looked up by its ``Name`` tag."""

    kind: Literal["ec2"] = "ec2"
    instance_name: str

    def label(self) -> str:
        return f"EC2 instance {self.instance_name}"


class DatabaseInstanceDescription(_Spec):
    """RDS instance looked up by its identifier."""

    kind: Literal["rds"] = "rds"
    db_identifier: str

    def label(self) -> str:
        return f"RDS instance {self.db_identifier}"


class MetricSeries(_Spec):
    """CloudWatch metric queried over the run's time window."""

    kind: Literal["cloudwatch_metric"] = "cloudwatch_metric"
    dimension_name: str
    dimension_value: str
    metric_identifier: str
    metric_namespace: str
    metric_name: str
    metric_stat: str
    metric_unit: str | None = None
    period: int = Field(60, gt=0, description="Aggregation period in seconds")

    def label(self) -> str:
        return f"CloudWatch metric {self.metric_identifier}"


class LogQueryResult(_Spec):
    """CloudWatch Logs Insights query over one log group."""

    kind: Literal["cloudwatch_log_insight"] = "cloudwatch_log_insight"
    description: str
    log_group_name: str
    query: str
    result_columns: list[str] = Field(..., min_length=1)

    def label(self) -> str:
        return f"CloudWatch log insight {self.log_group_name}"


DatasourceSpec = Annotated[
    AppDescription
    | ComputeInstanceDescription
    | DatabaseInstanceDescription
    | MetricSeries
    | LogQueryResult,
    Field(discriminator="kind"),
]


__all__ = [
    "AppDescription",
    "ComputeInstanceDescription",
    "DatabaseInstanceDescription",
    "DatasourceSpec",
    "LogQueryResult",
    "MetricSeries",
]
