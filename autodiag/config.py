"""Load and validate the diagnosis configuration file."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .datasource.specs import (
    AppDescription,
    ComputeInstanceDescription,
    DatabaseInstanceDescription,
    DatasourceSpec,
    LogQueryResult,
    MetricSeries,
)
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)


class GeneralConfig(BaseModel):
    """Settings shared by the whole run."""

    model_config = ConfigDict(frozen=True)

    profile: str = Field("default", description="AWS profile name")
    time_zone: str | None = Field(None, description="IANA zone for display")


class OpenAiConfig(BaseModel):
    """Reasoning service settings."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    model: str = "gpt-4o"
    max_token: int = Field(4096, gt=0)


class Config(BaseModel):
    """Parsed configuration file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    open_ai: OpenAiConfig = Field(default_factory=OpenAiConfig)
    app_description: list[AppDescription] = Field(default_factory=list)
    ec2: list[ComputeInstanceDescription] = Field(default_factory=list)
    rds: list[DatabaseInstanceDescription] = Field(default_factory=list)
    cloudwatch_metric: list[MetricSeries] = Field(default_factory=list)
    cloudwatch_log_insight: list[LogQueryResult] = Field(default_factory=list)

    def datasources(self) -> list[DatasourceSpec]:
        """Return every configured datasource in declaration order.

        Variants are concatenated table by table; the orchestrator sorts by
        ``order_no`` afterwards, so this order only breaks ties.
        """

        specs: list[DatasourceSpec] = []
        specs.extend(self.app_description)
        specs.extend(self.ec2)
        specs.extend(self.rds)
        specs.extend(self.cloudwatch_metric)
        specs.extend(self.cloudwatch_log_insight)
        return specs


def _read(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return tomllib.loads(text)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(text)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot parse config file {path}: {exc}") from exc
    raise ConfigError(f"unsupported config file type: {path.suffix or path.name}")


def parse_config(data: Any) -> Config:
    """Validate raw mapping ``data`` into a ``Config``."""

    if not isinstance(data, dict):
        raise ConfigError("config root must be a table")
    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration:\n{exc}") from exc


def load_config(path: Path | str) -> Config:
    """Load ``path`` (TOML or YAML) into a ``Config``."""

    if isinstance(path, str):
        path = Path(path)
    config = parse_config(_read(path))
    LOGGER.debug(
        "loaded %d datasource(s) from %s", len(config.datasources()), path
    )
    return config


__all__ = ["Config", "GeneralConfig", "OpenAiConfig", "load_config", "parse_config"]
