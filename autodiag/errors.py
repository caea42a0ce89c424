"""Error hierarchy for diagnosis runs."""

from __future__ import annotations

from typing import Any


class AutodiagError(Exception):
    """Base class for all errors raised by the package."""


class ConfigError(AutodiagError):
    """Raised when configuration or time-range inputs are unusable."""


class InvalidTimeRangeError(ConfigError):
    """Raised when a time window cannot be resolved."""


class DatasourceError(AutodiagError):
    """Raised when a single datasource cannot produce a fragment."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        message = super().__str__()
        if self.source:
            return f"{self.source}: {message}"
        return message


class NotFoundError(DatasourceError):
    """The named resource does not resolve to exactly one match."""


class NoDataPointsError(DatasourceError):
    """A metric query returned an empty series."""


class QueryTimeoutError(DatasourceError):
    """A log query did not complete within the allowed wait."""


class QueryFailedError(DatasourceError):
    """A log query could not be run or finished in a failed state."""


class FetchCancelledError(DatasourceError):
    """A fetch was cancelled before it completed."""


class OrchestratorError(AutodiagError):
    """Raised when a run cannot produce any evidence."""


class NoUsableDataError(OrchestratorError):
    """Every datasource failed, leaving nothing to diagnose."""

    def __init__(self, failures: list[Any]) -> None:
        super().__init__(f"all {len(failures)} datasource(s) failed")
        self.failures = failures


class DiagnosisError(AutodiagError):
    """Raised when the reasoning service call fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.prompt: Any = None


__all__ = [
    "AutodiagError",
    "ConfigError",
    "DatasourceError",
    "DiagnosisError",
    "FetchCancelledError",
    "InvalidTimeRangeError",
    "NoDataPointsError",
    "NoUsableDataError",
    "NotFoundError",
    "OrchestratorError",
    "QueryFailedError",
    "QueryTimeoutError",
]
