"""Collect AWS observability data into a prompt and ask an LLM for a diagnosis."""

from .errors import (
    ConfigError,
    DatasourceError,
    DiagnosisError,
    NoUsableDataError,
)
from .orchestrator import Orchestrator
from .prompt_builder import build_prompt
from .timewindow import resolve_window

__all__ = [
    "ConfigError",
    "DatasourceError",
    "DiagnosisError",
    "NoUsableDataError",
    "Orchestrator",
    "build_prompt",
    "resolve_window",
]
