"""Diagnosis client implementations and factory."""

from __future__ import annotations

import os

from .base import DiagnosisClient
from .mock import MockDiagnosisClient
from .openai import OpenAI


def create_client(
    backend: str | None = None, *, api_key: str | None = None
) -> DiagnosisClient:
    """Return a ``DiagnosisClient`` based on ``backend`` or environment."""

    if backend is None:
        backend = os.getenv("AUTODIAG_BACKEND")
    if backend is None:
        has_key = bool(os.getenv("OPENAI_API_KEY") or api_key)
        backend = "OPENAI" if has_key else "MOCK"
    backend = backend.upper()
    if backend == "OPENAI":
        return OpenAI(api_key=api_key)
    return MockDiagnosisClient()


__all__ = ["DiagnosisClient", "MockDiagnosisClient", "OpenAI", "create_client"]
