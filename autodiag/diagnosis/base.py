"""Base protocol for diagnosis clients."""

from __future__ import annotations

from typing import Protocol


class DiagnosisClient(Protocol):
    """Interface for the reasoning service."""

    def diagnose(
        self, prompt: str, *, model: str, max_tokens: int, instruction: str
    ) -> str:
        """Return a diagnosis for ``prompt`` or raise ``DiagnosisError``."""


__all__ = ["DiagnosisClient"]
