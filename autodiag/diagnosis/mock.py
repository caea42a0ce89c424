"""Deterministic mock diagnosis client for tests and offline runs."""

from __future__ import annotations

from .base import DiagnosisClient

RESPONSE = (
    "## Diagnosis\n"
    "Mock diagnosis: no reasoning service was contacted.\n\n"
    "## Summary\n"
    "Nothing to report.\n"
)


class MockDiagnosisClient(DiagnosisClient):
    """Client returning a canned diagnosis regardless of input."""

    def diagnose(  # noqa: D401
        self, prompt: str, *, model: str, max_tokens: int, instruction: str
    ) -> str:
        """Return the canned diagnosis ignoring every argument."""

        return RESPONSE


__all__ = ["MockDiagnosisClient"]
