"""OpenAI Responses API adapter."""

from __future__ import annotations

import logging
import os
from typing import Any, cast

import requests

from ..errors import ConfigError, DiagnosisError
from .base import DiagnosisClient

LOGGER = logging.getLogger(__name__)

_API_URL = "https://api.openai.com/v1/responses"
DEFAULT_TIMEOUT = 360.0


class OpenAI(DiagnosisClient):
    """Diagnosis client using OpenAI's responses endpoint."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        project_id: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        # The environment wins over a key stored in the config file.
        self.api_key = os.getenv("OPENAI_API_KEY") or api_key
        if not self.api_key:
            raise ConfigError("OPENAI_API_KEY is not set")
        self.project_id = project_id or os.getenv("OPENAI_PROJECT_ID")
        self.timeout = timeout

    def diagnose(
        self, prompt: str, *, model: str, max_tokens: int, instruction: str
    ) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.project_id:
            headers["OpenAI-Project"] = self.project_id
        payload: dict[str, Any] = {
            "model": model,
            "max_output_tokens": max_tokens,
            "input": [
                {
                    "role": "system",
                    "content": [{"type": "input_text", "text": instruction}],
                },
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                },
            ],
        }
        LOGGER.debug("requesting diagnosis from %s (%d chars)", model, len(prompt))
        try:
            resp = requests.post(
                _API_URL, headers=headers, json=payload, timeout=self.timeout
            )
            resp.raise_for_status()
            data = cast(dict[str, Any], resp.json())
        except requests.RequestException as exc:
            raise DiagnosisError(f"diagnosis request failed: {exc}") from exc
        except ValueError as exc:
            raise DiagnosisError("diagnosis response is not valid JSON") from exc

        # Prefer the consolidated output_text if present
        text = data.get("output_text")
        if isinstance(text, str):
            return text

        # Fallback to concatenating the message contents
        parts: list[str] = []
        for item in data.get("output", []):
            if item.get("type") != "message":
                continue
            for content in item.get("content", []):
                maybe_text = content.get("text")
                if isinstance(maybe_text, str):
                    parts.append(maybe_text)
        if parts:
            return "".join(parts)
        raise DiagnosisError("no text in diagnosis response")


__all__ = ["OpenAI"]
