from datetime import UTC, datetime

import pytest
from conftest import FakeClients

from autodiag.config import parse_config
from autodiag.diagnosis import MockDiagnosisClient
from autodiag.diagnosis.mock import RESPONSE
from autodiag.errors import DiagnosisError, InvalidTimeRangeError, NoUsableDataError
from autodiag.prompt_builder import INSTRUCTION
from autodiag.runner import run

NOW = datetime(2024, 1, 2, 12, 0, tzinfo=UTC)


class CountingClient(MockDiagnosisClient):
    def __init__(self) -> None:
        self.calls: list[dict] = []

    def diagnose(self, prompt: str, *, model: str, max_tokens: int, instruction: str) -> str:
        self.calls.append(
            {"prompt": prompt, "model": model, "max_tokens": max_tokens, "instruction": instruction}
        )
        return super().diagnose(
            prompt, model=model, max_tokens=max_tokens, instruction=instruction
        )


class FailingClient:
    def diagnose(self, prompt: str, *, model: str, max_tokens: int, instruction: str) -> str:
        raise DiagnosisError("quota exceeded")


def _config(**extra):
    data = {
        "general": {"profile": "p", "time_zone": "Asia/Manila"},
        "open_ai": {"model": "gpt-test", "max_token": 256},
        "app_description": [{"order_no": 1, "description": "demo app"}],
        "ec2": [{"order_no": 2, "instance_name": "web-1"}],
    }
    data.update(extra)
    return parse_config(data)


def test_partial_failure_still_diagnoses(fake_clients: FakeClients) -> None:
    client = CountingClient()
    result = run(_config(), fake_clients, client, now=NOW, duration=3600)

    assert result.prompt.sections == 1
    assert "demo app" in result.prompt.text
    assert "web-1" not in result.prompt.text
    assert len(result.failures) == 1
    assert result.failures[0].spec.instance_name == "web-1"
    assert result.diagnosis == RESPONSE
    assert result.window.duration_seconds == 3600
    assert result.window.end == NOW

    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["prompt"] == result.prompt.text
    assert call["model"] == "gpt-test"
    assert call["max_tokens"] == 256
    assert call["instruction"] == INSTRUCTION


def test_dry_run_never_diagnoses(fake_clients: FakeClients) -> None:
    client = CountingClient()
    result = run(_config(), fake_clients, client, now=NOW, dry_run=True)
    assert client.calls == []
    assert result.diagnosis is None
    assert result.prompt.sections == 1


def test_print_prompt_emits_text(fake_clients: FakeClients) -> None:
    emitted: list[str] = []
    result = run(
        _config(),
        fake_clients,
        None,
        now=NOW,
        print_prompt=True,
        emit=emitted.append,
    )
    assert emitted == [result.prompt.text]


def test_diagnosis_error_keeps_prompt(fake_clients: FakeClients) -> None:
    emitted: list[str] = []
    with pytest.raises(DiagnosisError) as info:
        run(
            _config(),
            fake_clients,
            FailingClient(),
            now=NOW,
            print_prompt=True,
            emit=emitted.append,
        )
    assert info.value.prompt is not None
    assert "demo app" in info.value.prompt.text
    assert emitted == [info.value.prompt.text]


def test_invalid_range_aborts_before_fetch(fake_clients: FakeClients) -> None:
    client = CountingClient()
    with pytest.raises(InvalidTimeRangeError):
        run(
            _config(),
            fake_clients,
            client,
            now=NOW,
            start=datetime(2024, 1, 2, 12, 0),
        )
    assert fake_clients.calls == []
    assert client.calls == []


def test_no_usable_data(fake_clients: FakeClients) -> None:
    client = CountingClient()
    config = _config(app_description=[])
    with pytest.raises(NoUsableDataError):
        run(config, fake_clients, client, now=NOW)
    assert client.calls == []


def test_explicit_window_and_worker_count(fake_clients: FakeClients) -> None:
    start = datetime(2024, 1, 2, 8, 0)
    end = datetime(2024, 1, 2, 9, 30)
    result = run(
        _config(), fake_clients, None, start=start, end=end, max_workers=1
    )
    # Naive bounds are wall-clock times in the configured zone.
    assert result.window.describe().startswith("2024-01-02 08:00:00 ")
    assert result.window.duration_seconds == 5400


def test_invalid_worker_count_is_rejected(fake_clients: FakeClients) -> None:
    with pytest.raises(ValueError):
        run(_config(), fake_clients, None, now=NOW, max_workers=0)
