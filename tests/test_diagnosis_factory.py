import pytest

from autodiag.diagnosis import MockDiagnosisClient, OpenAI, create_client
from autodiag.diagnosis.mock import RESPONSE


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("AUTODIAG_BACKEND", raising=False)


def test_defaults_to_mock() -> None:
    assert isinstance(create_client(), MockDiagnosisClient)


def test_uses_env_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "k")
    assert isinstance(create_client(), OpenAI)


def test_uses_config_key() -> None:
    client = create_client(api_key="from-config")
    assert isinstance(client, OpenAI)
    assert client.api_key == "from-config"


def test_backend_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTODIAG_BACKEND", "mock")
    assert isinstance(create_client(api_key="k"), MockDiagnosisClient)
    assert isinstance(create_client("openai", api_key="k"), OpenAI)


def test_mock_is_canned() -> None:
    client = MockDiagnosisClient()
    out = client.diagnose("anything", model="m", max_tokens=1, instruction="i")
    assert out == RESPONSE
