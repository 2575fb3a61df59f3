"""Tests for the LiteLLM provider and the mock provider."""

from types import SimpleNamespace

import litellm
import pytest

from phazur_sandbox.errors import ProviderError
from phazur_sandbox.llm import LiteLLMProvider, MockLLMProvider


def fake_completion(content="Hi!", prompt_tokens=12, completion_tokens=3):
    return SimpleNamespace(
        model="gpt-4o-mini-2024-07-18",
        choices=[
            SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")
        ],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


@pytest.mark.asyncio
async def test_litellm_acomplete_builds_request(monkeypatch):
    captured = {}

    async def acompletion(**kwargs):
        captured.update(kwargs)
        return fake_completion()

    monkeypatch.setattr(litellm, "acompletion", acompletion)
    provider = LiteLLMProvider(model="gpt-4o-mini", api_key="sk-test", timeout=20)

    response = await provider.acomplete(
        [{"role": "user", "content": "hello"}],
        system="Be nice",
        max_tokens=50,
        temperature=0.2,
    )

    assert response.content == "Hi!"
    assert response.total_tokens == 15
    assert response.stop_reason == "stop"
    assert captured["messages"] == [
        {"role": "system", "content": "Be nice"},
        {"role": "user", "content": "hello"},
    ]
    assert captured["model"] == "gpt-4o-mini"
    assert captured["api_key"] == "sk-test"
    assert captured["max_tokens"] == 50
    assert captured["temperature"] == 0.2
    assert captured["timeout"] == 20
    assert "api_base" not in captured


@pytest.mark.asyncio
async def test_litellm_errors_become_provider_errors(monkeypatch):
    async def acompletion(**kwargs):
        raise RuntimeError("AuthenticationError: invalid api key")

    monkeypatch.setattr(litellm, "acompletion", acompletion)

    with pytest.raises(ProviderError, match="invalid api key"):
        await LiteLLMProvider().acomplete([{"role": "user", "content": "hi"}])


def test_litellm_sync_complete_uses_model_override(monkeypatch):
    captured = {}

    def completion(**kwargs):
        captured.update(kwargs)
        return fake_completion(content=None)

    monkeypatch.setattr(litellm, "completion", completion)

    response = LiteLLMProvider().complete([{"role": "user", "content": "hi"}], model="gpt-4o")

    assert captured["model"] == "gpt-4o"
    assert "temperature" not in captured
    assert response.content == ""


def test_mock_provider_replays_responses_in_order():
    mock = MockLLMProvider(responses=["first", "second"])

    contents = [mock.complete([{"role": "user", "content": "x"}]).content for _ in range(3)]

    assert contents == ["first", "second", "second"]
    assert len(mock.calls) == 3


def test_mock_provider_error():
    with pytest.raises(ProviderError, match="down"):
        MockLLMProvider(error="down").complete([])
