"""Tests for the LiteLLM wrapper, with the provider call replaced."""

from types import SimpleNamespace

import litellm
import pytest
from pydantic import BaseModel

from daycare.utils import llm
from daycare.utils.llm import AIModel, LLMMessage, get_completion


class ChildSummary(BaseModel):
    name: str
    months: int


def fake_response(content: str):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=5, total_tokens=17),
    )


class FakeProvider:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def __call__(self, **params):
        self.calls.append(params)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return fake_response(outcome)


@pytest.fixture
def sleeps(monkeypatch):
    waited = []

    async def fake_sleep(seconds):
        waited.append(seconds)

    monkeypatch.setattr(llm.asyncio, "sleep", fake_sleep)
    return waited


async def test_text_completion_with_system_prompt(monkeypatch):
    provider = FakeProvider(["안녕하세요"])
    monkeypatch.setattr(litellm, "acompletion", provider)

    response = await get_completion(
        ai_model=AIModel.GEMINI_FLASH_2_0,
        messages=[LLMMessage(role="user", content="인사해 주세요")],
        system_prompt="보육 전문가",
        api_key="secret",
    )

    assert response.content == "안녕하세요"
    assert response.usage == {"prompt_tokens": 12, "completion_tokens": 5, "total_tokens": 17}
    params = provider.calls[0]
    assert params["model"] == "gemini/gemini-2.0-flash"
    assert params["api_key"] == "secret"
    assert params["messages"][0] == {"role": "system", "content": "보육 전문가"}


async def test_structured_completion(monkeypatch):
    monkeypatch.setattr(litellm, "acompletion", FakeProvider(['{"name": "민준", "months": 54}']))

    response = await get_completion(
        ai_model=AIModel.GEMINI_FLASH_2_0,
        messages=[LLMMessage(role="user", content="요약")],
        response_type=ChildSummary,
    )

    assert response.content == ChildSummary(name="민준", months=54)


async def test_retries_with_backoff(monkeypatch, sleeps):
    provider = FakeProvider([RuntimeError("busy"), RuntimeError("busy"), "ok"])
    monkeypatch.setattr(litellm, "acompletion", provider)

    response = await get_completion(
        ai_model=AIModel.GEMINI_FLASH_2_0,
        messages=[LLMMessage(role="user", content="hi")],
    )

    assert response.content == "ok"
    assert sleeps == [1, 2]
    assert "api_key" not in provider.calls[0]


async def test_single_attempt_raises(monkeypatch, sleeps):
    monkeypatch.setattr(litellm, "acompletion", FakeProvider([RuntimeError("down"), "ok"]))

    with pytest.raises(RuntimeError, match="down"):
        await get_completion(
            ai_model=AIModel.GEMINI_FLASH_2_0,
            messages=[LLMMessage(role="user", content="hi")],
            max_attempts=1,
        )
    assert sleeps == []
