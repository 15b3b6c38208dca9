"""Thin async wrapper over LiteLLM chat completions.

Callers pass provider-prefixed model names (``gemini/...``) and get back an
``LLMResponse`` whose content is text, or a validated pydantic model when a
``response_type`` is given. Transient provider failures are retried with
exponential backoff until ``max_attempts`` is used up.
"""

import asyncio
from enum import Enum
from typing import Any, Generic, TypeVar

import litellm
from pydantic import BaseModel, ConfigDict, Field

from daycare.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

litellm.telemetry = False
litellm.drop_params = True


class AIModel(str, Enum):
    """Models the generators may be configured with (LiteLLM provider prefix format)."""

    GEMINI_FLASH_2_0_LITE = "gemini/gemini-2.0-flash-lite"
    GEMINI_FLASH_2_0 = "gemini/gemini-2.0-flash"
    GEMINI_FLASH_2_5 = "gemini/gemini-2.5-flash"
    GEMINI_PRO_2_5 = "gemini/gemini-2.5-pro"


class LLMMessage(BaseModel):
    role: str  # "user" or "assistant"; the system prompt is passed separately
    content: str


class LLMResponse(BaseModel, Generic[T]):
    content: T | str
    usage: dict[str, Any] = Field(default_factory=dict)
    raw_response: Any = Field(None, exclude=True)

    model_config = ConfigDict(arbitrary_types_allowed=True)


def _usage(response: Any) -> dict[str, int]:
    usage = getattr(response, "usage", None)
    return {
        key: getattr(usage, key, 0) or 0
        for key in ("prompt_tokens", "completion_tokens", "total_tokens")
    }


def _request(
    ai_model: AIModel,
    messages: list[LLMMessage],
    system_prompt: str | None,
    temperature: float,
    max_tokens: int,
    api_key: str | None,
    response_type: type[BaseModel] | None,
) -> dict[str, Any]:
    chat = [message.model_dump() for message in messages]
    if system_prompt:
        chat.insert(0, {"role": "system", "content": system_prompt})

    request: dict[str, Any] = {
        "model": ai_model.value,
        "messages": chat,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if api_key:
        request["api_key"] = api_key
    if response_type:
        request["response_format"] = response_type
    return request


async def get_completion(
    ai_model: AIModel,
    messages: list[LLMMessage],
    response_type: type[T] | None = None,
    system_prompt: str | None = None,
    temperature: float = 0.5,
    max_tokens: int = 4096,
    api_key: str | None = None,
    max_attempts: int = 3,
) -> LLMResponse[T]:
    """Run one chat completion.

    Args:
        ai_model: Model to call.
        messages: Conversation so far, oldest first.
        response_type: Pydantic model to parse the answer into, or None for text.
        system_prompt: Prepended as a system message when given.
        temperature: Sampling temperature.
        max_tokens: Upper bound on generated tokens.
        api_key: Provider key; LiteLLM reads its own env variables when None.
        max_attempts: Tries before the last provider error is re-raised.
    """
    request = _request(
        ai_model, messages, system_prompt, temperature, max_tokens, api_key, response_type
    )

    attempt = 1
    while True:
        try:
            logger.info(
                f"LLM request: {len(request['messages'])} messages to {ai_model.value} "
                f"(attempt {attempt}/{max_attempts})"
            )
            response = await litellm.acompletion(**request)
            text = response.choices[0].message.content or ""
            content = response_type.model_validate_json(text) if response_type else text
            return LLMResponse(content=content, usage=_usage(response), raw_response=response)
        except Exception as e:
            if attempt >= max_attempts:
                logger.error(f"LLM call to {ai_model.value} failed after {attempt} attempts: {e}")
                raise
            backoff = 2 ** (attempt - 1)
            logger.warning(f"LLM error, retrying in {backoff}s: {e}")
            await asyncio.sleep(backoff)
            attempt += 1
