"""LiteLLM-backed provider.

LiteLLM gives one call signature for OpenAI, Anthropic and the rest, so a
workflow's ``model`` string (``gpt-4o-mini``, ``anthropic/claude-haiku-4-5``)
is passed straight through.
"""

import logging
from typing import Any

import litellm

from phazur_sandbox.errors import ProviderError
from phazur_sandbox.llm.provider import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class LiteLLMProvider(LLMProvider):
    """
    Completion provider backed by ``litellm``.

    Example:
        provider = LiteLLMProvider(model="gpt-4o-mini", api_key=os.environ["OPENAI_API_KEY"])
        response = await provider.acomplete([{"role": "user", "content": "hi"}])
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        api_base: str | None = None,
        timeout: float | None = None,
    ):
        self.model = model
        self.api_key = api_key
        self.api_base = api_base
        self.timeout = timeout

    def _build_kwargs(
        self,
        messages: list[dict[str, Any]],
        system: str,
        model: str | None,
        max_tokens: int,
        temperature: float | None,
    ) -> dict[str, Any]:
        full_messages = list(messages)
        if system:
            full_messages.insert(0, {"role": "system", "content": system})

        kwargs: dict[str, Any] = {
            "model": model or self.model,
            "messages": full_messages,
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if self.timeout:
            kwargs["timeout"] = self.timeout
        return kwargs

    def _to_response(self, response: Any, model: str) -> LLMResponse:
        choice = response.choices[0]
        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=choice.message.content or "",
            model=getattr(response, "model", None) or model,
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            stop_reason=getattr(choice, "finish_reason", "") or "",
            raw_response=response,
        )

    def complete(
        self,
        messages: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> LLMResponse:
        kwargs = self._build_kwargs(messages, system, model, max_tokens, temperature)
        try:
            response = litellm.completion(**kwargs)
        except Exception as e:
            logger.warning(f"LiteLLM completion failed for {kwargs['model']}: {e}")
            raise ProviderError(str(e)) from e
        return self._to_response(response, kwargs["model"])

    async def acomplete(
        self,
        messages: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> LLMResponse:
        kwargs = self._build_kwargs(messages, system, model, max_tokens, temperature)
        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as e:
            logger.warning(f"LiteLLM completion failed for {kwargs['model']}: {e}")
            raise ProviderError(str(e)) from e
        return self._to_response(response, kwargs["model"])
