"""Deterministic provider for tests and offline demos."""

from typing import Any

from phazur_sandbox.errors import ProviderError
from phazur_sandbox.llm.provider import LLMProvider, LLMResponse


class MockLLMProvider(LLMProvider):
    """
    Returns canned responses in order and records every call.

    Args:
        responses: Contents to return, one per call. The last one repeats.
        error: If set, every call raises ProviderError with this message.
    """

    def __init__(self, responses: list[str] | str = "mock response", error: str | None = None):
        self.responses = [responses] if isinstance(responses, str) else list(responses)
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def complete(
        self,
        messages: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> LLMResponse:
        self.calls.append(
            {
                "messages": messages,
                "system": system,
                "model": model,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise ProviderError(self.error)
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        content = self.responses[index] if self.responses else ""
        return LLMResponse(
            content=content,
            model=model or "mock",
            input_tokens=10,
            output_tokens=len(content.split()),
        )

    async def acomplete(
        self,
        messages: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> LLMResponse:
        return self.complete(
            messages,
            system=system,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
        )
