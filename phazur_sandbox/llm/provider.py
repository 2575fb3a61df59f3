"""LLM Provider abstraction for pluggable completion backends."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class LLMResponse:
    """Response from an LLM call."""

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: str = ""
    raw_response: Any = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    """
    Abstract LLM provider - the "AI completion" capability handed to the
    openai action executor.

    Implementations should handle:
    - API authentication
    - Request/response formatting
    - Token counting
    - Error handling (raise ProviderError with the provider's message)
    """

    @abstractmethod
    def complete(
        self,
        messages: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> LLMResponse:
        """
        Generate a completion from the LLM.

        Args:
            messages: Conversation history [{role: "user"|"assistant", content: str}]
            system: System prompt
            model: Model override for this call; None uses the provider default
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature; None uses the provider default

        Returns:
            LLMResponse with content and metadata
        """
        pass

    async def acomplete(
        self,
        messages: list[dict[str, Any]],
        system: str = "",
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> LLMResponse:
        """
        Async variant of ``complete()``.

        Default implementation runs ``complete()`` in a worker thread.
        Subclasses with a native async client SHOULD override.
        """
        return await asyncio.to_thread(
            self.complete,
            messages=messages,
            system=system,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
        )
