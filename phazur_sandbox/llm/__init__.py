"""LLM provider abstraction."""

from phazur_sandbox.llm.litellm import LiteLLMProvider
from phazur_sandbox.llm.mock import MockLLMProvider
from phazur_sandbox.llm.provider import LLMProvider, LLMResponse

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LiteLLMProvider",
    "MockLLMProvider",
]
