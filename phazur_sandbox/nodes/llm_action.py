"""
OpenAI action executor.

Renders the node's prompt template against its input, calls the injected
completion capability, and returns ``{response, model, tokens}``.

Template placeholders:
    {{input}}  the whole input (JSON text for maps and lists)
    {{key}}    a top-level key of a map input, stringified
"""

import asyncio
import json
import logging
from typing import Any

from phazur_sandbox.config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, DEFAULT_TEMPERATURE
from phazur_sandbox.graph.context import ExecutionContext, LogEvent
from phazur_sandbox.graph.node import NodeSpec, OpenAIConfig
from phazur_sandbox.llm.provider import LLMProvider
from phazur_sandbox.nodes.base import NodeExecutor

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Say hello and introduce yourself briefly."
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
PREVIEW_LENGTH = 100


def stringify_value(value: Any) -> str:
    """Text form of a value as it appears inside a prompt."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def render_prompt(template: str, input_data: Any) -> str:
    """Substitute ``{{input}}`` and, for map inputs, ``{{key}}`` placeholders."""
    prompt = template.replace("{{input}}", stringify_value(input_data))
    if isinstance(input_data, dict):
        for key, value in input_data.items():
            prompt = prompt.replace(f"{{{{{key}}}}}", stringify_value(value))
    return prompt


def preview_text(text: str, limit: int = PREVIEW_LENGTH) -> str:
    """First ``limit`` characters, followed by ``...`` when the text is longer."""
    return text[:limit] + ("..." if len(text) > limit else "")


class OpenAIActionExecutor(NodeExecutor):
    """
    Calls an LLM for an ``action/openai`` node.

    Args:
        llm: Completion capability. None makes every call fail with a
            "no LLM provider configured" error.
        timeout_seconds: Deadline for one completion call
        default_model: Model used when the node config names none
        default_max_tokens: Token limit used when the node config sets none
        default_temperature: Temperature used when the node config sets none
    """

    def __init__(
        self,
        llm: LLMProvider | None,
        timeout_seconds: float | None = 60.0,
        default_model: str = DEFAULT_MODEL,
        default_max_tokens: int = DEFAULT_MAX_TOKENS,
        default_temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.llm = llm
        self.timeout_seconds = timeout_seconds
        self.default_model = default_model
        self.default_max_tokens = default_max_tokens
        self.default_temperature = default_temperature

    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        config = self.load_config(node, context, OpenAIConfig)

        model = config.model or self.default_model
        system_prompt = config.system_prompt or DEFAULT_SYSTEM_PROMPT
        max_tokens = (
            config.max_tokens if config.max_tokens is not None else self.default_max_tokens
        )
        temperature = (
            config.temperature if config.temperature is not None else self.default_temperature
        )
        prompt = render_prompt(config.prompt or DEFAULT_PROMPT, input_data)

        context.log_event(node.id, LogEvent.START, f"Calling OpenAI {model}...")

        if self.llm is None:
            raise self.fail(node, context, "No LLM provider configured")

        try:
            response = await asyncio.wait_for(
                self.llm.acomplete(
                    messages=[{"role": "user", "content": prompt}],
                    system=system_prompt,
                    model=model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as e:
            raise self.fail(
                node, context, f"OpenAI call timed out after {self.timeout_seconds}s"
            ) from e
        except Exception as e:
            raise self.fail(node, context, str(e) or "OpenAI call failed") from e

        result = response.content or ""
        context.log_event(
            node.id,
            LogEvent.SUCCESS,
            "OpenAI response received",
            data={"preview": preview_text(result)},
        )
        logger.info(
            f"✓ {model} answered ({response.total_tokens} tokens)",
            extra={"node_id": node.id, "model": model},
        )
        return {"response": result, "model": model, "tokens": response.total_tokens}
