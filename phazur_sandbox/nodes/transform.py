"""
Code action executor.

Learners cannot run arbitrary code; a ``code`` node picks one of a closed
set of named, side-effect-free transforms. Unknown names behave as
``passthrough``.
"""

import json
from collections.abc import Callable
from typing import Any

from phazur_sandbox.graph.context import ExecutionContext, LogEvent
from phazur_sandbox.graph.node import CodeConfig, NodeSpec
from phazur_sandbox.nodes.base import NodeExecutor

DEFAULT_TRANSFORM = "passthrough"


def passthrough(value: Any) -> Any:
    return value


def stringify(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def extract_response(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("response") or value
    return value


def uppercase(value: Any) -> Any:
    # Map inputs only have their "response" text cased; other keys are kept as-is
    if isinstance(value, str):
        return value.upper()
    if isinstance(value, dict) and isinstance(value.get("response"), str):
        return {**value, "response": value["response"].upper()}
    return value


def lowercase(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value


TRANSFORMS: dict[str, Callable[[Any], Any]] = {
    "passthrough": passthrough,
    "stringify": stringify,
    "extract-response": extract_response,
    "uppercase": uppercase,
    "lowercase": lowercase,
}


def apply_transform(name: str, value: Any) -> Any:
    """Apply the named transform, falling back to passthrough."""
    return TRANSFORMS.get(name, passthrough)(value)


class CodeTransformExecutor(NodeExecutor):
    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        config = self.load_config(node, context, CodeConfig)
        name = config.transform or DEFAULT_TRANSFORM

        context.log_event(node.id, LogEvent.START, f"Applying transform: {name}")
        result = apply_transform(name, input_data)
        context.log_event(node.id, LogEvent.SUCCESS, "Transform applied")
        return result
