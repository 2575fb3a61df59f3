"""
If/else logic executor.

Evaluates a named condition and returns ``{"result": input, "branch": ...}``.
Choosing the successor to run from the branch is the walker's job.
"""

from typing import Any

from phazur_sandbox.graph.context import ExecutionContext, LogEvent
from phazur_sandbox.graph.node import IfElseConfig, NodeSpec
from phazur_sandbox.nodes.base import NodeExecutor

DEFAULT_CONDITION = "hasResponse"


def evaluate_condition(condition: str, value: Any) -> bool:
    """
    Evaluate ``condition`` against a node input.

    ``"true"`` and ``"false"`` ignore the input. Every other condition needs a
    map input and is false otherwise. Unrecognized names look up that field
    and test it for truthiness.
    """
    if condition == "true":
        return True
    if condition == "false":
        return False
    if not isinstance(value, dict):
        return False
    if condition == "hasResponse":
        return bool(value.get("response"))
    if condition == "hasData":
        return bool(value.get("data"))
    if condition == "isSuccess":
        return value.get("status") == 200 or value.get("success") is True
    return bool(value.get(condition))


class IfElseExecutor(NodeExecutor):
    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        config = self.load_config(node, context, IfElseConfig)
        condition = config.condition or DEFAULT_CONDITION

        passed = evaluate_condition(condition, input_data)
        branch = "true" if passed else "false"
        context.log_event(
            node.id,
            LogEvent.SUCCESS,
            f"Condition '{condition}' evaluated to: {branch}",
            data={"condition": condition, "result": passed},
        )
        return {"result": input_data, "branch": branch}
