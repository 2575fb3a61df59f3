"""Output executor: the terminal node whose value becomes the run's final output."""

from typing import Any

from phazur_sandbox.graph.context import ExecutionContext, LogEvent
from phazur_sandbox.graph.node import NodeSpec
from phazur_sandbox.nodes.base import NodeExecutor


def project_output(value: Any) -> Any:
    """Pull the displayable part out of a node output: ``response``, then ``data``."""
    if isinstance(value, dict):
        if value.get("response"):
            return value["response"]
        if value.get("data"):
            return value["data"]
    return value


class OutputExecutor(NodeExecutor):
    """
    Captures the final value.

    The log entry keeps the full, unprojected input for audit; the returned
    value is the projection.
    """

    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        context.log_event(node.id, LogEvent.SUCCESS, "Output captured", data=input_data)
        return project_output(input_data)
