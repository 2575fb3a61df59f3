"""
Node executor contract.

An executor turns ``(node, context, input_data)`` into an output value. Its
only side effects are entries appended to ``context.log``. When it fails it
first logs an ``error`` entry with a readable message, then raises
``NodeExecutionError`` so the walker can abort the run without logging twice.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import ValidationError

from phazur_sandbox.errors import NodeExecutionError
from phazur_sandbox.graph.context import ExecutionContext, LogEvent
from phazur_sandbox.graph.node import NodeConfig, NodeSpec

logger = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound=NodeConfig)


class NodeExecutor(ABC):
    """Runs one node variant."""

    @abstractmethod
    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        """
        Execute ``node`` with the output of its predecessor.

        Args:
            node: The node to run
            context: The run's context; executors append to ``context.log``
            input_data: Output of the predecessor (None for triggers)

        Returns:
            The node's output, recorded by the walker in ``context.outputs``

        Raises:
            NodeExecutionError: after an ``error`` entry has been logged
        """
        pass

    def fail(self, node: NodeSpec, context: ExecutionContext, message: str) -> NodeExecutionError:
        """Log ``message`` as an error for ``node`` and return the exception to raise."""
        context.log_event(node.id, LogEvent.ERROR, message)
        logger.warning(f"Node '{node.id}' failed: {message}", extra={"node_id": node.id})
        return NodeExecutionError(node.id, message)

    def load_config(
        self,
        node: NodeSpec,
        context: ExecutionContext,
        expected: type[ConfigT],
    ) -> ConfigT:
        """Parse the node's config into ``expected``, failing the node on bad values."""
        try:
            return expected.model_validate(node.config)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise self.fail(node, context, f"Invalid config: {problems}") from e


class PassthroughExecutor(NodeExecutor):
    """
    Fallback for action and logic services without a dedicated executor.

    Returns the input unchanged and logs ``"<Kind> <service> simulated"``.
    """

    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        context.log_event(
            node.id,
            LogEvent.SUCCESS,
            f"{node.kind.value.capitalize()} {node.service} simulated",
        )
        return input_data
