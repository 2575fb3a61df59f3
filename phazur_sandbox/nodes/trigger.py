"""Trigger executors. Triggers ignore their input and start the run."""

from typing import Any

from phazur_sandbox.graph.context import ExecutionContext, LogEvent, utc_now_iso
from phazur_sandbox.graph.node import ManualTriggerConfig, NodeSpec, WebhookTriggerConfig
from phazur_sandbox.nodes.base import NodeExecutor


def default_manual_payload() -> dict[str, Any]:
    return {
        "triggered": True,
        "timestamp": utc_now_iso(),
        "message": "Workflow started",
    }


class ManualTriggerExecutor(NodeExecutor):
    """Returns ``config.inputData`` or the default "workflow started" payload."""

    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        config = self.load_config(node, context, ManualTriggerConfig)
        payload = config.input_data
        if payload is None:
            payload = default_manual_payload()
        context.log_event(node.id, LogEvent.SUCCESS, "Manual trigger activated", data=payload)
        return payload


class WebhookTriggerExecutor(NodeExecutor):
    """
    Simulated webhook: returns ``config.testData`` or an empty webhook payload.

    Nothing is received over the network; real delivery belongs to the host.
    """

    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        config = self.load_config(node, context, WebhookTriggerConfig)
        payload = config.test_data
        if payload is None:
            payload = {"webhook": True, "payload": {}}
        context.log_event(node.id, LogEvent.SUCCESS, "Webhook trigger simulated", data=payload)
        return payload


class GenericTriggerExecutor(NodeExecutor):
    """Fallback for trigger services without a dedicated executor."""

    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        payload = {"triggered": True}
        context.log_event(
            node.id, LogEvent.SUCCESS, f"Trigger {node.service} simulated", data=payload
        )
        return payload
