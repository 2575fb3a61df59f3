"""Node executors, one per node variant, and the dispatch registry."""

from phazur_sandbox.nodes.base import NodeExecutor, PassthroughExecutor
from phazur_sandbox.nodes.http_action import HttpActionExecutor
from phazur_sandbox.nodes.if_else import IfElseExecutor, evaluate_condition
from phazur_sandbox.nodes.llm_action import OpenAIActionExecutor, render_prompt
from phazur_sandbox.nodes.output import OutputExecutor
from phazur_sandbox.nodes.registry import ExecutorRegistry, NodeServices
from phazur_sandbox.nodes.transform import TRANSFORMS, CodeTransformExecutor, apply_transform
from phazur_sandbox.nodes.trigger import (
    GenericTriggerExecutor,
    ManualTriggerExecutor,
    WebhookTriggerExecutor,
)

__all__ = [
    "NodeExecutor",
    "PassthroughExecutor",
    "ExecutorRegistry",
    "NodeServices",
    # Triggers
    "ManualTriggerExecutor",
    "WebhookTriggerExecutor",
    "GenericTriggerExecutor",
    # Actions
    "OpenAIActionExecutor",
    "HttpActionExecutor",
    "CodeTransformExecutor",
    "TRANSFORMS",
    "apply_transform",
    "render_prompt",
    # Logic
    "IfElseExecutor",
    "evaluate_condition",
    # Output
    "OutputExecutor",
]
