"""
Executor dispatch table.

Executors are keyed by ``(NodeKind, service)``. Output nodes use one
executor whatever their service. Each remaining kind has a single fallback
executor for services without a dedicated entry; that fallback is the only
place an unknown service is handled.
"""

from dataclasses import dataclass

from phazur_sandbox.config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEMO_HTTP_URL,
)
from phazur_sandbox.graph.node import NodeKind, NodeSpec, Service, variant_key
from phazur_sandbox.llm.provider import LLMProvider
from phazur_sandbox.net.http_client import HttpFetcher, HttpxFetcher
from phazur_sandbox.nodes.base import NodeExecutor, PassthroughExecutor
from phazur_sandbox.nodes.http_action import HttpActionExecutor
from phazur_sandbox.nodes.if_else import IfElseExecutor
from phazur_sandbox.nodes.llm_action import OpenAIActionExecutor
from phazur_sandbox.nodes.output import OutputExecutor
from phazur_sandbox.nodes.transform import CodeTransformExecutor
from phazur_sandbox.nodes.trigger import (
    GenericTriggerExecutor,
    ManualTriggerExecutor,
    WebhookTriggerExecutor,
)


@dataclass
class NodeServices:
    """External capabilities handed to the I/O executors."""

    llm: LLMProvider | None = None
    http: HttpFetcher | None = None
    llm_timeout_seconds: float | None = 60.0
    http_timeout_seconds: float = 30.0
    default_model: str = DEFAULT_MODEL
    default_max_tokens: int = DEFAULT_MAX_TOKENS
    default_temperature: float = DEFAULT_TEMPERATURE
    demo_url: str = DEMO_HTTP_URL


class ExecutorRegistry:
    """Resolves the executor for a node."""

    def __init__(
        self,
        executors: dict[tuple[str, str], NodeExecutor] | None = None,
        fallbacks: dict[NodeKind, NodeExecutor] | None = None,
    ):
        self._executors = dict(executors or {})
        self._fallbacks = dict(fallbacks or {})

    def register(self, kind: NodeKind, service: str, executor: NodeExecutor) -> None:
        self._executors[variant_key(kind, service)] = executor

    def register_fallback(self, kind: NodeKind, executor: NodeExecutor) -> None:
        self._fallbacks[kind] = executor

    def has_dedicated(self, node: NodeSpec) -> bool:
        return node.variant in self._executors

    def resolve(self, node: NodeSpec) -> NodeExecutor:
        executor = self._executors.get(node.variant)
        if executor is not None:
            return executor
        fallback = self._fallbacks.get(node.kind)
        if fallback is None:
            raise LookupError(f"No executor for node kind '{node.kind}'")
        return fallback

    @classmethod
    def default(cls, services: NodeServices | None = None) -> "ExecutorRegistry":
        """Registry with every built-in executor, wired to ``services``."""
        services = services or NodeServices()
        http = services.http or HttpxFetcher(timeout=services.http_timeout_seconds)
        passthrough = PassthroughExecutor()
        return cls(
            executors={
                variant_key(NodeKind.TRIGGER, Service.MANUAL): ManualTriggerExecutor(),
                variant_key(NodeKind.TRIGGER, Service.WEBHOOK): WebhookTriggerExecutor(),
                variant_key(NodeKind.ACTION, Service.OPENAI): OpenAIActionExecutor(
                    services.llm,
                    timeout_seconds=services.llm_timeout_seconds,
                    default_model=services.default_model,
                    default_max_tokens=services.default_max_tokens,
                    default_temperature=services.default_temperature,
                ),
                variant_key(NodeKind.ACTION, Service.HTTP): HttpActionExecutor(
                    http, demo_url=services.demo_url
                ),
                variant_key(NodeKind.ACTION, Service.CODE): CodeTransformExecutor(),
                variant_key(NodeKind.LOGIC, Service.IF_ELSE): IfElseExecutor(),
            },
            fallbacks={
                NodeKind.TRIGGER: GenericTriggerExecutor(),
                NodeKind.ACTION: passthrough,
                NodeKind.LOGIC: passthrough,
                NodeKind.OUTPUT: OutputExecutor(),
            },
        )
