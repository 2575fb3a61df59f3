"""
Workflow Executor - Runs learner workflow graphs.

The executor:
1. Takes a WorkflowGraph (or a raw editor payload)
2. Locates the trigger node
3. Walks successors depth-first, running each node at most once
4. Returns an ExecutionResult carrying the full log, even on failure

Runs are strictly sequential: with several successors the walker finishes
one branch before it starts the next.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic_core import to_jsonable_python

from phazur_sandbox.config import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LLM_TIMEOUT_SECONDS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEMO_HTTP_URL,
    RuntimeConfig,
)
from phazur_sandbox.errors import ExecutionError, NodeExecutionError, WorkflowValidationError
from phazur_sandbox.graph.context import SYSTEM_NODE_ID, ExecutionContext, LogEntry, LogEvent
from phazur_sandbox.graph.node import NodeKind, NodeSpec
from phazur_sandbox.graph.workflow import WorkflowGraph
from phazur_sandbox.llm.provider import LLMProvider
from phazur_sandbox.net.http_client import HttpFetcher
from phazur_sandbox.nodes.registry import ExecutorRegistry, NodeServices
from phazur_sandbox.observability import set_trace_context

NO_TRIGGER_MESSAGE = "no trigger node found"
EMPTY_WORKFLOW_MESSAGE = "workflow is empty"


class BranchMode(StrEnum):
    """How the walker continues after an if-else node."""

    LEGACY = "legacy"  # Always follow the first successor, whatever the branch
    STRICT = "strict"  # "true" -> successors[0], "false" -> successors[1]


@dataclass
class ExecutorConfig:
    """Configuration for walker behavior and the I/O executors."""

    branch_mode: BranchMode = BranchMode.LEGACY

    # Reject graphs with unknown (kind, service) pairs instead of simulating them
    strict_services: bool = False

    llm_timeout_seconds: float | None = DEFAULT_LLM_TIMEOUT_SECONDS
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    default_model: str = DEFAULT_MODEL
    default_max_tokens: int = DEFAULT_MAX_TOKENS
    default_temperature: float = DEFAULT_TEMPERATURE
    demo_url: str = DEMO_HTTP_URL


@dataclass
class ExecutionResult:
    """Result of executing a workflow graph."""

    success: bool
    outputs: dict[str, Any] = field(default_factory=dict)
    log: list[LogEntry] = field(default_factory=list)
    final_output: Any = None
    error: str | None = None
    path: list[str] = field(default_factory=list)  # Node IDs in visitation order

    @property
    def steps_executed(self) -> int:
        return len(self.path)

    def to_dict(self) -> dict[str, Any]:
        """Wire form: ``{success, outputs, logs, finalOutput?, error?}``."""
        payload: dict[str, Any] = {
            "success": self.success,
            "outputs": to_jsonable_python(self.outputs, fallback=str),
            "logs": [entry.to_dict() for entry in self.log],
        }
        if self.success:
            payload["finalOutput"] = to_jsonable_python(self.final_output, fallback=str)
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass
class _RunState:
    nodes: dict[str, NodeSpec]
    context: ExecutionContext
    visited: set[str] = field(default_factory=set)
    path: list[str] = field(default_factory=list)
    final_output: Any = None


class WorkflowExecutor:
    """
    Executes workflow graphs.

    Example:
        executor = WorkflowExecutor(llm=LiteLLMProvider(api_key=key))
        result = await executor.execute(WorkflowGraph.from_payload(payload))
        if not result.success:
            print(result.error, result.log[-1].message)
    """

    def __init__(
        self,
        llm: LLMProvider | None = None,
        http: HttpFetcher | None = None,
        config: ExecutorConfig | None = None,
        registry: ExecutorRegistry | None = None,
    ):
        """
        Initialize the executor.

        Args:
            llm: Completion capability for openai action nodes
            http: Fetch capability for http action nodes (httpx by default)
            config: Walker and executor settings
            registry: Custom executor table; built from llm/http when omitted
        """
        self.config = config or ExecutorConfig()
        self.logger = logging.getLogger(__name__)
        self.registry = registry or ExecutorRegistry.default(
            NodeServices(
                llm=llm,
                http=http,
                llm_timeout_seconds=self.config.llm_timeout_seconds,
                http_timeout_seconds=self.config.http_timeout_seconds,
                default_model=self.config.default_model,
                default_max_tokens=self.config.default_max_tokens,
                default_temperature=self.config.default_temperature,
                demo_url=self.config.demo_url,
            )
        )

    @classmethod
    def from_config(cls, runtime_config: RuntimeConfig | None = None) -> "WorkflowExecutor":
        """Build an executor wired to LiteLLM and httpx from the sandbox configuration."""
        from phazur_sandbox.llm.litellm import LiteLLMProvider
        from phazur_sandbox.net.http_client import HttpxFetcher

        rc = runtime_config or RuntimeConfig()
        return cls(
            llm=LiteLLMProvider(model=rc.model, api_key=rc.api_key, api_base=rc.api_base),
            http=HttpxFetcher(timeout=rc.http_timeout_seconds),
            config=ExecutorConfig(
                branch_mode=BranchMode(rc.branch_mode),
                llm_timeout_seconds=rc.llm_timeout_seconds,
                http_timeout_seconds=rc.http_timeout_seconds,
                default_model=rc.model,
                default_max_tokens=rc.max_tokens,
                default_temperature=rc.temperature,
                demo_url=rc.demo_url,
            ),
        )

    async def execute(self, graph: WorkflowGraph | list | dict) -> ExecutionResult:
        """
        Run a graph once, from its trigger to exhaustion.

        Never raises for workflow problems: structural errors (no trigger,
        malformed payload) and node failures both come back as a failed
        ExecutionResult.

        Args:
            graph: A WorkflowGraph, or an editor payload accepted by
                ``WorkflowGraph.from_payload``

        Returns:
            ExecutionResult with outputs, log and final output
        """
        if not isinstance(graph, WorkflowGraph):
            try:
                graph = WorkflowGraph.from_payload(graph)
            except WorkflowValidationError as e:
                return self._structural_failure(str(e))

        run_id = uuid.uuid4().hex
        set_trace_context(run_id=run_id, workflow_size=len(graph.nodes))

        try:
            trigger = self._locate_trigger(graph)
        except ExecutionError as e:
            self.logger.error(f"❌ Run rejected: {e}")
            return self._structural_failure(str(e))

        # First occurrence wins for duplicate ids, matching get_node()
        nodes: dict[str, NodeSpec] = {}
        for node in graph.nodes:
            nodes.setdefault(node.id, node)
        state = _RunState(nodes=nodes, context=ExecutionContext())

        self.logger.info(f"▶ Starting run at trigger '{trigger.id}' ({len(nodes)} nodes)")
        try:
            await self._run_node(trigger.id, None, state)
        except Exception as e:
            message = str(e) or "Workflow execution failed"
            self.logger.error(f"❌ Run failed after {len(state.path)} node(s): {message}")
            return ExecutionResult(
                success=False,
                outputs=state.context.outputs,
                log=state.context.log,
                error=message,
                path=state.path,
            )
        finally:
            set_trace_context(node_id=None)

        self.logger.info(f"✓ Run complete: {' → '.join(state.path)}")
        return ExecutionResult(
            success=True,
            outputs=state.context.outputs,
            log=state.context.log,
            final_output=state.final_output,
            path=state.path,
        )

    def _locate_trigger(self, graph: WorkflowGraph) -> NodeSpec:
        if not graph.nodes:
            raise ExecutionError(EMPTY_WORKFLOW_MESSAGE)

        trigger = graph.get_trigger()
        if trigger is None:
            raise ExecutionError(NO_TRIGGER_MESSAGE)

        if len(graph.trigger_nodes) > 1:
            self.logger.warning(
                f"⚠ Workflow has {len(graph.trigger_nodes)} triggers; running '{trigger.id}'"
            )

        if self.config.strict_services:
            unknown = [n for n in graph.nodes if not self.registry.has_dedicated(n)]
            unknown = [n for n in unknown if n.kind != NodeKind.OUTPUT]
            if unknown:
                names = ", ".join(f"'{n.id}' ({n.kind}/{n.service})" for n in unknown)
                raise ExecutionError(f"unsupported node services: {names}")

        return trigger

    async def _run_node(self, node_id: str, input_data: Any, state: _RunState) -> None:
        if node_id in state.visited:
            return

        node = state.nodes.get(node_id)
        if node is None:
            self.logger.debug(f"Skipping missing successor '{node_id}'")
            return

        state.visited.add(node_id)
        state.path.append(node_id)
        set_trace_context(node_id=node_id)

        executor = self.registry.resolve(node)
        try:
            output = await executor.execute(node, state.context, input_data)
        except NodeExecutionError:
            raise
        except Exception as e:
            # The executor broke its contract; log on its behalf before aborting
            message = str(e) or f"{type(e).__name__} in node '{node_id}'"
            state.context.log_event(node_id, LogEvent.ERROR, message)
            self.logger.exception(f"Unexpected error in node '{node_id}'")
            raise NodeExecutionError(node_id, message) from e

        state.context.record_output(node_id, output)

        if node.kind == NodeKind.OUTPUT:
            state.final_output = output

        if node.is_branching and isinstance(output, dict):
            next_id = self._select_branch(node, output.get("branch"))
            if next_id is not None:
                await self._run_node(next_id, output.get("result"), state)
            return

        for successor in node.successors:
            await self._run_node(successor, output, state)

    def _select_branch(self, node: NodeSpec, branch: Any) -> str | None:
        """Pick the successor to follow after an if-else node."""
        if not node.successors:
            return None
        if self.config.branch_mode == BranchMode.LEGACY:
            return node.successors[0]
        index = 0 if branch == "true" else 1
        return node.successors[index] if index < len(node.successors) else None

    def _structural_failure(self, message: str) -> ExecutionResult:
        context = ExecutionContext()
        context.log_event(SYSTEM_NODE_ID, LogEvent.ERROR, message)
        return ExecutionResult(success=False, log=context.log, error=message)
