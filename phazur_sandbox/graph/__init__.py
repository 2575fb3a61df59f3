"""Workflow graph model and the walker that runs it."""

from phazur_sandbox.graph.context import ExecutionContext, LogEntry, LogEvent
from phazur_sandbox.graph.node import NodeKind, NodeSpec, Service
from phazur_sandbox.graph.workflow import WorkflowGraph
from phazur_sandbox.graph.executor import (
    BranchMode,
    ExecutionResult,
    ExecutorConfig,
    WorkflowExecutor,
)

__all__ = [
    # Model
    "NodeKind",
    "NodeSpec",
    "Service",
    "WorkflowGraph",
    # Run state
    "ExecutionContext",
    "LogEntry",
    "LogEvent",
    # Walker
    "BranchMode",
    "ExecutionResult",
    "ExecutorConfig",
    "WorkflowExecutor",
]
