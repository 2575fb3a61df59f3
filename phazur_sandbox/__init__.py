"""
Phazur Sandbox - Workflow execution and verification for the learning sandbox.

Learners build small automation graphs (a trigger, some actions, a branch, an
output) in the editor. This package runs those graphs and verifies attempts.

Main components:
- WorkflowGraph / NodeSpec: the graph model
- WorkflowExecutor: walks a graph from its trigger and records an execution log
- VerificationEngine: decides pass/fail and computes the struggle score
- run_workflow / verify_attempt: JSON-in, JSON-out entry points
"""

from phazur_sandbox.api import run_workflow, verify_attempt
from phazur_sandbox.errors import (
    ExecutionError,
    NodeExecutionError,
    ProviderError,
    SandboxError,
    VerificationInputError,
    WorkflowValidationError,
)
from phazur_sandbox.graph import (
    BranchMode,
    ExecutionContext,
    ExecutionResult,
    ExecutorConfig,
    LogEntry,
    LogEvent,
    NodeKind,
    NodeSpec,
    WorkflowExecutor,
    WorkflowGraph,
)
from phazur_sandbox.llm import LiteLLMProvider, LLMProvider, MockLLMProvider
from phazur_sandbox.schemas import SandboxState, SandboxStatus, VerificationResult
from phazur_sandbox.verification import (
    VerificationEngine,
    calculate_struggle_score,
    certificate_tier,
)

__all__ = [
    # Graph
    "NodeKind",
    "NodeSpec",
    "WorkflowGraph",
    "ExecutionContext",
    "LogEntry",
    "LogEvent",
    # Execution
    "WorkflowExecutor",
    "ExecutorConfig",
    "BranchMode",
    "ExecutionResult",
    # LLM
    "LLMProvider",
    "LiteLLMProvider",
    "MockLLMProvider",
    # Verification
    "SandboxState",
    "SandboxStatus",
    "VerificationResult",
    "VerificationEngine",
    "calculate_struggle_score",
    "certificate_tier",
    # Entry points
    "run_workflow",
    "verify_attempt",
    # Errors
    "SandboxError",
    "WorkflowValidationError",
    "ExecutionError",
    "NodeExecutionError",
    "ProviderError",
    "VerificationInputError",
]

__version__ = "0.1.0"
