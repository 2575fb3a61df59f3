"""Error types for the workflow sandbox.

Structural and executor errors are caught by ``WorkflowExecutor`` and turned
into failed ``ExecutionResult`` values; they only escape when a caller drives
an executor or the graph model directly.
"""


class SandboxError(Exception):
    """Base error for all sandbox errors."""


class WorkflowValidationError(SandboxError):
    """A workflow payload could not be parsed into a graph."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ExecutionError(SandboxError):
    """A run could not start (no trigger node, rejected graph)."""


class NodeExecutionError(SandboxError):
    """A node executor failed. The error is already in the execution log."""

    def __init__(self, node_id: str, message: str):
        super().__init__(message)
        self.node_id = node_id


class ProviderError(SandboxError):
    """Error from an LLM provider."""


class VerificationInputError(SandboxError):
    """A verification request payload is malformed."""
