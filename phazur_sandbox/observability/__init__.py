"""
Observability: structured logging with automatic run context.

- ContextVar-based propagation of run_id / node_id
- JSON output for production, human-readable output for development
"""

from phazur_sandbox.observability.logging import (
    clear_trace_context,
    configure_logging,
    get_trace_context,
    set_trace_context,
)

__all__ = [
    "configure_logging",
    "get_trace_context",
    "set_trace_context",
    "clear_trace_context",
]
