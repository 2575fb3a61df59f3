"""
Structured logging with automatic run context propagation.

The workflow executor sets ``run_id`` once per run and ``node_id`` before each
node executor is dispatched. Every ``logger.info()`` call made underneath,
including inside the LLM and HTTP capabilities, picks the context up from a
ContextVar without any IDs being passed around.

    WorkflowExecutor.execute()  -> set_trace_context(run_id=..., workflow_size=...)
        WorkflowExecutor._run_node() -> set_trace_context(node_id=...)
            executor code -> logger.info("...")  # carries run_id and node_id
"""

import json
import logging
import os
import re
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

trace_context: ContextVar[dict[str, Any] | None] = ContextVar("trace_context", default=None)

ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

# Extra record attributes copied into JSON output when present
_EXTRA_FIELDS = ("event", "latency_ms", "node_id", "model", "status_code")


def strip_ansi_codes(text: str) -> str:
    """Remove ANSI escape codes from text for clean JSON logging."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


class StructuredFormatter(logging.Formatter):
    """JSON formatter: one machine-parseable object per record, trace context merged in."""

    def format(self, record: logging.LogRecord) -> str:
        context = trace_context.get() or {}

        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": strip_ansi_codes(record.getMessage()),
        }
        log_entry.update(context)

        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = strip_ansi_codes(value) if isinstance(value, str) else value

        if record.exc_info:
            log_entry["exception"] = strip_ansi_codes(self.formatException(record.exc_info))

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Colourised formatter for local development, prefixed with the run context."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        context = trace_context.get() or {}
        prefix_parts = []
        run_id = context.get("run_id", "")
        if run_id:
            prefix_parts.append(f"run:{run_id[:8]}")
        node_id = context.get("node_id", "")
        if node_id:
            prefix_parts.append(f"node:{node_id}")
        context_prefix = f"[{' | '.join(prefix_parts)}] " if prefix_parts else ""

        color = self.COLORS.get(record.levelname, "")
        level = f"{record.levelname:<8}"

        event = ""
        record_event = getattr(record, "event", None)
        if record_event is not None:
            event = f" [{record_event}]"

        return f"{color}[{level}]{self.RESET} {context_prefix}{record.getMessage()}{event}"


def configure_logging(
    level: str = "INFO",
    format: str = "auto",  # "json", "human", or "auto"
) -> None:
    """
    Configure logging for the hosting application.

    Call once at startup (or from a test fixture).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "json" for production, "human" for development, or "auto" to
            pick JSON when LOG_FORMAT=json or ENV=production
    """
    if format == "auto":
        log_format_env = os.getenv("LOG_FORMAT", "").lower()
        env = os.getenv("ENV", "development").lower()
        format = "json" if log_format_env == "json" or env == "production" else "human"

    formatter: logging.Formatter
    if format == "json":
        formatter = StructuredFormatter()
        _disable_third_party_colors()
    else:
        formatter = HumanReadableFormatter()

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    if format == "json":
        # Route chatty client libraries through the root JSON handler
        for logger_name in ("LiteLLM", "httpcore", "httpx"):
            third_party = logging.getLogger(logger_name)
            third_party.handlers.clear()
            third_party.propagate = True


def _disable_third_party_colors() -> None:
    os.environ["NO_COLOR"] = "1"
    os.environ["FORCE_COLOR"] = "0"
    import litellm

    litellm.suppress_debug_info = True


def set_trace_context(**kwargs: Any) -> None:
    """Merge fields (run_id, node_id, ...) into the current trace context."""
    current = trace_context.get() or {}
    trace_context.set({**current, **kwargs})


def get_trace_context() -> dict:
    """Return a copy of the current trace context (empty dict if unset)."""
    context = trace_context.get() or {}
    return context.copy()


def clear_trace_context() -> None:
    """Drop all trace context fields."""
    trace_context.set(None)
