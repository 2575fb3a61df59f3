"""
Call contracts for the hosting application.

The application's routes marshal JSON into these two functions and send
their return values back unchanged:

- ``run_workflow``: run a learner graph, returning the Execution Result JSON
- ``verify_attempt``: verify a sandbox attempt, returning the Verification
  Result JSON
"""

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from phazur_sandbox.errors import VerificationInputError
from phazur_sandbox.graph.executor import WorkflowExecutor
from phazur_sandbox.observability import clear_trace_context
from phazur_sandbox.schemas.sandbox import VerifyRequest
from phazur_sandbox.verification.engine import VerificationEngine
from phazur_sandbox.verification.scoring import round_half_up

logger = logging.getLogger(__name__)


async def run_workflow(
    payload: dict[str, Any] | list[Any] | None,
    executor: WorkflowExecutor | None = None,
) -> dict[str, Any]:
    """
    Execute a workflow payload.

    Args:
        payload: ``{"workflow": [...]}`` or a bare list of nodes
        executor: Executor to use; one is built from the sandbox
            configuration when omitted

    Returns:
        ``{success, outputs, logs, finalOutput?, error?}``. Missing, empty or
        malformed workflows come back as a failed result; nothing is raised.
    """
    executor = executor or WorkflowExecutor.from_config()
    try:
        result = await executor.execute(payload)
    finally:
        clear_trace_context()
    return result.to_dict()


def seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from ``start`` to ``end``, halves rounded up. Naive times count as UTC."""
    if start.tzinfo is None:
        start = start.replace(tzinfo=UTC)
    if end.tzinfo is None:
        end = end.replace(tzinfo=UTC)
    return round_half_up((end - start).total_seconds())


def parse_verify_request(payload: Any) -> VerifyRequest:
    """
    Validate a verification payload.

    Raises:
        VerificationInputError: if required fields are missing or mistyped
    """
    if not isinstance(payload, dict):
        raise VerificationInputError("verification payload must be an object")
    try:
        request = VerifyRequest.model_validate(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise VerificationInputError(f"invalid verification payload: {problems}") from e
    return request


def verify_attempt(
    payload: dict[str, Any],
    engine: VerificationEngine | None = None,
) -> dict[str, Any]:
    """
    Verify a sandbox attempt.

    Args:
        payload: ``{akuId, sandboxState, hintsUsed, startTime, endTime, criteria?}``
            with ISO-8601 start and end times
        engine: Engine to use; a default one when omitted

    Returns:
        The Verification Result as camelCase JSON

    Raises:
        VerificationInputError: if the payload is malformed
    """
    request = parse_verify_request(payload)
    engine = engine or VerificationEngine()
    result = engine.verify(
        request.aku_id,
        request.sandbox_state,
        hints_used=request.hints_used,
        time_to_complete=seconds_between(request.start_time, request.end_time),
        criteria=request.criteria,
    )
    logger.debug(f"Verified {request.aku_id}: passed={result.passed}")
    return result.to_dict()
