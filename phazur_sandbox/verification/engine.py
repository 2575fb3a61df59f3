"""
Verification Engine - Decides whether a learner's sandbox attempt passes.

The engine is a pure function of its inputs: it reads the SandboxState
without mutating it, never measures elapsed time itself (the caller passes
``time_to_complete``) and performs no I/O. Side effects on the learner's
profile live in ``verification.outcome``.
"""

import base64
import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from phazur_sandbox.graph.context import LogEvent
from phazur_sandbox.graph.node import NodeKind
from phazur_sandbox.schemas.sandbox import (
    OutputValidation,
    RequirementCheck,
    SandboxState,
    SandboxStatus,
    VerificationCriteria,
    VerificationResult,
)
from phazur_sandbox.verification.criteria import (
    check_output_rule,
    check_requirement,
    extract_final_output,
)
from phazur_sandbox.verification.scoring import (
    EXPECTED_DURATION_SECONDS,
    MAX_HINTS,
    calculate_struggle_score,
)

logger = logging.getLogger(__name__)

MIN_WORKFLOW_NODES = 2


def create_workflow_snapshot(state: SandboxState, timestamp: datetime) -> str:
    """Base64 of compact, key-sorted JSON ``{workflow, timestamp}``."""
    snapshot = {
        "workflow": [node.model_dump(mode="json") for node in state.workflow],
        "timestamp": timestamp.isoformat(),
    }
    encoded = json.dumps(snapshot, separators=(",", ":"), sort_keys=True, default=str)
    return base64.b64encode(encoded.encode("utf-8")).decode("ascii")


class VerificationEngine:
    """
    Runs the baseline checks, any per-AKU criteria, and the struggle score.

    Example:
        engine = VerificationEngine()
        result = engine.verify("aku-101", state, hints_used=1, time_to_complete=95)
        if result.passed:
            tier = certificate_tier(result.struggle_score)
    """

    def __init__(
        self,
        max_hints: int = MAX_HINTS,
        expected_duration: float = EXPECTED_DURATION_SECONDS,
        clock: Callable[[], datetime] | None = None,
    ):
        self.max_hints = max_hints
        self.expected_duration = expected_duration
        self._clock = clock or (lambda: datetime.now(UTC))

    def verify(
        self,
        aku_id: str,
        sandbox_state: SandboxState,
        hints_used: int,
        time_to_complete: int,
        criteria: VerificationCriteria | None = None,
    ) -> VerificationResult:
        """
        Verify one attempt.

        Args:
            aku_id: The knowledge unit being verified
            sandbox_state: The learner's workspace (read only)
            hints_used: Hints the learner opened
            time_to_complete: Whole seconds from start to end
            criteria: Extra per-AKU checks appended to the baseline checks

        Returns:
            VerificationResult; ``passed`` is False if any check fails
        """
        output_validations = self.validate_outputs(sandbox_state)
        execution_results = self.check_execution(sandbox_state)

        if criteria is not None:
            final_output = extract_final_output(sandbox_state)
            output_validations += [
                check_output_rule(rule, final_output) for rule in criteria.output_validation
            ]
            execution_results += [
                check_requirement(req, sandbox_state.execution_log)
                for req in criteria.execution_requirements
            ]

        passed = all(v.passed for v in output_validations) and all(
            r.passed for r in execution_results
        )
        failed = sum(1 for r in execution_results if not r.passed)
        struggle_score = calculate_struggle_score(
            hints_used,
            time_to_complete,
            failed,
            max_hints=self.max_hints,
            expected_duration=self.expected_duration,
        )

        timestamp = self._clock()
        result = VerificationResult(
            passed=passed,
            aku_id=aku_id,
            learner_id=sandbox_state.learner_id,
            timestamp=timestamp,
            output_validations=output_validations,
            execution_results=execution_results,
            struggle_score=struggle_score,
            hints_used=hints_used,
            time_to_complete=time_to_complete,
            workflow_snapshot=create_workflow_snapshot(sandbox_state, timestamp),
        )

        if passed:
            logger.info(
                f"✓ Verification passed for {aku_id} "
                f"(learner {sandbox_state.learner_id}, struggle {struggle_score})"
            )
        else:
            failing = [v.field for v in output_validations if not v.passed]
            failing += result.failed_requirements
            logger.info(f"✗ Verification failed for {aku_id}: {', '.join(failing)}")
        return result

    def validate_outputs(self, state: SandboxState) -> list[OutputValidation]:
        """Structural checks on the graph that was run."""
        node_count = len(state.workflow)
        has_success = any(e.event == LogEvent.SUCCESS for e in state.execution_log)
        has_output = any(n.kind == NodeKind.OUTPUT for n in state.workflow)
        return [
            OutputValidation(
                field="workflow_nodes",
                passed=node_count >= MIN_WORKFLOW_NODES,
                actual=node_count,
            ),
            OutputValidation(field="execution_success", passed=has_success, actual=has_success),
            OutputValidation(field="output_node", passed=has_output, actual=has_output),
        ]

    def check_execution(self, state: SandboxState) -> list[RequirementCheck]:
        """Behavioral checks on the run."""
        has_errors = any(e.event == LogEvent.ERROR for e in state.execution_log)
        return [
            RequirementCheck(requirement="workflow_executed", passed=bool(state.execution_log)),
            RequirementCheck(requirement="no_errors", passed=not has_errors),
            RequirementCheck(
                requirement="status_complete",
                passed=state.status == SandboxStatus.COMPLETE,
            ),
        ]
