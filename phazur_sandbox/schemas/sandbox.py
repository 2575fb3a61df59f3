"""
Sandbox Schemas - What the verification step reads and produces.

A SandboxState is the learner's workspace as the editor reports it: the
graph they built, the execution log of their last run and the run status.
A VerificationResult is the fully-described verdict on that workspace.
Both travel as camelCase JSON (``learnerId``, ``executionLog``).
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from phazur_sandbox.graph.context import LogEntry
from phazur_sandbox.graph.node import NodeSpec

CAMEL_CASE = {"populate_by_name": True, "alias_generator": to_camel, "extra": "allow"}


class SandboxStatus(StrEnum):
    """Status of the learner's sandbox."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"


class SandboxState(BaseModel):
    """The learner's workspace at the moment they ask for verification."""

    learner_id: str
    session_id: str | None = None
    workflow: list[NodeSpec] = Field(default_factory=list)
    execution_log: list[LogEntry] = Field(default_factory=list)
    status: SandboxStatus = SandboxStatus.IDLE

    model_config = CAMEL_CASE


# ---------------------------------------------------------------------------
# Per-AKU verification criteria
# ---------------------------------------------------------------------------


class OutputRuleType(StrEnum):
    EXISTS = "exists"
    MATCHES = "matches"
    CONTAINS = "contains"
    TYPE_CHECK = "type_check"


class OutputRule(BaseModel):
    """
    A check on one field of the output node's captured value.

    ``field`` is a dot path (``data.title``, ``items.0.id``).
    """

    field: str
    type: OutputRuleType
    expected: Any = None

    model_config = CAMEL_CASE


class RequirementType(StrEnum):
    API_CALLED = "api_called"
    WORKFLOW_DEPLOYED = "workflow_deployed"
    RESPONSE_RECEIVED = "response_received"
    LATENCY_UNDER = "latency_under"


class ExecutionRequirement(BaseModel):
    type: RequirementType
    target: str = ""

    model_config = CAMEL_CASE

    @property
    def label(self) -> str:
        """``type:target``, or just ``type`` when there is no target."""
        return f"{self.type}:{self.target}" if self.target else str(self.type)


class VerificationCriteria(BaseModel):
    """Extra checks an individual AKU adds on top of the baseline checks."""

    output_validation: list[OutputRule] = Field(default_factory=list)
    execution_requirements: list[ExecutionRequirement] = Field(default_factory=list)

    model_config = CAMEL_CASE


# ---------------------------------------------------------------------------
# Verification result
# ---------------------------------------------------------------------------


class OutputValidation(BaseModel):
    """One structural check on the graph or its output."""

    field: str
    passed: bool
    actual: Any = None

    model_config = CAMEL_CASE


class RequirementCheck(BaseModel):
    """One behavioral check on the run."""

    requirement: str
    passed: bool

    model_config = CAMEL_CASE


class VerificationResult(BaseModel):
    """
    The verdict on one verification attempt.

    ``passed`` is false as soon as any output validation or requirement check
    fails; a failed verification is a normal result, not an error.
    """

    passed: bool
    aku_id: str
    learner_id: str
    timestamp: datetime
    output_validations: list[OutputValidation] = Field(default_factory=list)
    execution_results: list[RequirementCheck] = Field(default_factory=list)
    struggle_score: int = Field(ge=0, le=100)
    hints_used: int = 0
    time_to_complete: int = Field(default=0, description="Seconds from start to end")
    workflow_snapshot: str = ""

    model_config = CAMEL_CASE

    @property
    def failed_requirements(self) -> list[str]:
        return [r.requirement for r in self.execution_results if not r.passed]

    def to_dict(self) -> dict[str, Any]:
        """camelCase JSON-compatible form."""
        return self.model_dump(mode="json", by_alias=True)


class VerifyRequest(BaseModel):
    """Payload of a verification attempt."""

    aku_id: str
    sandbox_state: SandboxState
    hints_used: int = Field(default=0, ge=0)
    start_time: datetime
    end_time: datetime
    criteria: VerificationCriteria | None = None

    model_config = CAMEL_CASE
