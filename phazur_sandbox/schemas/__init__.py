"""Wire models for the verification step."""

from phazur_sandbox.schemas.sandbox import (
    ExecutionRequirement,
    OutputRule,
    OutputRuleType,
    OutputValidation,
    RequirementCheck,
    RequirementType,
    SandboxState,
    SandboxStatus,
    VerificationCriteria,
    VerificationResult,
    VerifyRequest,
)

__all__ = [
    "SandboxState",
    "SandboxStatus",
    "OutputRule",
    "OutputRuleType",
    "ExecutionRequirement",
    "RequirementType",
    "VerificationCriteria",
    "OutputValidation",
    "RequirementCheck",
    "VerificationResult",
    "VerifyRequest",
]
