"""Verification of sandbox attempts: checks, struggle score and certificates."""

from phazur_sandbox.verification.certificate import (
    CertificateTier,
    build_credential_metadata,
    certificate_tier,
)
from phazur_sandbox.verification.criteria import (
    check_output_rule,
    check_requirement,
    extract_final_output,
    get_nested_value,
)
from phazur_sandbox.verification.engine import VerificationEngine, create_workflow_snapshot
from phazur_sandbox.verification.outcome import LearnerModel, LearnerOutcome, apply_learner_outcome
from phazur_sandbox.verification.scoring import calculate_struggle_score, round_half_up

__all__ = [
    "VerificationEngine",
    "create_workflow_snapshot",
    "calculate_struggle_score",
    "round_half_up",
    # Criteria
    "check_output_rule",
    "check_requirement",
    "extract_final_output",
    "get_nested_value",
    # Certificates
    "CertificateTier",
    "certificate_tier",
    "build_credential_metadata",
    # Learner profile
    "LearnerModel",
    "LearnerOutcome",
    "apply_learner_outcome",
]
