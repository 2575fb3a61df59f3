"""Certificate tiers and the credential metadata handed to the minting service."""

from enum import StrEnum
from typing import Any

from phazur_sandbox.schemas.sandbox import VerificationResult


class CertificateTier(StrEnum):
    ELITE = "ELITE"
    ADVANCED = "ADVANCED"
    PROFICIENT = "PROFICIENT"
    COMPETENT = "COMPETENT"
    FOUNDATIONAL = "FOUNDATIONAL"


# Upper struggle-score bound (inclusive) for each tier, best first
TIER_CEILINGS: list[tuple[int, CertificateTier]] = [
    (20, CertificateTier.ELITE),
    (40, CertificateTier.ADVANCED),
    (60, CertificateTier.PROFICIENT),
    (80, CertificateTier.COMPETENT),
]


def certificate_tier(struggle_score: int) -> CertificateTier:
    """Map a struggle score to a certificate tier."""
    for ceiling, tier in TIER_CEILINGS:
        if struggle_score <= ceiling:
            return tier
    return CertificateTier.FOUNDATIONAL


def build_credential_metadata(
    result: VerificationResult,
    mastery_path: str,
    completed_akus: list[str],
) -> dict[str, Any]:
    """
    Build the token metadata document for a completed mastery path.

    The ``verificationSignature`` is left empty; the signing service fills it.
    """
    tier = certificate_tier(result.struggle_score)
    verified_at = result.timestamp
    return {
        "name": f"Phazur Mastery: {mastery_path}",
        "description": (
            f"Verified completion of the {mastery_path} mastery path on Phazur AI Academy. "
            "This Soulbound Token certifies hands-on competency in AI workflow deployment."
        ),
        "image": f"ipfs://phazur-certificates/{tier.lower()}-badge.png",
        "attributes": [
            {"trait_type": "Mastery Path", "value": mastery_path},
            {"trait_type": "Completion Tier", "value": str(tier)},
            {"trait_type": "Struggle Score", "value": result.struggle_score},
            {"trait_type": "Hints Used", "value": result.hints_used},
            {"trait_type": "Time to Complete", "value": f"{result.time_to_complete}s"},
            {"trait_type": "AKUs Completed", "value": len(completed_akus)},
            {"trait_type": "Verification Date", "value": verified_at.isoformat()},
        ],
        "phazur": {
            "masteryPath": mastery_path,
            "akusCompleted": list(completed_akus),
            "struggleScore": result.struggle_score,
            "deploymentTimestamp": int(verified_at.timestamp() * 1000),
            "workflowHash": result.workflow_snapshot,
            "verificationSignature": "",
        },
    }
