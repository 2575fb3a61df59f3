"""
Learner outcome hook.

After a passed verification the learner's profile is updated: the AKU is
marked complete and its category is recorded as a struggle area or as
mastered, depending on the struggle score. The profile store is an injected
collaborator; this module only decides what to tell it.
"""

import logging
from enum import StrEnum
from typing import Protocol, runtime_checkable

from phazur_sandbox.schemas.sandbox import VerificationResult

logger = logging.getLogger(__name__)

STRUGGLE_AREA_THRESHOLD = 70  # score above this marks a struggle area
MASTERED_THRESHOLD = 30  # score below this marks the concept mastered


@runtime_checkable
class LearnerModel(Protocol):
    """Learner profile store."""

    async def complete_aku(self, learner_id: str, aku_id: str) -> None: ...

    async def add_struggle_area(self, learner_id: str, category: str) -> None: ...

    async def add_mastered_concept(self, learner_id: str, category: str) -> None: ...


class LearnerOutcome(StrEnum):
    """What was recorded for the learner."""

    NOT_PASSED = "not_passed"
    COMPLETED = "completed"  # completed, score in the middle band
    STRUGGLE_AREA = "struggle_area"
    MASTERED = "mastered"


async def apply_learner_outcome(
    learner_model: LearnerModel,
    result: VerificationResult,
    category: str,
) -> LearnerOutcome:
    """
    Record a verification result on the learner's profile.

    Args:
        learner_model: Profile store to update
        result: Verification result for one AKU
        category: Concept category of the AKU

    Returns:
        The outcome that was recorded; failed results record nothing
    """
    if not result.passed:
        return LearnerOutcome.NOT_PASSED

    await learner_model.complete_aku(result.learner_id, result.aku_id)

    if result.struggle_score > STRUGGLE_AREA_THRESHOLD:
        await learner_model.add_struggle_area(result.learner_id, category)
        outcome = LearnerOutcome.STRUGGLE_AREA
    elif result.struggle_score < MASTERED_THRESHOLD:
        await learner_model.add_mastered_concept(result.learner_id, category)
        outcome = LearnerOutcome.MASTERED
    else:
        outcome = LearnerOutcome.COMPLETED

    logger.info(f"Learner {result.learner_id}: {result.aku_id} recorded as {outcome}")
    return outcome
