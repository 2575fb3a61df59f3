"""Tests for certificate tiers, credential metadata and the learner outcome hook."""

from datetime import UTC, datetime

import pytest

from phazur_sandbox.schemas.sandbox import VerificationResult
from phazur_sandbox.verification.certificate import (
    CertificateTier,
    build_credential_metadata,
    certificate_tier,
)
from phazur_sandbox.verification.outcome import LearnerModel, LearnerOutcome, apply_learner_outcome


def make_result(score=10, passed=True):
    return VerificationResult(
        passed=passed,
        aku_id="aku-7",
        learner_id="learner-1",
        timestamp=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        struggle_score=score,
        hints_used=1,
        time_to_complete=95,
        workflow_snapshot="c25hcHNob3Q=",
    )


@pytest.mark.parametrize(
    "score,tier",
    [
        (0, CertificateTier.ELITE),
        (20, CertificateTier.ELITE),
        (21, CertificateTier.ADVANCED),
        (40, CertificateTier.ADVANCED),
        (60, CertificateTier.PROFICIENT),
        (80, CertificateTier.COMPETENT),
        (81, CertificateTier.FOUNDATIONAL),
        (100, CertificateTier.FOUNDATIONAL),
    ],
)
def test_certificate_tier(score, tier):
    assert certificate_tier(score) == tier


def test_credential_metadata():
    metadata = build_credential_metadata(make_result(score=35), "AI Automation", ["a", "b"])

    assert metadata["name"] == "Phazur Mastery: AI Automation"
    assert metadata["image"] == "ipfs://phazur-certificates/advanced-badge.png"
    traits = {a["trait_type"]: a["value"] for a in metadata["attributes"]}
    assert traits["Completion Tier"] == "ADVANCED"
    assert traits["Struggle Score"] == 35
    assert traits["Time to Complete"] == "95s"
    assert traits["AKUs Completed"] == 2
    assert traits["Verification Date"] == "2026-03-01T12:00:00+00:00"
    assert metadata["phazur"]["deploymentTimestamp"] == 1772366400000
    assert metadata["phazur"]["workflowHash"] == "c25hcHNob3Q="
    assert metadata["phazur"]["verificationSignature"] == ""


class RecordingLearnerModel:
    def __init__(self):
        self.calls = []

    async def complete_aku(self, learner_id, aku_id):
        self.calls.append(("complete", learner_id, aku_id))

    async def add_struggle_area(self, learner_id, category):
        self.calls.append(("struggle", learner_id, category))

    async def add_mastered_concept(self, learner_id, category):
        self.calls.append(("mastered", learner_id, category))


def test_recording_model_satisfies_protocol():
    assert isinstance(RecordingLearnerModel(), LearnerModel)


@pytest.mark.parametrize(
    "score,outcome,last_call",
    [
        (10, LearnerOutcome.MASTERED, ("mastered", "learner-1", "prompting")),
        (50, LearnerOutcome.COMPLETED, ("complete", "learner-1", "aku-7")),
        (85, LearnerOutcome.STRUGGLE_AREA, ("struggle", "learner-1", "prompting")),
    ],
)
@pytest.mark.asyncio
async def test_apply_learner_outcome(score, outcome, last_call):
    model = RecordingLearnerModel()

    recorded = await apply_learner_outcome(model, make_result(score=score), "prompting")

    assert recorded == outcome
    assert model.calls[0] == ("complete", "learner-1", "aku-7")
    assert model.calls[-1] == last_call


@pytest.mark.asyncio
async def test_failed_result_records_nothing():
    model = RecordingLearnerModel()

    recorded = await apply_learner_outcome(model, make_result(passed=False), "prompting")

    assert recorded == LearnerOutcome.NOT_PASSED
    assert model.calls == []
