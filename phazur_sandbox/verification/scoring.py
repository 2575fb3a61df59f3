"""
Struggle Score - how much help a learner needed, 0 (none) to 100 (a lot).

Three penalties are computed and clamped independently, then summed,
rounded and clamped again:

    hint     (hints_used / max_hints) * 40              in [0, 40]
    time     (time / expected - 1) * 20 when over time   in [0, 40]
    failure  failed execution requirements * 10          >= 0
"""

import math

MAX_HINTS = 3
EXPECTED_DURATION_SECONDS = 120

HINT_WEIGHT = 40
TIME_WEIGHT = 20
MAX_TIME_PENALTY = 40
FAILURE_WEIGHT = 10


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, not 2)."""
    return math.floor(value + 0.5)


def hint_penalty(hints_used: int, max_hints: int = MAX_HINTS) -> float:
    if max_hints <= 0:
        return 0.0
    return min(HINT_WEIGHT, max(0.0, hints_used / max_hints * HINT_WEIGHT))


def time_penalty(
    time_to_complete: float, expected_duration: float = EXPECTED_DURATION_SECONDS
) -> float:
    if expected_duration <= 0:
        return 0.0
    ratio = time_to_complete / expected_duration
    if ratio <= 1:
        return 0.0
    return min(MAX_TIME_PENALTY, (ratio - 1) * TIME_WEIGHT)


def failure_penalty(failed_requirements: int) -> float:
    return max(0, failed_requirements * FAILURE_WEIGHT)


def calculate_struggle_score(
    hints_used: int,
    time_to_complete: float,
    failed_requirements: int,
    max_hints: int = MAX_HINTS,
    expected_duration: float = EXPECTED_DURATION_SECONDS,
) -> int:
    """
    Compute the struggle score for one attempt.

    Args:
        hints_used: Hints the learner opened
        time_to_complete: Seconds from start to end, measured by the caller
        failed_requirements: Number of failing execution requirement checks
        max_hints: Hints available for the challenge
        expected_duration: Seconds the challenge is expected to take

    Returns:
        Integer score in [0, 100]; lower is better
    """
    raw = (
        hint_penalty(hints_used, max_hints)
        + time_penalty(time_to_complete, expected_duration)
        + failure_penalty(failed_requirements)
    )
    return min(100, max(0, round_half_up(raw)))
