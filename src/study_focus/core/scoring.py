"""Per-session focus scoring.

A session's FocusScore blends four components, each normalised to [0, 1]:

    FocusScore = 0.4 × completion + 0.2 × stability + 0.2 × self-report + 0.2 × consistency

Completion compares actual minutes against the plan (timer sessions) or a
goal-based baseline. Stability comes from the pause count, self-report from
the user's rating and on-task answer. Consistency needs the user's history
and lives in ``consistency``; everything here is pure.
"""

from __future__ import annotations

import logging
import math

from .models import SessionMode, SessionSubmission

logger = logging.getLogger(__name__)

DEFAULT_BASELINE_MINUTES = 25
COMPLETION_CAP = 1.2

# Goal labels are compared lower-cased with underscores read as spaces.
BASELINE_CATALOG: dict[str, int] = {
    "coding": 45,
    "problem solving": 45,
    "studying": 30,
    "reading": 30,
    "research": 30,
    "revision": 30,
    "writing": 40,
    "content creation": 40,
    "video editing": 40,
    "office work": 20,
    "admin": 20,
}

ON_TASK_MULTIPLIERS: dict[str, float] = {
    "yes": 1.0,
    "y": 1.0,
    "on_task": 1.0,
    "somewhat": 0.7,
    "no": 0.4,
    "n": 0.4,
}
UNKNOWN_ON_TASK_MULTIPLIER = 0.8

COMPONENT_WEIGHTS: dict[str, float] = {
    "completion": 0.4,
    "stability": 0.2,
    "self_report": 0.2,
    "consistency": 0.2,
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def baseline_minutes(goal: str, mode: SessionMode | str = SessionMode.STOPWATCH) -> int:
    """Expected session length for a goal label.

    Unknown goals get the generic 25-minute focus block. ``mode`` is accepted
    for future per-mode defaults but currently does not change the result.
    """
    key = (goal or "").strip().lower().replace("_", " ")
    return BASELINE_CATALOG.get(key, DEFAULT_BASELINE_MINUTES)


def completion_ratio(mode: SessionMode | str, planned_min: int, actual_min: int, baseline: int) -> float:
    """Actual vs. target duration, capped at 120% and normalised to [0, 1]."""
    if actual_min <= 0:
        return 0.0
    if SessionMode(mode) == SessionMode.TIMER and planned_min > 0:
        target = float(planned_min)
    else:
        target = float(baseline)
    if target <= 0:
        target = float(actual_min)
    ratio = _clamp(actual_min / target, 0.0, COMPLETION_CAP)
    return ratio / COMPLETION_CAP


def stability_from_pauses(pause_count: int) -> float:
    """Step score from the number of pauses taken."""
    if pause_count <= 0:
        return 1.0
    if pause_count <= 2:
        return 0.8
    if pause_count <= 4:
        return 0.5
    return 0.3


def self_report_component(self_rating: int, self_on_task: str) -> float:
    """Self rating (1-5) scaled by how on-task the user says they were."""
    rating = int(_clamp(self_rating, 1, 5))
    multiplier = ON_TASK_MULTIPLIERS.get(
        (self_on_task or "").strip().lower(), UNKNOWN_ON_TASK_MULTIPLIER
    )
    return _clamp((rating / 5.0) * multiplier, 0.0, 1.0)


def compose_focus_score(completion: float, stability: float, self_report: float, consistency: float) -> int:
    """Weighted blend of the four components as an integer 0-100."""
    consistency = _clamp(consistency, 0.0, 1.0)
    score = (
        COMPONENT_WEIGHTS["completion"] * completion
        + COMPONENT_WEIGHTS["stability"] * stability
        + COMPONENT_WEIGHTS["self_report"] * self_report
        + COMPONENT_WEIGHTS["consistency"] * consistency
    )
    # Half-up rounding: 62.5 becomes 63.
    return int(math.floor(_clamp(score, 0.0, 1.0) * 100 + 0.5))


def score_session(submission: SessionSubmission, consistency: float) -> int:
    """Compute the FocusScore for a validated submission."""
    baseline = baseline_minutes(submission.goal, submission.mode)
    completion = completion_ratio(
        submission.mode, submission.planned_min, submission.actual_min, baseline
    )
    stability = stability_from_pauses(submission.pause_count)
    self_report = self_report_component(submission.self_rating, submission.self_on_task)
    score = compose_focus_score(completion, stability, self_report, consistency)

    logger.debug(
        "Focus score %d (completion=%.3f stability=%.2f self=%.2f consistency=%.2f)",
        score, completion, stability, self_report, consistency,
    )
    return score
