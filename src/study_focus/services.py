"""Ingestion and reporting operations.

These wire the pure scoring engine to the store. Session creation reads the
user's history before inserting the new session; there is no transaction
across the two, so concurrent submissions may see slightly stale history.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from .core.config import FatigueWeights, ScoringConfig
from .core.consistency import historical_consistency
from .core.fatigue import aggregate_fatigue
from .core.models import DailyRollup, FatigueScore, SessionSubmission, StudySession, as_naive_utc, utcnow
from .core.scoring import score_session
from .store import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_LIMIT = 30
DEFAULT_FATIGUE_LIMIT = 14
DEFAULT_RISK_LIMIT = 10


def _limit_or_default(limit: Optional[int], default: int) -> int:
    if limit is None or limit <= 0:
        return default
    return limit


async def create_study_session(
    store: SessionStore,
    user_id: str,
    submission: SessionSubmission,
    config: Optional[ScoringConfig] = None,
    now: Optional[datetime] = None,
) -> StudySession:
    """Score a validated submission and persist it as a new session."""
    config = config or ScoringConfig()
    now = as_naive_utc(now) if now else utcnow()

    consistency = await historical_consistency(store, user_id, config.consistency, now)
    focus_score = score_session(submission, consistency)

    study_session = StudySession(
        user_id=user_id,
        mode=submission.mode,
        goal=submission.goal,
        planned_min=submission.planned_min,
        actual_min=submission.actual_min,
        pause_count=submission.pause_count,
        self_rating=submission.self_rating,
        self_on_task=submission.self_on_task,
        focus_score=focus_score,
        started_at=now,
        created_at=now,
    )
    await store.insert_session(study_session)
    logger.info("Session %s saved for user %s (focus score %d)", study_session.id, user_id, focus_score)
    return study_session


async def record_daily_fatigue(
    store: SessionStore,
    user_id: str,
    day: date,
    rollup: DailyRollup,
    weights: Optional[FatigueWeights] = None,
) -> FatigueScore:
    """Compute the user's fatigue for a day and upsert it."""
    score = aggregate_fatigue(user_id, day, rollup, weights)
    await store.upsert_daily_score(score)
    logger.info(
        "Fatigue for user %s on %s: index %.1f, burnout %.1f%%",
        user_id, day.isoformat(), score.fatigue_index, score.burnout_probability,
    )
    return score


async def list_sessions(store: SessionStore, user_id: str, limit: Optional[int] = None) -> list[StudySession]:
    return await store.recent_sessions(user_id, _limit_or_default(limit, DEFAULT_SESSION_LIMIT))


async def list_fatigue_scores(store: SessionStore, user_id: str, limit: Optional[int] = None) -> list[FatigueScore]:
    return await store.fatigue_scores_for_user(user_id, _limit_or_default(limit, DEFAULT_FATIGUE_LIMIT))


async def high_risk_users(store: SessionStore, limit: Optional[int] = None) -> list[FatigueScore]:
    """Users ranked by their latest burnout probability."""
    return await store.latest_score_per_user(_limit_or_default(limit, DEFAULT_RISK_LIMIT))
