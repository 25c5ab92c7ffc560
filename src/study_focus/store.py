"""Session and score persistence.

SessionStore is the only component that talks to the database. Every method
runs in its own transaction, and any SQLAlchemy failure is logged and
re-raised as StoreError so callers never see driver-specific exceptions.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from .core.consistency import StoreError
from .core.models import FatigueScore, StudySession
from .db import get_session_factory
from .sqlmodels import FatigueScoreRow, StudySessionRow

logger = logging.getLogger(__name__)

__all__ = ["SessionStore", "StoreError"]


class SessionStore:
    """Study sessions and daily fatigue scores backed by SQLite."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self._session_factory = session_factory

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    async def insert_session(self, study_session: StudySession) -> str:
        """Persist a new session and return its id."""
        values = study_session.model_dump(mode="python")
        values["mode"] = study_session.mode.value
        try:
            async with self.session_factory() as session:
                session.add(StudySessionRow(**values))
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to insert session for user %s: %s", study_session.user_id, exc, exc_info=True)
            raise StoreError("could not save study session") from exc
        return study_session.id

    async def recent_sessions(self, user_id: str, limit: int) -> list[StudySession]:
        """The user's sessions, most recently created first."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(StudySessionRow)
                    .where(StudySessionRow.user_id == user_id)
                    .order_by(StudySessionRow.created_at.desc(), StudySessionRow.started_at.desc())
                    .limit(limit)
                )
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to read sessions for user %s: %s", user_id, exc, exc_info=True)
            raise StoreError("could not read study sessions") from exc
        return [StudySession.model_validate(r) for r in rows]

    async def upsert_daily_score(self, score: FatigueScore) -> FatigueScore:
        """Insert or overwrite the score for (user, day) in one statement."""
        values = score.model_dump(mode="python")
        stmt = sqlite_insert(FatigueScoreRow).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[FatigueScoreRow.user_id, FatigueScoreRow.day],
            set_={
                "total_study_hours": stmt.excluded.total_study_hours,
                "break_frequency": stmt.excluded.break_frequency,
                "focus_stability": stmt.excluded.focus_stability,
                "fatigue_index": stmt.excluded.fatigue_index,
                "burnout_probability": stmt.excluded.burnout_probability,
                "created_at": stmt.excluded.created_at,
            },
        )
        try:
            async with self.session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to upsert fatigue score for user %s on %s: %s", score.user_id, score.day, exc, exc_info=True)
            raise StoreError("could not save fatigue score") from exc
        return score

    async def fatigue_scores_for_user(self, user_id: str, limit: int) -> list[FatigueScore]:
        """The user's daily scores, newest day first."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(FatigueScoreRow)
                    .where(FatigueScoreRow.user_id == user_id)
                    .order_by(FatigueScoreRow.day.desc())
                    .limit(limit)
                )
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to read fatigue scores for user %s: %s", user_id, exc, exc_info=True)
            raise StoreError("could not read fatigue scores") from exc
        return [FatigueScore.model_validate(r) for r in rows]

    async def latest_score_per_user(self, limit: int) -> list[FatigueScore]:
        """Each user's most recent score, highest burnout probability first."""
        ranked = select(
            FatigueScoreRow,
            func.row_number()
            .over(partition_by=FatigueScoreRow.user_id, order_by=FatigueScoreRow.day.desc())
            .label("rn"),
        ).subquery()
        latest = aliased(FatigueScoreRow, ranked)
        query = (
            select(latest)
            .where(ranked.c.rn == 1)
            .order_by(latest.burnout_probability.desc(), latest.user_id.asc())
            .limit(limit)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to rank users by burnout risk: %s", exc, exc_info=True)
            raise StoreError("could not read fatigue scores") from exc
        return [FatigueScore.model_validate(r) for r in rows]
