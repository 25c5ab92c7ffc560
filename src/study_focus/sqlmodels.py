"""SQLAlchemy models for local SQLite storage.

Sessions are append-only: written once at creation, never updated. Fatigue
scores hold one row per (user, day), overwritten in place on each rollup.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .core.models import utcnow


class Base(DeclarativeBase):
    pass


class StudySessionRow(Base):
    """A scored study session."""

    __tablename__ = "study_sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    mode: Mapped[str] = mapped_column(String(20), nullable=False)
    goal: Mapped[str] = mapped_column(String(200), nullable=False)
    planned_min: Mapped[int] = mapped_column(Integer, default=0)
    actual_min: Mapped[int] = mapped_column(Integer, nullable=False)
    pause_count: Mapped[int] = mapped_column(Integer, default=0)
    self_rating: Mapped[int] = mapped_column(Integer, default=3)
    self_on_task: Mapped[str] = mapped_column(String(50), default="")
    focus_score: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_session_user_created", "user_id", "created_at"),
    )


class FatigueScoreRow(Base):
    """Fatigue and burnout for one user on one day."""

    __tablename__ = "fatigue_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    day: Mapped[date] = mapped_column(Date, nullable=False)
    total_study_hours: Mapped[float] = mapped_column(Float, nullable=False)
    break_frequency: Mapped[float] = mapped_column(Float, nullable=False)
    focus_stability: Mapped[float] = mapped_column(Float, nullable=False)
    fatigue_index: Mapped[float] = mapped_column(Float, nullable=False)
    burnout_probability: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "day", name="uq_fatigue_user_day"),
        Index("ix_fatigue_burnout", "burnout_probability"),
    )
