"""Pydantic data models, the shared business objects.

The scoring functions, the store, and the server tools all exchange these
models. Ingestion payloads are normalised here so the scoring engine only
ever sees clamped values.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how SQLite stores DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class SessionMode(str, Enum):
    """How the session was timed."""

    TIMER = "timer"
    STOPWATCH = "stopwatch"


class OnTask(str, Enum):
    """Documented answers to "were you on task?". Stored as free text."""

    YES = "yes"
    SOMEWHAT = "somewhat"
    NO = "no"


class SessionSubmission(BaseModel):
    """A study session as reported by the client, before scoring."""

    mode: SessionMode = SessionMode.STOPWATCH
    goal: str = "unspecified"
    planned_min: int = Field(0, description="Planned length, only meaningful for timer sessions")
    actual_min: int = Field(description="Minutes actually studied, must be positive")
    pause_count: int = 0
    self_rating: int = Field(3, description="Self-assessed focus, 1-5")
    self_on_task: str = Field("", description="yes / somewhat / no")

    @field_validator("mode", mode="before")
    @classmethod
    def _normalise_mode(cls, value):
        if isinstance(value, SessionMode):
            return value
        text = str(value or "").strip().lower()
        if text not in (SessionMode.TIMER.value, SessionMode.STOPWATCH.value):
            return SessionMode.STOPWATCH
        return text

    @field_validator("goal", mode="before")
    @classmethod
    def _normalise_goal(cls, value):
        text = str(value or "").strip().lower()
        return text or "unspecified"

    @field_validator("self_on_task", mode="before")
    @classmethod
    def _normalise_on_task(cls, value):
        return str(value or "").strip().lower()

    @field_validator("actual_min")
    @classmethod
    def _require_positive_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("actual_min must be greater than 0")
        return value

    @field_validator("planned_min", "pause_count")
    @classmethod
    def _floor_at_zero(cls, value: int) -> int:
        return max(0, value)

    @field_validator("self_rating")
    @classmethod
    def _clamp_rating(cls, value: int) -> int:
        if value <= 0:
            return 3
        return min(5, value)


class StudySession(BaseModel):
    """One logged, scored work interval. Immutable once created."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user_id: str
    mode: SessionMode
    goal: str
    planned_min: int = 0
    actual_min: int
    pause_count: int = 0
    self_rating: int = 3
    self_on_task: str = ""
    focus_score: int = Field(ge=0, le=100)
    started_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)


class DailyRollup(BaseModel):
    """Aggregated study stats for one user-day, supplied by the rollup caller."""

    total_study_hours: float = Field(ge=0.0)
    break_frequency: float = Field(ge=0.0, description="Breaks per hour")
    focus_stability: float = Field(ge=0.0, le=100.0, description="0-100, lower = more volatile")


class FatigueScore(BaseModel):
    """Fatigue and burnout estimate for one user on one calendar day."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    day: date
    total_study_hours: float
    break_frequency: float
    focus_stability: float
    fatigue_index: float = Field(ge=0.0, le=100.0)
    burnout_probability: float = Field(ge=0.0, le=100.0)
    created_at: datetime = Field(default_factory=utcnow)
