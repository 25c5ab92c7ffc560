"""Tunable scoring parameters.

Nothing here is process-wide state: callers build a ScoringConfig (or use
the defaults) and pass it into the scoring and service functions.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FatigueWeights(BaseModel):
    """Weights for the daily fatigue index and the burnout logistic curve."""

    model_config = ConfigDict(frozen=True)

    study_hours: float = Field(0.4, description="Weight on total study hours")
    # Subtracted in the index formula, so a negative weight adds to fatigue.
    break_frequency: float = Field(-0.3, description="Weight on breaks per hour")
    focus_volatility: float = Field(0.3, description="Weight on (100 - focus stability) / 100")
    index_scale: float = Field(25.0, gt=0, description="Multiplier from raw index to the 0-100 scale")
    logistic_steepness: float = Field(0.1, gt=0, description="Slope of the burnout logistic curve")
    logistic_midpoint: float = Field(50.0, description="Fatigue index where burnout probability is 50%")


class ConsistencyConfig(BaseModel):
    """Lookback window for the historical consistency score."""

    model_config = ConfigDict(frozen=True)

    history_limit: int = Field(20, gt=0, description="Most recent sessions to inspect")
    lookback_days: int = Field(14, gt=0, description="Only sessions started within this many days count")
    target_days: int = Field(10, gt=0, description="Distinct active days that earn a full score")
    no_history_score: float = Field(0.3, ge=0.0, le=1.0, description="Score when the user has no sessions or history is unavailable")
    no_recent_score: float = Field(0.4, ge=0.0, le=1.0, description="Score when no session falls inside the lookback window")


class ScoringConfig(BaseModel):
    """Everything the engine needs to score sessions and days."""

    model_config = ConfigDict(frozen=True)

    fatigue: FatigueWeights = Field(default_factory=FatigueWeights)
    consistency: ConsistencyConfig = Field(default_factory=ConsistencyConfig)
