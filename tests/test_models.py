import pytest
from pydantic import ValidationError

from study_focus.core.config import ConsistencyConfig, FatigueWeights, ScoringConfig
from study_focus.core.models import DailyRollup, SessionMode, SessionSubmission


def test_submission_normalisation():
    s = SessionSubmission(
        mode=" Timer ",
        goal="  Coding ",
        planned_min=-5,
        actual_min=20,
        pause_count=-3,
        self_rating=0,
        self_on_task=" Somewhat",
    )
    assert s.mode == SessionMode.TIMER
    assert s.goal == "coding"
    assert s.planned_min == 0
    assert s.pause_count == 0
    assert s.self_rating == 3
    assert s.self_on_task == "somewhat"


def test_unknown_mode_becomes_stopwatch():
    assert SessionSubmission(mode="pomodoro", actual_min=10).mode == SessionMode.STOPWATCH
    assert SessionSubmission(mode="", actual_min=10).mode == SessionMode.STOPWATCH


def test_blank_goal_is_unspecified():
    assert SessionSubmission(goal="   ", actual_min=10).goal == "unspecified"
    assert SessionSubmission(goal=None, actual_min=10).goal == "unspecified"


def test_rating_clamped_to_five():
    assert SessionSubmission(actual_min=10, self_rating=12).self_rating == 5


@pytest.mark.parametrize("actual", [0, -10])
def test_non_positive_duration_rejected(actual):
    with pytest.raises(ValidationError, match="actual_min must be greater than 0"):
        SessionSubmission(actual_min=actual)


def test_rollup_rejects_negative_inputs():
    with pytest.raises(ValidationError):
        DailyRollup(total_study_hours=-1, break_frequency=0, focus_stability=50)
    with pytest.raises(ValidationError):
        DailyRollup(total_study_hours=1, break_frequency=0, focus_stability=101)


def test_config_defaults():
    cfg = ScoringConfig()
    assert cfg.fatigue == FatigueWeights(study_hours=0.4, break_frequency=-0.3, focus_volatility=0.3)
    assert cfg.consistency == ConsistencyConfig(history_limit=20, lookback_days=14, target_days=10)
    assert cfg.consistency.no_history_score == 0.3
    assert cfg.consistency.no_recent_score == 0.4


def test_config_is_frozen():
    with pytest.raises(ValidationError):
        FatigueWeights().study_hours = 1.0
