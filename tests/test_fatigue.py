import math
from datetime import date

import pytest

from study_focus.core.config import FatigueWeights
from study_focus.core.fatigue import (
    aggregate_fatigue,
    compute_burnout_probability,
    compute_fatigue_index,
    rank_by_risk,
)
from study_focus.core.models import DailyRollup, FatigueScore

DAY = date(2026, 3, 15)


def _score(user_id: str, day: date, burnout: float) -> FatigueScore:
    return FatigueScore(
        user_id=user_id,
        day=day,
        total_study_hours=1.0,
        break_frequency=1.0,
        focus_stability=50.0,
        fatigue_index=50.0,
        burnout_probability=burnout,
    )


class TestFatigueIndex:
    def test_rested_day(self):
        assert compute_fatigue_index(0, 0, 100) == 0.0
        assert compute_burnout_probability(0.0) == 0.7
        assert compute_burnout_probability(0.0) == round(100 / (1 + math.exp(5)), 1)

    def test_midpoint_is_fifty(self):
        assert compute_burnout_probability(50.0) == 50.0

    def test_mixed_inputs(self):
        # 0.4 × 2 + 0.3 × 1 + 0.3 × 0.4 = 1.22 -> 30.5
        assert compute_fatigue_index(2, 1, 60) == pytest.approx(30.5)

    def test_more_breaks_raise_fatigue(self):
        # Regression pin: break weight is negative and subtracted.
        assert compute_fatigue_index(0, 2, 100) == pytest.approx(15.0)
        assert compute_fatigue_index(1, 4, 80) > compute_fatigue_index(1, 0, 80)

    def test_stability_above_100_has_no_volatility(self):
        assert compute_fatigue_index(0, 0, 150) == 0.0

    def test_clamped_to_100(self):
        assert compute_fatigue_index(100, 0, 0) == 100.0
        assert compute_burnout_probability(100.0) == 99.3

    @pytest.mark.parametrize("hours", [0, 0.5, 3, 12, 1000])
    @pytest.mark.parametrize("breaks", [0, 1, 10])
    @pytest.mark.parametrize("stability", [0, 50, 100])
    def test_bounds(self, hours, breaks, stability):
        index = compute_fatigue_index(hours, breaks, stability)
        burnout = compute_burnout_probability(index)
        assert 0.0 <= index <= 100.0
        assert 0.0 <= burnout <= 100.0
        assert burnout == round(burnout, 1)

    def test_custom_weights(self):
        weights = FatigueWeights(study_hours=1.0, break_frequency=0.5, focus_volatility=0.0, index_scale=10.0)
        # (1 × 3 - 0.5 × 2) × 10
        assert compute_fatigue_index(3, 2, 0, weights) == pytest.approx(20.0)
        assert compute_burnout_probability(20.0, FatigueWeights(logistic_midpoint=20.0)) == 50.0


def test_aggregate_fatigue_builds_score():
    rollup = DailyRollup(total_study_hours=2, break_frequency=1, focus_stability=60)
    score = aggregate_fatigue("u1", DAY, rollup)
    assert score.user_id == "u1"
    assert score.day == DAY
    assert score.total_study_hours == 2
    assert score.fatigue_index == pytest.approx(30.5)
    assert score.burnout_probability == pytest.approx(12.5, abs=0.05)


class TestRankByRisk:
    def test_latest_per_user_then_burnout_desc(self):
        scores = [
            _score("a", date(2026, 3, 14), 90.0),
            _score("a", date(2026, 3, 15), 10.0),
            _score("b", date(2026, 3, 10), 50.0),
            _score("c", date(2026, 3, 15), 70.0),
        ]
        ranked = rank_by_risk(scores)
        assert [s.user_id for s in ranked] == ["c", "b", "a"]
        assert ranked[-1].burnout_probability == 10.0

    def test_limit_and_distinct_users(self):
        scores = [_score(f"u{i}", DAY, float(i)) for i in range(15)]
        scores += [_score("u3", date(2026, 3, 1), 99.0)]
        ranked = rank_by_risk(scores, limit=10)
        assert len(ranked) == 10
        assert len({s.user_id for s in ranked}) == 10
        probs = [s.burnout_probability for s in ranked]
        assert probs == sorted(probs, reverse=True)
        assert probs[0] == 14.0

    def test_ties_break_on_user_id(self):
        ranked = rank_by_risk([_score("b", DAY, 40.0), _score("a", DAY, 40.0)])
        assert [s.user_id for s in ranked] == ["a", "b"]

    def test_empty(self):
        assert rank_by_risk([], limit=5) == []


@pytest.mark.parametrize("index, expected", [(0.0, 0.0), (50.0, 50.0), (100.0, 100.0)])
def test_steep_curve_stays_in_range(index, expected):
    weights = FatigueWeights(logistic_steepness=20.0)
    assert compute_burnout_probability(index, weights) == expected


def test_steep_curve_through_aggregate():
    weights = FatigueWeights(logistic_steepness=1000.0)
    rested = aggregate_fatigue("u1", DAY, DailyRollup(total_study_hours=0, break_frequency=0, focus_stability=100), weights)
    assert rested.fatigue_index == 0.0
    assert rested.burnout_probability == 0.0
