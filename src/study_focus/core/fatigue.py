"""Daily fatigue and burnout scoring, plus risk ranking.

    FatigueIndex = clamp(25 × (w1 × hours − w2 × breaks/hour + w3 × volatility / 100), 0, 100)
    BurnoutProbability = 100 / (1 + e^(−0.1 × (FatigueIndex − 50)))

with volatility = max(0, 100 − focus stability). The inputs come from an
external daily rollup; this module only turns them into scores.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Iterable, Optional

from .config import FatigueWeights
from .models import DailyRollup, FatigueScore

logger = logging.getLogger(__name__)


def compute_fatigue_index(
    total_study_hours: float,
    break_frequency: float,
    focus_stability: float,
    weights: Optional[FatigueWeights] = None,
) -> float:
    """Weighted fatigue composite scaled to [0, 100].

    The break term is subtracted and its default weight is negative, so more
    breaks per hour currently *raise* the index. Pinned by a regression test
    until the intended direction is confirmed.
    """
    w = weights or FatigueWeights()
    volatility = max(0.0, 100.0 - focus_stability)
    raw = (
        (w.study_hours * total_study_hours)
        - (w.break_frequency * break_frequency)
        + (w.focus_volatility * volatility / 100.0)
    )
    return max(0.0, min(100.0, raw * w.index_scale))


def compute_burnout_probability(fatigue_index: float, weights: Optional[FatigueWeights] = None) -> float:
    """Logistic transform of the fatigue index, rounded to one decimal."""
    w = weights or FatigueWeights()
    x = w.logistic_steepness * (fatigue_index - w.logistic_midpoint)
    # Only ever exponentiate a non-positive value so steep curves can't overflow.
    if x >= 0:
        p = 100.0 / (1.0 + math.exp(-x))
    else:
        e = math.exp(x)
        p = 100.0 * e / (1.0 + e)
    return math.floor(p * 10 + 0.5) / 10


def aggregate_fatigue(
    user_id: str,
    day: date,
    rollup: DailyRollup,
    weights: Optional[FatigueWeights] = None,
) -> FatigueScore:
    """Build the FatigueScore for one user-day from its rollup stats."""
    index = compute_fatigue_index(
        rollup.total_study_hours, rollup.break_frequency, rollup.focus_stability, weights
    )
    burnout = compute_burnout_probability(index, weights)
    return FatigueScore(
        user_id=user_id,
        day=day,
        total_study_hours=rollup.total_study_hours,
        break_frequency=rollup.break_frequency,
        focus_stability=rollup.focus_stability,
        fatigue_index=index,
        burnout_probability=burnout,
    )


def rank_by_risk(scores: Iterable[FatigueScore], limit: int = 10) -> list[FatigueScore]:
    """Latest score per user, highest burnout probability first.

    Ties break on user_id so the order is deterministic.
    """
    latest: dict[str, FatigueScore] = {}
    for s in scores:
        current = latest.get(s.user_id)
        if current is None or s.day > current.day:
            latest[s.user_id] = s

    ranked = sorted(latest.values(), key=lambda s: (-s.burnout_probability, s.user_id))
    return ranked[: max(0, limit)]
