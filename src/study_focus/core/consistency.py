"""Historical consistency: rewards regular use over the recent past.

The score is the number of distinct calendar days with a session inside the
lookback window, divided by the target day count and capped at 1.0. History
is read through the SessionHistory protocol so tests can fake it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional, Protocol, Sequence

from .config import ConsistencyConfig
from .models import StudySession, as_naive_utc, utcnow

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Opaque persistence failure raised by a store implementation."""


class SessionHistory(Protocol):
    """Read access to a user's past sessions, newest first."""

    async def recent_sessions(self, user_id: str, limit: int) -> Sequence[StudySession]:
        ...


def consistency_from_start_times(
    started: Iterable[datetime],
    cfg: Optional[ConsistencyConfig] = None,
    now: Optional[datetime] = None,
) -> float:
    """Score regularity from session start times (naive UTC).

    An empty history scores ``no_history_score``; history with nothing inside
    the window scores ``no_recent_score``.

    NOTE: no_history_score (0.3) is lower than no_recent_score (0.4), so a
    brand-new user scores below a lapsed one. Kept as-is pending a product
    decision.
    """
    cfg = cfg or ConsistencyConfig()
    now = as_naive_utc(now) if now else utcnow()
    starts = [as_naive_utc(s) for s in started]
    if not starts:
        return cfg.no_history_score

    cutoff = now - timedelta(days=cfg.lookback_days)
    days = {s.date() for s in starts if s >= cutoff}
    if not days:
        return cfg.no_recent_score
    return min(1.0, len(days) / cfg.target_days)


async def historical_consistency(
    history: SessionHistory,
    user_id: str,
    cfg: Optional[ConsistencyConfig] = None,
    now: Optional[datetime] = None,
) -> float:
    """Look up the user's recent sessions and score their regularity.

    A failed lookup is not fatal: the session is still scored, using the
    no-history default.
    """
    cfg = cfg or ConsistencyConfig()
    try:
        sessions = await history.recent_sessions(user_id, cfg.history_limit)
    except StoreError as exc:
        logger.warning("History lookup failed for user %s, using default consistency: %s", user_id, exc)
        return cfg.no_history_score

    return consistency_from_start_times((s.started_at for s in sessions), cfg, now)
