"""Study Focus MCP Server.

FastMCP server exposing session logging, fatigue rollups, and burnout risk
ranking as tools.
Run: study-focus-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import BaseModel

from .core.config import ScoringConfig
from .core.models import DailyRollup, SessionSubmission
from .db import close_db, init_db
from .services import (
    create_study_session,
    high_risk_users as rank_high_risk_users,
    list_fatigue_scores,
    list_sessions,
    record_daily_fatigue as upsert_daily_fatigue,
)
from .store import SessionStore

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
APPEND = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=False)
UPSERT = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=True, openWorldHint=False)

store = SessionStore()
scoring_config = ScoringConfig()


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and open the database for the server's lifetime."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    await init_db()
    try:
        yield
    finally:
        await close_db()


mcp = FastMCP(
    "Study Focus",
    instructions="Log study sessions, record daily fatigue rollups, and find the users most at risk of burnout.",
    lifespan=lifespan,
)


def _to_json(model: BaseModel) -> dict:
    """JSON-ready dict of a session or score (dates and enums as strings)."""
    return model.model_dump(mode="json")


def _parse_day(day: str) -> date:
    try:
        return date.fromisoformat(day)
    except ValueError:
        raise ValueError(f"day must be an ISO date (YYYY-MM-DD), got {day!r}") from None


# ─── Tool 1: Log Session ─────────────────────────────────────────────────────


@mcp.tool(annotations=APPEND)
async def log_study_session(
    user_id: str,
    mode: str,
    goal: str,
    actual_min: int,
    planned_min: int = 0,
    pause_count: int = 0,
    self_rating: int = 3,
    self_on_task: str = "",
) -> dict:
    """Record a finished study session and compute its focus score (0-100).

    Args:
        user_id: The user who studied.
        mode: 'timer' or 'stopwatch'. Anything else is treated as 'stopwatch'.
        goal: What the session was for, e.g. 'coding', 'reading', 'writing'.
        actual_min: Minutes actually studied. Must be greater than 0.
        planned_min: Planned minutes (timer sessions only).
        pause_count: Number of pauses taken.
        self_rating: Self-assessed focus from 1 to 5.
        self_on_task: 'yes', 'somewhat' or 'no'.
    """
    submission = SessionSubmission(
        mode=mode,
        goal=goal,
        planned_min=planned_min,
        actual_min=actual_min,
        pause_count=pause_count,
        self_rating=self_rating,
        self_on_task=self_on_task,
    )
    session = await create_study_session(store, user_id, submission, scoring_config)
    return {
        "title": "Study Session Logged",
        "session": _to_json(session),
        "summary": f"{session.actual_min} min of {session.goal} scored {session.focus_score}/100.",
    }


# ─── Tool 2: My Sessions ─────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def my_sessions(user_id: str, limit: int = 30) -> dict:
    """A user's most recent study sessions, newest first.

    Args:
        user_id: Whose sessions to list.
        limit: Maximum number of sessions. Default 30.
    """
    sessions = await list_sessions(store, user_id, limit)
    if sessions:
        avg = sum(s.focus_score for s in sessions) / len(sessions)
        summary = f"{len(sessions)} session(s), average focus score {avg:.0f}/100."
    else:
        summary = "No sessions logged yet."
    return {
        "title": "Study Sessions",
        "user_id": user_id,
        "sessions": [_to_json(s) for s in sessions],
        "count": len(sessions),
        "summary": summary,
    }


# ─── Tool 3: My Fatigue Scores ───────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def my_fatigue_scores(user_id: str, limit: int = 14) -> dict:
    """A user's daily fatigue index and burnout probability, newest day first.

    Args:
        user_id: Whose scores to list.
        limit: Maximum number of days. Default 14.
    """
    scores = await list_fatigue_scores(store, user_id, limit)
    if scores:
        latest = scores[0]
        summary = (
            f"Latest ({latest.day.isoformat()}): fatigue index {latest.fatigue_index:.1f}, "
            f"burnout probability {latest.burnout_probability:.1f}%."
        )
    else:
        summary = "No fatigue scores recorded yet."
    return {
        "title": "Fatigue Scores",
        "user_id": user_id,
        "scores": [_to_json(s) for s in scores],
        "count": len(scores),
        "summary": summary,
    }


# ─── Tool 4: Record Daily Fatigue ────────────────────────────────────────────


@mcp.tool(annotations=UPSERT)
async def record_daily_fatigue(
    user_id: str,
    day: str,
    total_study_hours: float,
    break_frequency: float,
    focus_stability: float,
) -> dict:
    """Store a user's daily rollup and compute fatigue and burnout for that day.

    Re-running for the same user and day overwrites the earlier result.

    Args:
        user_id: The user the rollup belongs to.
        day: Calendar day as YYYY-MM-DD.
        total_study_hours: Hours studied that day.
        break_frequency: Breaks per hour.
        focus_stability: 0-100, lower means more volatile focus.
    """
    rollup = DailyRollup(
        total_study_hours=total_study_hours,
        break_frequency=break_frequency,
        focus_stability=focus_stability,
    )
    score = await upsert_daily_fatigue(store, user_id, _parse_day(day), rollup, scoring_config.fatigue)
    return {
        "title": "Daily Fatigue Recorded",
        "score": _to_json(score),
        "summary": f"Fatigue index {score.fatigue_index:.1f}, burnout probability {score.burnout_probability:.1f}%.",
    }


# ─── Tool 5: High-Risk Users ─────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def high_risk_users(limit: int = 10) -> dict:
    """Users with the highest latest burnout probability.

    Args:
        limit: Maximum number of users. Default 10.
    """
    scores = await rank_high_risk_users(store, limit)
    if scores:
        top = scores[0]
        summary = f"{len(scores)} user(s) ranked. Highest risk: {top.user_id} at {top.burnout_probability:.1f}%."
    else:
        summary = "No fatigue scores recorded yet."
    return {
        "title": "High-Risk Users",
        "users": [_to_json(s) for s in scores],
        "count": len(scores),
        "summary": summary,
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
