"""
Shared helpers for API routes.
Contains: row conversion, loading a user's entries and goals, reference time.
"""
import json
import logging
import sqlite3
from datetime import datetime
from typing import Optional

from fastapi import HTTPException

from mood_engine import Goal, GoalStatus, GoalType, MoodEntry, parse_entries
from mood_engine.mood_series import parse_timestamp

from ..database import db_manager

log = logging.getLogger(__name__)


def _row_to_entry_dict(row) -> dict:
    """Convert a SQLite row to the mapping MoodEntry.from_dict expects."""
    raw_activities = row["activities"]
    try:
        activities = json.loads(raw_activities) if raw_activities else []
    except json.JSONDecodeError:
        log.warning(f"Entry {row['entry_id']}: unreadable activities, ignoring")
        activities = []

    return {
        "entry_id": row["entry_id"],
        "created_at": row["created_at"],
        "mood": row["mood"],
        "sleep_quality": row["sleep_quality"],
        "energy_level": row["energy_level"],
        "stress_level": row["stress_level"],
        "social_interaction_count": row["social_interaction_count"],
        "activities": activities,
        "notes": row["notes"],
    }


def _row_to_goal(row) -> Optional[Goal]:
    """Convert a SQLite row to a Goal, or None if the row is unusable."""
    try:
        goal_type = GoalType(row["type"])
        status = GoalStatus(row["status"] or "active")
        target = float(row["target"])
    except (TypeError, ValueError):
        log.warning(f"Goal {row['goal_id']}: invalid type/status/target, skipping")
        return None

    return Goal(
        goal_id=str(row["goal_id"]),
        title=row["title"],
        description=row["description"] or "",
        type=goal_type,
        target=target,
        status=status,
        progress=float(row["progress"] or 0),
        created_at=parse_timestamp(row["created_at"]),
        completed_at=parse_timestamp(row["completed_at"]),
        deadline=parse_timestamp(row["deadline"]),
    )


def load_entries(user_id: str) -> list[MoodEntry]:
    """All of a user's mood entries, parsed and sorted."""
    try:
        rows = db_manager.fetch_mood_rows(user_id)
    except sqlite3.Error as e:
        log.error(f"Mood database unavailable: {e}")
        raise HTTPException(status_code=503, detail="Mood database unavailable")
    return parse_entries(_row_to_entry_dict(row) for row in rows)


def load_goals(user_id: str) -> list[Goal]:
    try:
        rows = db_manager.fetch_goal_rows(user_id)
    except sqlite3.Error as e:
        log.error(f"Mood database unavailable: {e}")
        raise HTTPException(status_code=503, detail="Mood database unavailable")
    return [goal for goal in (_row_to_goal(row) for row in rows) if goal]


def reference_time(entries: list[MoodEntry], as_of: Optional[str] = None) -> Optional[datetime]:
    """
    Time that lookback windows are measured from.

    An explicit `as_of` wins; otherwise the latest entry is used as the
    reference point (stored data may lag behind the wall clock).
    """
    if as_of:
        parsed = parse_timestamp(as_of)
        if parsed is None:
            raise HTTPException(status_code=400, detail=f"Invalid as_of timestamp '{as_of}'")
        return parsed
    if not entries:
        return None
    return max(entry.timestamp for entry in entries)
