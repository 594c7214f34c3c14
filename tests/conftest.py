"""
Pytest fixtures for Mood Tracker Analytics tests.
"""
import sqlite3
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Ensure src/ and scripts/ are on sys.path so tests can import mood_engine
# and the database population helpers.
ROOT = Path(__file__).resolve().parent.parent
for path in (ROOT, ROOT / "src", ROOT / "scripts"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Load environment variables
load_dotenv()

from mood_engine import Activity, Goal, GoalType, MoodEntry, MoodLabel  # noqa: E402

# Fixed reference point: a Wednesday evening
REFERENCE_TIME = datetime(2024, 6, 12, 20, 0, tzinfo=timezone.utc)


# ============================================================================
# Engine fixtures
# ============================================================================

@pytest.fixture
def now():
    """Reference time the lookback windows are measured from."""
    return REFERENCE_TIME


@pytest.fixture
def make_entry():
    """
    Factory fixture for MoodEntry objects.

    `days_ago` is measured back from REFERENCE_TIME; every other keyword
    is passed through to MoodEntry.
    """

    def _make_entry(days_ago: float = 0, mood="Neutral", activities=(), **fields) -> MoodEntry:
        return MoodEntry(
            timestamp=REFERENCE_TIME - timedelta(days=days_ago),
            mood=MoodLabel.parse(mood),
            activities=tuple(
                a if isinstance(a, Activity) else Activity(name=a) for a in activities
            ),
            **fields,
        )

    return _make_entry


@pytest.fixture
def daily_entries(make_entry):
    """
    Factory fixture for one entry per day, oldest first.

    Accepts a list of moods; the last mood lands on REFERENCE_TIME.
    """

    def _daily_entries(moods, **fields) -> list:
        count = len(moods)
        return [
            make_entry(days_ago=count - 1 - i, mood=mood, **fields)
            for i, mood in enumerate(moods)
        ]

    return _daily_entries


@pytest.fixture
def week_of_moods():
    """Seven daily moods averaging exactly 3.0 on the 1-5 rating scale."""
    return ["Very Sad", "Sad", "Sad", "Neutral", "Happy", "Happy", "Very Happy"]


@pytest.fixture
def make_goal():
    """Factory fixture for Goal objects."""

    def _make_goal(goal_type="mood", target=4, goal_id="goal-1", **fields) -> Goal:
        return Goal(
            goal_id=goal_id,
            title=fields.pop("title", f"{goal_type} goal"),
            type=GoalType(goal_type),
            target=target,
            **fields,
        )

    return _make_goal


# ============================================================================
# Database fixtures
# ============================================================================

@pytest.fixture
def mood_database(tmp_path, monkeypatch):
    """
    Factory fixture for a temporary mood_tracker.db wired into the API.

    Returns a function that accepts entry and goal dicts for a user, writes
    them with the population script helpers and returns the database path.
    """
    from populate_databases import create_schema, insert_entries, insert_goals
    from server.mood_api.config import Settings
    from server.mood_api.database import db_manager

    db_path = tmp_path / "mood_tracker.db"
    conn = sqlite3.connect(db_path)
    create_schema(conn)
    monkeypatch.setattr(db_manager, "settings", Settings(data_path=str(tmp_path)))

    def _populate(user_id: str = "demo", entries=(), goals=()) -> Path:
        if entries:
            insert_entries(conn, user_id, list(entries))
        if goals:
            insert_goals(conn, user_id, list(goals))
        return db_path

    yield _populate

    conn.close()


@pytest.fixture
def api_client(mood_database):
    """
    FastAPI TestClient with the language provider disabled.

    Tests that need a provider override get_language_client themselves.
    """
    from fastapi.testclient import TestClient

    from mood_engine import LanguageAnalysisClient
    from server.mood_api.main import app
    from server.mood_api.routes.risk import get_language_client

    app.dependency_overrides[get_language_client] = lambda: LanguageAnalysisClient(api_key="")
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
