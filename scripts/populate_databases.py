#!/usr/bin/env python3
"""
Populate the SQLite mood tracker database with demo data.

Creates the `mood_entries` and `goals` tables read by the Mood Tracker
Analytics API and fills them with a generated history for one user.

Usage:
    python scripts/populate_databases.py
    python scripts/populate_databases.py --scenario declining --days 45 --user alice
"""
import argparse
import json
import os
import random
import sqlite3
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path


# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent
DB_FILE = "mood_tracker.db"

MOODS = ["Very Sad", "Sad", "Neutral", "Happy", "Very Happy"]

ACTIVITIES = [
    "Exercise",
    "Reading",
    "Meditation",
    "Social Activity",
    "Work",
    "Hobbies",
    "Rest",
    "Other",
]

# Mood index drift per day for each scenario (0 = Very Sad, 4 = Very Happy)
SCENARIOS = {
    "steady": {"start": 2.5, "drift": 0.0},
    "improving": {"start": 1.0, "drift": 0.06},
    "declining": {"start": 3.5, "drift": -0.06},
}

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS mood_entries (
        entry_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        created_at TEXT NOT NULL,
        mood TEXT,
        sleep_quality TEXT,
        energy_level TEXT,
        stress_level TEXT,
        social_interaction_count TEXT,
        activities TEXT,
        notes TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS goals (
        goal_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        type TEXT NOT NULL,
        target TEXT NOT NULL,
        status TEXT,
        progress TEXT,
        created_at TEXT,
        completed_at TEXT,
        deadline TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_mood_user_time ON mood_entries (user_id, created_at)",
]

DEMO_GOALS = [
    {"title": "Feel better day to day", "type": "mood", "target": 4},
    {"title": "Sleep well", "type": "sleep", "target": 4},
    {"title": "Stay connected", "type": "social", "target": 3},
    {"title": "Keep busy", "type": "activity", "target": 2},
]


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the mood tracker tables if they do not exist."""
    cursor = conn.cursor()
    for statement in SCHEMA:
        cursor.execute(statement)
    conn.commit()


def insert_entries(conn: sqlite3.Connection, user_id: str, entries: list) -> int:
    """
    Insert mood entry dicts for a user.

    Each dict uses the API field names (created_at, mood, sleep_quality,
    ..., activities as a list of {name, duration}).

    Returns:
        Number of rows inserted
    """
    rows = [
        (
            entry.get("entry_id") or str(uuid.uuid4()),
            user_id,
            entry["created_at"],
            entry.get("mood"),
            entry.get("sleep_quality"),
            entry.get("energy_level"),
            entry.get("stress_level"),
            entry.get("social_interaction_count"),
            json.dumps(entry.get("activities") or []),
            entry.get("notes") or "",
        )
        for entry in entries
    ]
    conn.executemany(
        """
        INSERT INTO mood_entries (
            entry_id, user_id, created_at, mood, sleep_quality, energy_level,
            stress_level, social_interaction_count, activities, notes
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        rows,
    )
    conn.commit()
    return len(rows)


def insert_goals(conn: sqlite3.Connection, user_id: str, goals: list) -> int:
    """Insert goal dicts (title, type, target, optional status/progress/dates)."""
    now = datetime.now(timezone.utc).isoformat()
    rows = [
        (
            goal.get("goal_id") or str(uuid.uuid4()),
            user_id,
            goal["title"],
            goal.get("description", ""),
            goal["type"],
            goal["target"],
            goal.get("status", "active"),
            goal.get("progress", 0),
            goal.get("created_at", now),
            goal.get("completed_at"),
            goal.get("deadline"),
        )
        for goal in goals
    ]
    conn.executemany(
        """
        INSERT INTO goals (
            goal_id, user_id, title, description, type, target, status,
            progress, created_at, completed_at, deadline
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        rows,
    )
    conn.commit()
    return len(rows)


def generate_entries(
    days: int = 60,
    scenario: str = "steady",
    end: datetime = None,
    seed: int = 42,
) -> list:
    """
    Generate one mood entry per day ending at `end`.

    Mood follows the scenario's drift plus noise; sleep, stress and social
    counts loosely track mood so the correlations are visible.
    """
    rng = random.Random(seed)
    trajectory = SCENARIOS[scenario]
    end = end or datetime.now(timezone.utc).replace(hour=20, minute=0, second=0, microsecond=0)

    entries = []
    for offset in range(days, 0, -1):
        day_index = days - offset
        level = trajectory["start"] + trajectory["drift"] * day_index + rng.uniform(-1.0, 1.0)
        mood_index = max(0, min(4, round(level)))

        activities = [
            {"name": name, "duration": rng.choice([15, 30, 45, 60])}
            for name in rng.sample(ACTIVITIES, rng.randint(0, 3))
        ]

        entries.append(
            {
                "created_at": (end - timedelta(days=offset - 1)).isoformat(),
                "mood": MOODS[mood_index],
                "sleep_quality": max(1, min(5, mood_index + rng.randint(0, 2))),
                "energy_level": max(1, min(5, mood_index + rng.randint(-1, 1) + 1)),
                "stress_level": max(1, min(5, 5 - mood_index + rng.randint(-1, 0))),
                "social_interaction_count": max(0, mood_index * 2 + rng.randint(-1, 2)),
                "activities": activities,
                "notes": "",
            }
        )
    return entries


def populate_database(
    db_path: Path,
    user_id: str = "demo",
    days: int = 60,
    scenario: str = "steady",
    seed: int = 42,
) -> int:
    """
    Recreate the database file with generated entries and demo goals.

    Returns:
        Number of mood entries inserted
    """
    if db_path.exists():
        os.remove(db_path)
        print(f"  Removed existing: {db_path.name}")

    conn = sqlite3.connect(db_path)
    try:
        create_schema(conn)
        count = insert_entries(conn, user_id, generate_entries(days, scenario, seed=seed))
        insert_goals(conn, user_id, DEMO_GOALS)
    finally:
        conn.close()
    return count


def main():
    """Populate the mood tracker database."""
    parser = argparse.ArgumentParser(description="Populate the mood tracker demo database")
    parser.add_argument("--user", default="demo", help="User id for the generated data (default: demo)")
    parser.add_argument("--days", type=int, default=60, help="Days of history to generate (default: 60)")
    parser.add_argument(
        "--scenario",
        choices=sorted(SCENARIOS),
        default="steady",
        help="Mood trajectory to simulate (default: steady)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--output", type=Path, default=BASE_DIR / DB_FILE, help="Database file to write")
    args = parser.parse_args()

    print("=" * 60)
    print("Mood Tracker Database Population Script")
    print("=" * 60)

    count = populate_database(args.output, args.user, args.days, args.scenario, args.seed)

    size_kb = args.output.stat().st_size / 1024
    print(f"\nUser: {args.user} ({args.scenario})")
    print(f"Mood entries inserted: {count}")
    print(f"Goals inserted: {len(DEMO_GOALS)}")
    print(f"Database: {args.output} ({size_kb:.1f} KB)")


if __name__ == "__main__":
    main()
