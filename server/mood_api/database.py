"""Read-only SQLite access to stored mood entries and goals."""
import sqlite3
from contextlib import contextmanager
from typing import Generator, List
import logging

from .config import get_settings

log = logging.getLogger(__name__)


class DatabaseManager:
    """
    Read-only SQLite database manager for mood tracker data.
    The application that records entries owns writes; this service
    only reads.
    """

    def __init__(self, settings=None):
        self.settings = settings or get_settings()

    @contextmanager
    def get_mood_conn(self) -> Generator[sqlite3.Connection, None, None]:
        """Get read-only connection to the mood tracker database."""
        yield from self._connect(self.settings.mood_db_path)

    def _connect(self, db_path: str) -> Generator[sqlite3.Connection, None, None]:
        """
        Create a read-only connection with proper isolation.
        Uses URI mode with mode=ro to ensure read-only access.
        """
        uri = f"file:{db_path}?mode=ro"
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        conn.row_factory = sqlite3.Row  # Enable dict-like row access
        try:
            yield conn
        finally:
            conn.close()

    def fetch_mood_rows(self, user_id: str) -> List[sqlite3.Row]:
        """All mood entry rows for a user, oldest first."""
        with self.get_mood_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM mood_entries
                WHERE user_id = ?
                ORDER BY created_at ASC
                """,
                (user_id,),
            )
            rows = cursor.fetchall()
        log.debug(f"Loaded {len(rows)} mood rows for {user_id}")
        return rows

    def fetch_goal_rows(self, user_id: str) -> List[sqlite3.Row]:
        """Goal rows for a user in creation order."""
        with self.get_mood_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM goals
                WHERE user_id = ?
                ORDER BY created_at ASC
                """,
                (user_id,),
            )
            return cursor.fetchall()


# Singleton instance
db_manager = DatabaseManager()
