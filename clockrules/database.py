"""SQLite cache of each token's first working day."""

import hashlib
import sqlite3
from datetime import date
from pathlib import Path

DEFAULT_DB_PATH = Path.home() / ".config" / "clockrules" / "cache.db"


def _token_key(token: str) -> str:
    """Tokens are stored only as digests."""
    return hashlib.sha256(token.encode()).hexdigest()


class FirstDateCache:
    """Remembers where "since the beginning" starts for each API token."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS first_dates (
                    token_key TEXT PRIMARY KEY,
                    first_date TEXT NOT NULL
                )
            """)
            conn.commit()

    def get_cached_first_date(self, token: str) -> date | None:
        """Get the cached first working day for a token."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT first_date FROM first_dates WHERE token_key = ?",
                (_token_key(token),),
            )
            row = cursor.fetchone()
            if not row:
                return None
            return date.fromisoformat(row[0])

    def set_cached_first_date(self, token: str, first_date: date) -> None:
        """Save or update the first working day for a token."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO first_dates (token_key, first_date) VALUES (?, ?)",
                (_token_key(token), first_date.isoformat()),
            )
            conn.commit()

    def clear_all(self) -> None:
        """Forget every cached date."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM first_dates")
            conn.commit()
