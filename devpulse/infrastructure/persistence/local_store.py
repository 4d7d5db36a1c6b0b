"""
SQLite Local Store - Identity and Review Persistence
=====================================================

A small key-value table holding two values:
- the current developer identity (scalar)
- the ordered list of submitted reviews (JSON list)

Every write overwrites the whole value. There are no partial updates.
"""

import json
import sqlite3
import logging
from pathlib import Path
from typing import List, Optional, Union
from contextlib import contextmanager

from devpulse.domain import Review

logger = logging.getLogger(__name__)

DATABASE_FILE = "devpulse.db"

IDENTITY_KEY = "devpulse_email"
REVIEWS_KEY = "devpulse_reviews"


class LocalStore:
    """
    Local key-value persistence for the check-in form.

    Usage:
        store = LocalStore()
        store.init()

        store.set_identity("dev@example.com")
        reviews = store.append_review(review)
    """

    def __init__(self, db_path: Union[str, Path] = DATABASE_FILE):
        self.db_path = str(db_path)

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def init(self):
        """Initialize the key-value table."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
        logger.info(f"Local store initialized: {self.db_path}")

    # ── Raw key-value access ───────────────────────────────────────

    def _get(self, key: str) -> Optional[str]:
        with self._get_connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None

    def _set(self, key: str, value: str):
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, value)
            )

    def _delete(self, key: str):
        with self._get_connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    # ── Identity ───────────────────────────────────────────────────

    def get_identity(self) -> Optional[str]:
        return self._get(IDENTITY_KEY)

    def set_identity(self, identity: str):
        self._set(IDENTITY_KEY, identity)
        logger.info(f"Identity set: {identity}")

    def clear_identity(self):
        self._delete(IDENTITY_KEY)
        logger.info("Identity cleared")

    # ── Reviews ────────────────────────────────────────────────────

    def list_reviews(self) -> List[Review]:
        """All stored reviews in insertion order."""
        raw = self._get(REVIEWS_KEY)
        if not raw:
            return []

        try:
            return [Review.from_dict(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Stored review list is unreadable, treating it as empty: {e}")
            return []

    def append_review(self, review: Review) -> List[Review]:
        """Append a review and persist the whole list. Returns the updated list."""
        reviews = self.list_reviews() + [review]
        self._set(REVIEWS_KEY, json.dumps([r.to_dict() for r in reviews], ensure_ascii=False))
        logger.info(f"Stored review {review.id} for {review.identity} ({review.period})")
        return reviews

    def has_review(self, identity: str, period: str) -> bool:
        """Check whether a review already exists for this identity and period."""
        return any(
            r.identity == identity and r.period == period
            for r in self.list_reviews()
        )
