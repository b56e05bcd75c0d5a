# src/seogeo/database.py
"""SQLite persistence for report history and email captures."""

import json
import sqlite3
import threading
from datetime import datetime
from typing import Optional, List, Dict, Any
import logging

from seogeo.config import settings

logger = logging.getLogger(__name__)

CREATE_REPORT_HISTORY_SQL = """
CREATE TABLE IF NOT EXISTS report_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT NOT NULL,
    domain TEXT NOT NULL,
    rubric TEXT,
    seo_score INTEGER,
    geo_score INTEGER,
    seo_breakdown TEXT,
    geo_breakdown TEXT,
    recommendations TEXT,
    created_at TIMESTAMP NOT NULL
);
"""

CREATE_REPORT_HISTORY_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_report_history_domain_created
    ON report_history(domain, created_at);
"""

CREATE_EMAIL_CAPTURES_SQL = """
CREATE TABLE IF NOT EXISTS email_captures (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL,
    url_analyzed TEXT NOT NULL,
    seo_score INTEGER,
    geo_score INTEGER,
    created_at TIMESTAMP NOT NULL
);
"""

# Columns stored as JSON text
JSON_COLUMNS = ("seo_breakdown", "geo_breakdown", "recommendations")


class HistoryStore:
    """SQLite store for analysis history.

    A single connection is shared between the caller's thread and the
    background writer, so every statement runs under a lock.
    """

    def __init__(self, db_url: Optional[str] = None):
        """Initialize the store.

        Args:
            db_url: Database URL (sqlite:///path/to/db.db). Defaults to settings.DATABASE_URL.
        """
        self.db_url = db_url or settings.DATABASE_URL
        self.db_path = self.db_url.replace("sqlite:///", "")
        self.conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        self.connect()
        self.create_schema()

    def connect(self) -> None:
        """Establish SQLite connection."""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        logger.debug(f"Connected to SQLite database: {self.db_path}")

    def close(self) -> None:
        """Close SQLite connection."""
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None
                logger.debug("Closed SQLite connection")

    def create_schema(self) -> None:
        """Create tables if they don't exist."""
        with self._lock, self.conn:
            self.conn.execute(CREATE_REPORT_HISTORY_SQL)
            self.conn.execute(CREATE_REPORT_HISTORY_INDEX_SQL)
            self.conn.execute(CREATE_EMAIL_CAPTURES_SQL)
        logger.debug("Schema verified/created")

    def get_table_columns(self, table: str) -> set:
        """Get column names of a table."""
        cursor = self.conn.cursor()
        cursor.execute(f"PRAGMA table_info({table});")
        return {row['name'] for row in cursor.fetchall()}

    def save_report(self, record: Dict[str, Any]) -> None:
        """Save one analysis to the history table.

        Args:
            record: Must include 'url' and 'domain'. Breakdown and recommendation
                values are stored as JSON; unknown keys are ignored.
        """
        if 'url' not in record or 'domain' not in record:
            raise ValueError("The 'url' and 'domain' fields are required.")

        values = dict(record)
        values.setdefault('created_at', datetime.now())
        for column in JSON_COLUMNS:
            if column in values and not isinstance(values[column], str):
                values[column] = json.dumps(values[column])
        self._insert('report_history', values)
        logger.debug(f"Saved report for domain: {record['domain']}")

    def get_reports_for_domain(self, domain: str) -> List[Dict[str, Any]]:
        """Retrieve all reports for a domain, oldest first.

        Args:
            domain: The domain to query.

        Returns:
            List of report dictionaries with JSON columns decoded.
        """
        query_sql = "SELECT * FROM report_history WHERE domain = ? ORDER BY created_at ASC, id ASC"
        with self._lock:
            cursor = self.conn.cursor()
            cursor.execute(query_sql, (domain,))
            rows = [dict(row) for row in cursor.fetchall()]

        for row in rows:
            for column in JSON_COLUMNS:
                if row.get(column):
                    try:
                        row[column] = json.loads(row[column])
                    except json.JSONDecodeError:
                        logger.warning(f"Corrupt JSON in {column} for report {row.get('id')}")
        return rows

    def save_email_capture(
        self, email: str, url: str, seo_score: Optional[int], geo_score: Optional[int]
    ) -> None:
        """Record that a report was emailed."""
        self._insert('email_captures', {
            'email': email,
            'url_analyzed': url,
            'seo_score': seo_score,
            'geo_score': geo_score,
            'created_at': datetime.now(),
        })
        logger.debug(f"Saved email capture for {url}")

    def get_email_captures(self, email: Optional[str] = None) -> List[Dict[str, Any]]:
        """Retrieve email captures, optionally filtered by address."""
        with self._lock:
            cursor = self.conn.cursor()
            if email:
                cursor.execute(
                    "SELECT * FROM email_captures WHERE email = ? ORDER BY created_at ASC", (email,)
                )
            else:
                cursor.execute("SELECT * FROM email_captures ORDER BY created_at ASC")
            return [dict(row) for row in cursor.fetchall()]

    def _insert(self, table: str, values: Dict[str, Any]) -> None:
        with self._lock:
            table_columns = self.get_table_columns(table)
            valid = {k: v for k, v in values.items() if k in table_columns}
            if isinstance(valid.get('created_at'), datetime):
                valid['created_at'] = valid['created_at'].isoformat()

            columns = ', '.join(valid.keys())
            placeholders = ', '.join('?' for _ in valid)
            insert_sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"

            with self.conn:
                self.conn.execute(insert_sql, tuple(valid.values()))
