"""SQLite store for published currency series records."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from inflation_calculator.models import CurrencySeriesRecord


class DataCache:
    """SQLite-backed table holding one row per ingested series."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS series_records (
                    key TEXT PRIMARY KEY,
                    currency TEXT NOT NULL,
                    source TEXT NOT NULL,
                    earliest INTEGER NOT NULL,
                    latest INTEGER NOT NULL,
                    last_updated TEXT NOT NULL,
                    stored_at TEXT NOT NULL,
                    payload TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_records_currency
                ON series_records(currency)
            """)

    def store_record(
        self, key: str, record: CurrencySeriesRecord, stored_at: datetime | None = None
    ) -> None:
        """
        Insert or fully replace the row for a series.

        Args:
            key: Ingestion source key (e.g. "usd", "sek-fred")
            record: Complete record; nothing is merged with the previous row
            stored_at: When the row was written (defaults to now)
        """
        stored_at = stored_at or datetime.now()
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO series_records
                (key, currency, source, earliest, latest, last_updated, stored_at, payload)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    key,
                    record.currency,
                    record.source,
                    record.earliest,
                    record.latest,
                    record.last_updated,
                    stored_at.isoformat(),
                    json.dumps(record.to_dict(), ensure_ascii=False),
                ),
            )

    def get_record(self, key: str) -> CurrencySeriesRecord | None:
        """Load a stored record, or None if the key was never ingested."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT payload FROM series_records WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return None
        return CurrencySeriesRecord.from_dict(json.loads(row["payload"]))

    def get_records_for_currency(self, currency: str) -> dict[str, CurrencySeriesRecord]:
        """All stored records for a currency, keyed by source key."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT key, payload FROM series_records WHERE currency = ? ORDER BY key",
                (currency,),
            ).fetchall()
        return {
            row["key"]: CurrencySeriesRecord.from_dict(json.loads(row["payload"]))
            for row in rows
        }

    def get_cache_status(self) -> dict[str, dict]:
        """Get a summary row for each stored series."""
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT key, currency, source, earliest, latest, last_updated, stored_at
                FROM series_records
                ORDER BY key
            """).fetchall()

        return {
            row["key"]: {
                "currency": row["currency"],
                "source": row["source"],
                "earliest": row["earliest"],
                "latest": row["latest"],
                "last_updated": row["last_updated"],
                "stored_at": row["stored_at"],
            }
            for row in rows
        }
