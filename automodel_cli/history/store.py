"""SQLite store holding one row per ``automodel generate`` run."""

import json
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS generate_runs (
    run_id TEXT PRIMARY KEY,
    started_at TEXT NOT NULL,
    dialect TEXT,
    database TEXT,
    output_directory TEXT,
    tables TEXT,
    dry_run INTEGER NOT NULL DEFAULT 0,
    status TEXT NOT NULL DEFAULT 'running',
    duration_ms INTEGER,
    models_count INTEGER,
    columns_count INTEGER,
    references_count INTEGER,
    error_type TEXT,
    error_message TEXT
);

CREATE INDEX IF NOT EXISTS idx_generate_runs_started_at ON generate_runs(started_at);
"""


def default_history_path() -> Path:
    return Path.home() / ".automodel-cli" / "history.db"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class GenerationHistory:
    """Run history backed by a single SQLite file.

    Timestamps are stored as UTC ISO-8601 strings so they sort and compare
    as text.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = Path(db_path) if db_path else default_history_path()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path), isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(SCHEMA_SQL)

    def close(self):
        self._conn.close()

    def start(
        self,
        run_id: str,
        dialect: Optional[str],
        database: Optional[str],
        output_directory: Optional[str] = None,
        tables: Optional[List[str]] = None,
        dry_run: bool = False,
        started_at: Optional[datetime] = None,
    ):
        """Record a run that has just begun."""
        self._conn.execute(
            """
            INSERT INTO generate_runs
                (run_id, started_at, dialect, database, output_directory, tables, dry_run)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                run_id,
                (started_at or _now()).isoformat(),
                dialect,
                database,
                output_directory,
                json.dumps(tables) if tables else None,
                int(dry_run),
            ),
        )

    def finish(
        self,
        run_id: str,
        duration_ms: int,
        models_count: int,
        columns_count: int,
        references_count: int,
    ):
        """Mark a run successful and store what it produced."""
        self._conn.execute(
            """
            UPDATE generate_runs
            SET status = 'success', duration_ms = ?,
                models_count = ?, columns_count = ?, references_count = ?
            WHERE run_id = ?
            """,
            (duration_ms, models_count, columns_count, references_count, run_id),
        )

    def fail(self, run_id: str, duration_ms: int, error: BaseException):
        """Mark a run failed with the exception that ended it."""
        self._conn.execute(
            """
            UPDATE generate_runs
            SET status = 'error', duration_ms = ?, error_type = ?, error_message = ?
            WHERE run_id = ?
            """,
            (duration_ms, type(error).__name__, str(error), run_id),
        )

    def get(self, run_id: str) -> Optional[Dict[str, Any]]:
        row = self._conn.execute(
            "SELECT * FROM generate_runs WHERE run_id = ?", (run_id,)
        ).fetchone()
        return dict(row) if row else None

    def recent(
        self,
        since_hours: int = 24,
        status: Optional[str] = None,
        dialect: Optional[str] = None,
        limit: int = 20,
    ) -> List[Dict[str, Any]]:
        """Runs started within the window, newest first."""
        where = ["started_at >= ?"]
        params: List[Any] = [(_now() - timedelta(hours=since_hours)).isoformat()]
        if status:
            where.append("status = ?")
            params.append(status)
        if dialect:
            where.append("dialect = ?")
            params.append(dialect)
        params.append(limit)

        rows = self._conn.execute(
            f"SELECT * FROM generate_runs WHERE {' AND '.join(where)} "
            "ORDER BY started_at DESC, rowid DESC LIMIT ?",
            params,
        ).fetchall()
        return [dict(row) for row in rows]

    def summary(self, since_hours: int = 24) -> Dict[str, Any]:
        """Aggregate counts over the window, overall and per engine."""
        since = (_now() - timedelta(hours=since_hours)).isoformat()
        totals = self._conn.execute(
            """
            SELECT
                COUNT(*) AS runs,
                COALESCE(SUM(status = 'success'), 0) AS succeeded,
                COALESCE(SUM(status = 'error'), 0) AS failed,
                CAST(AVG(duration_ms) AS INTEGER) AS avg_duration_ms,
                COALESCE(SUM(models_count), 0) AS models,
                COALESCE(SUM(references_count), 0) AS references_found
            FROM generate_runs
            WHERE started_at >= ?
            """,
            (since,),
        ).fetchone()
        engines = self._conn.execute(
            """
            SELECT dialect, COUNT(*) AS runs, SUM(status = 'error') AS failed
            FROM generate_runs
            WHERE started_at >= ?
            GROUP BY dialect
            ORDER BY runs DESC, dialect
            """,
            (since,),
        ).fetchall()
        failures = self._conn.execute(
            """
            SELECT run_id, started_at, error_type, error_message
            FROM generate_runs
            WHERE started_at >= ? AND status = 'error'
            ORDER BY started_at DESC
            LIMIT 5
            """,
            (since,),
        ).fetchall()

        summary = dict(totals)
        summary["since_hours"] = since_hours
        summary["by_dialect"] = [dict(row) for row in engines]
        summary["recent_failures"] = [dict(row) for row in failures]
        return summary

    def purge(self, retention_days: int) -> int:
        """Delete runs older than the retention window; returns the count."""
        cutoff = (_now() - timedelta(days=retention_days)).isoformat()
        cursor = self._conn.execute("DELETE FROM generate_runs WHERE started_at < ?", (cutoff,))
        return cursor.rowcount
