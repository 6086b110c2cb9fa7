"""SQLite pattern store provider - Analysis runs and theme insights"""

import builtins
import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path

from second_brain.config import Settings
from second_brain.providers.base import PatternStoreProvider
from second_brain.types import AnalysisRun, Period, RunStatus, ThemeInsight, utcnow

logger = logging.getLogger(__name__)


def _to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SQLitePatternStore(PatternStoreProvider):
    """SQLite-based store for pattern observer runs and insights

    Terminal transitions are guarded in SQL (`WHERE status = 'running'`), so a
    run can only be completed or failed once even across connections.
    """

    def __init__(self, settings: Settings):
        self.db_path = Path(settings.database_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()
        logger.info(f"SQLite pattern store initialized: {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize database schema"""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS pattern_runs (
                    id TEXT PRIMARY KEY,
                    status TEXT NOT NULL,
                    total_notes INTEGER NOT NULL DEFAULT 0,
                    themes_found INTEGER NOT NULL DEFAULT 0,
                    error TEXT,
                    started_at TEXT NOT NULL,
                    completed_at TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS pattern_insights (
                    id TEXT PRIMARY KEY,
                    run_id TEXT NOT NULL,
                    theme TEXT NOT NULL,
                    count INTEGER NOT NULL,
                    insight TEXT NOT NULL,
                    related_note_ids TEXT NOT NULL DEFAULT '[]',
                    period TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (run_id) REFERENCES pattern_runs(id)
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_pattern_insights_run
                ON pattern_insights(run_id)
            """)
            conn.commit()

    def _row_to_run(self, row: sqlite3.Row) -> AnalysisRun:
        return AnalysisRun(
            id=row["id"],
            status=RunStatus(row["status"]),
            started_at=_from_iso(row["started_at"]),
            total_notes=row["total_notes"],
            themes_found=row["themes_found"],
            error=row["error"],
            completed_at=_from_iso(row["completed_at"]),
        )

    def _row_to_insight(self, row: sqlite3.Row) -> ThemeInsight:
        return ThemeInsight(
            id=row["id"],
            run_id=row["run_id"],
            theme=row["theme"],
            count=row["count"],
            insight=row["insight"],
            related_note_ids=json.loads(row["related_note_ids"]) if row["related_note_ids"] else [],
            period=Period(row["period"]),
            created_at=_from_iso(row["created_at"]),
        )

    def create_run(self) -> AnalysisRun:
        """Create a new run in RUNNING state"""
        id = str(uuid.uuid4())
        with self._get_connection() as conn:
            conn.execute(
                "INSERT INTO pattern_runs (id, status, started_at) VALUES (?, ?, ?)",
                (id, RunStatus.RUNNING.value, _to_iso(utcnow()))
            )
            conn.commit()
        logger.debug(f"Created analysis run: {id}")
        return self.get_run(id)

    def _finish_run(self, run_id: str, status: RunStatus, **fields) -> AnalysisRun:
        """Apply the single terminal transition of a run"""
        assignments = ", ".join(f"{column} = ?" for column in fields)
        with self._get_connection() as conn:
            cursor = conn.execute(
                f"UPDATE pattern_runs SET status = ?, completed_at = ?, {assignments} "
                f"WHERE id = ? AND status = ?",
                (status.value, _to_iso(utcnow()), *fields.values(), run_id, RunStatus.RUNNING.value)
            )
            updated = cursor.rowcount > 0
            if updated and status == RunStatus.FAILED:
                # Insights stored before the failure never become visible
                conn.execute("DELETE FROM pattern_insights WHERE run_id = ?", (run_id,))
            conn.commit()

        if not updated:
            existing = self.get_run(run_id)
            if existing is None:
                raise ValueError(f"Analysis run not found: {run_id}")
            raise ValueError(f"Analysis run {run_id} is already {existing.status.value}")

        return self.get_run(run_id)

    def complete_run(self, run_id: str, total_notes: int, themes_found: int) -> AnalysisRun:
        """Mark a run completed"""
        return self._finish_run(
            run_id, RunStatus.COMPLETED, total_notes=total_notes, themes_found=themes_found
        )

    def fail_run(self, run_id: str, error: str) -> AnalysisRun:
        """Mark a run failed"""
        return self._finish_run(run_id, RunStatus.FAILED, error=error)

    def add_insights(self, run_id: str, insights: builtins.list[ThemeInsight]) -> builtins.list[ThemeInsight]:
        """Persist insights for a run in a single transaction"""
        if self.get_run(run_id) is None:
            raise ValueError(f"Analysis run not found: {run_id}")

        created_at = utcnow()
        stored = [
            ThemeInsight(
                id=str(uuid.uuid4()),
                run_id=run_id,
                theme=insight.theme,
                count=insight.count,
                insight=insight.insight,
                related_note_ids=list(insight.related_note_ids),
                period=insight.period,
                created_at=created_at,
            )
            for insight in insights
        ]

        conn = self._get_connection()
        try:
            with conn:
                conn.executemany(
                    """
                    INSERT INTO pattern_insights
                        (id, run_id, theme, count, insight, related_note_ids, period, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            insight.id, run_id, insight.theme, insight.count, insight.insight,
                            json.dumps(insight.related_note_ids), insight.period.value,
                            _to_iso(created_at)
                        )
                        for insight in stored
                    ]
                )
        finally:
            conn.close()

        logger.debug(f"Stored {len(stored)} insights for run {run_id}")
        return stored

    def get_run(self, run_id: str) -> AnalysisRun | None:
        """Get a run by ID"""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM pattern_runs WHERE id = ?", (run_id,)).fetchone()
            return self._row_to_run(row) if row else None

    def get_latest_run(self) -> AnalysisRun | None:
        """Most recently started run of any status"""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM pattern_runs ORDER BY started_at DESC, rowid DESC LIMIT 1"
            ).fetchone()
            return self._row_to_run(row) if row else None

    def get_latest_completed_run(self) -> AnalysisRun | None:
        """Most recently completed run"""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM pattern_runs WHERE status = ? "
                "ORDER BY completed_at DESC, rowid DESC LIMIT 1",
                (RunStatus.COMPLETED.value,)
            ).fetchone()
            return self._row_to_run(row) if row else None

    def list_runs(self, limit: int = 20) -> builtins.list[AnalysisRun]:
        """Runs newest first"""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM pattern_runs ORDER BY started_at DESC, rowid DESC LIMIT ?",
                (limit,)
            )
            return [self._row_to_run(row) for row in cursor.fetchall()]

    def list_insights(self, run_id: str) -> builtins.list[ThemeInsight]:
        """Insights of a run, highest count first"""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM pattern_insights WHERE run_id = ? ORDER BY count DESC, rowid ASC",
                (run_id,)
            )
            return [self._row_to_insight(row) for row in cursor.fetchall()]

    def get_name(self) -> str:
        return "sqlite"
