"""SQLite note store provider - Notes persisted in a local SQLite file"""

import builtins
import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path

from second_brain.config import Settings
from second_brain.providers.base import NoteStoreProvider
from second_brain.types import Note, utcnow

logger = logging.getLogger(__name__)


def _to_iso(value: datetime) -> str:
    """Serialize as fixed-width ISO-8601 UTC so that string order is time order"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SQLiteNoteStore(NoteStoreProvider):
    """SQLite-based note store provider"""

    def __init__(self, settings: Settings):
        self.db_path = Path(settings.database_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()
        logger.info(f"SQLite note store initialized: {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize database schema"""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS notes (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    type TEXT NOT NULL DEFAULT 'note',
                    tags TEXT NOT NULL DEFAULT '[]',
                    summary TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_notes_created
                ON notes(created_at)
            """)
            conn.commit()

    def _row_to_note(self, row: sqlite3.Row) -> Note:
        """Convert a database row to a Note"""
        return Note(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            type=row["type"],
            tags=json.loads(row["tags"]) if row["tags"] else [],
            summary=row["summary"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def create(
        self,
        title: str,
        content: str,
        type: str = "note",
        tags: builtins.list[str] | None = None,
        summary: str | None = None,
        created_at: datetime | None = None
    ) -> Note:
        """Create a new note"""
        id = str(uuid.uuid4())
        created = _to_iso(created_at or utcnow())

        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO notes (id, title, content, type, tags, summary, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (id, title, content, type, json.dumps(tags or []), summary, created, created)
            )
            conn.commit()
        logger.debug(f"Created note: {id}")

        return self.get(id)

    def get(self, id: str) -> Note | None:
        """Get a note by ID"""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM notes WHERE id = ?", (id,)).fetchone()
            return self._row_to_note(row) if row else None

    def list(self, limit: int | None = None) -> builtins.list[Note]:
        """List notes newest first"""
        query = "SELECT * FROM notes ORDER BY created_at DESC, rowid DESC"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)

        with self._get_connection() as conn:
            return [self._row_to_note(row) for row in conn.execute(query, params).fetchall()]

    def get_many(self, ids: builtins.list[str]) -> builtins.list[Note]:
        """Get the notes matching ids, newest first"""
        if not ids:
            return []

        placeholders = ", ".join("?" for _ in ids)
        with self._get_connection() as conn:
            cursor = conn.execute(
                f"SELECT * FROM notes WHERE id IN ({placeholders}) "
                f"ORDER BY created_at DESC, rowid DESC",
                tuple(ids)
            )
            return [self._row_to_note(row) for row in cursor.fetchall()]

    def update(
        self,
        id: str,
        title: str | None = None,
        content: str | None = None,
        type: str | None = None,
        tags: builtins.list[str] | None = None,
        summary: str | None = None
    ) -> Note | None:
        """Update the given fields of a note"""
        updates = []
        params = []

        if title is not None:
            updates.append("title = ?")
            params.append(title)
        if content is not None:
            updates.append("content = ?")
            params.append(content)
        if type is not None:
            updates.append("type = ?")
            params.append(type)
        if tags is not None:
            updates.append("tags = ?")
            params.append(json.dumps(tags))
        if summary is not None:
            updates.append("summary = ?")
            params.append(summary)

        if not updates:
            return self.get(id)

        updates.append("updated_at = ?")
        params.append(_to_iso(utcnow()))
        params.append(id)

        with self._get_connection() as conn:
            cursor = conn.execute(
                f"UPDATE notes SET {', '.join(updates)} WHERE id = ?",
                params
            )
            conn.commit()
            if cursor.rowcount == 0:
                return None
        logger.debug(f"Updated note: {id}")

        return self.get(id)

    def delete(self, id: str) -> bool:
        """Delete a note"""
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM notes WHERE id = ?", (id,))
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug(f"Deleted note: {id}")
        return deleted

    def search(self, query: str, limit: int = 5) -> builtins.list[Note]:
        """Case-insensitive substring search over title and content"""
        needle = query.lower()
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT * FROM notes
                WHERE instr(lower(title), ?) > 0 OR instr(lower(content), ?) > 0
                ORDER BY created_at DESC, rowid DESC
                LIMIT ?
                """,
                (needle, needle, limit)
            )
            return [self._row_to_note(row) for row in cursor.fetchall()]

    def get_name(self) -> str:
        return "sqlite"
