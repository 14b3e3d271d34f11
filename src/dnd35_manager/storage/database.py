"""SQLite tables behind character storage.

Three tables are kept:

- ``characters``: the full JSON document of every saved character,
- ``profiles``: the listing summary of each character,
- ``app_state``: key/value pairs, holding the current character pointer.

Each public method opens its own connection and runs as one transaction,
so a character and its profile are always written and removed together.
The database file defaults to ``Settings.storage.database_path``.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from dnd35_manager.core.config import get_settings
from dnd35_manager.core.logging import get_logger
from dnd35_manager.models.character import CharacterProfile


logger = get_logger(__name__)

CURRENT_CHARACTER_KEY = "current_character"

SCHEMA = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);
CREATE TABLE IF NOT EXISTS characters (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    document TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS profiles (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    level INTEGER NOT NULL,
    race TEXT NOT NULL,
    character_class TEXT NOT NULL,
    last_played TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS app_state (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_profiles_last_played ON profiles(last_played DESC);
"""

UPSERT_CHARACTER = """
INSERT INTO characters (id, name, document, created_at, updated_at)
VALUES (:id, :name, :document, :created_at, :updated_at)
ON CONFLICT(id) DO UPDATE SET
    name = excluded.name,
    document = excluded.document,
    created_at = excluded.created_at,
    updated_at = excluded.updated_at
"""

UPSERT_PROFILE = """
INSERT INTO profiles (id, name, level, race, character_class, last_played)
VALUES (:id, :name, :level, :race, :character_class, :last_played)
ON CONFLICT(id) DO UPDATE SET
    name = excluded.name,
    level = excluded.level,
    race = excluded.race,
    character_class = excluded.character_class,
    last_played = excluded.last_played
"""

PROFILE_ORDER = {
    False: "rowid",
    True: "last_played DESC, rowid DESC",
}


@dataclass
class CharacterRecord:
    """One row of the characters table.

    ``document`` is the serialized Character JSON; the other columns
    duplicate fields of it for querying.
    """

    id: str
    name: str
    document: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> CharacterRecord:
        return cls(
            id=row["id"],
            name=row["name"],
            document=row["document"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def to_params(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "document": self.document,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def profile_from_row(row: sqlite3.Row) -> CharacterProfile:
    """Build a CharacterProfile from a profiles row."""
    return CharacterProfile(
        id=row["id"],
        name=row["name"],
        level=row["level"],
        race=row["race"],
        character_class=row["character_class"],
        last_played=datetime.fromisoformat(row["last_played"]),
    )


def profile_params(profile: CharacterProfile) -> dict[str, str | int]:
    return {
        "id": profile.id,
        "name": profile.name,
        "level": profile.level,
        "race": profile.race,
        "character_class": profile.character_class,
        "last_played": profile.last_played.isoformat(),
    }


class Database:
    """Synchronous access to the character database.

    Example:
        >>> db = Database("characters.db")
        >>> db.set_state(CURRENT_CHARACTER_KEY, "abc")
        >>> db.get_state(CURRENT_CHARACTER_KEY)
        'abc'
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Open (and create if needed) the database file.

        Args:
            db_path: Database file. Defaults to the configured path.
        """
        if db_path is None:
            db_path = get_settings().storage.database_path
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()
        logger.info("Database ready", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success and rolls back on error."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            conn.executescript(SCHEMA)
            conn.execute(
                "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    # -------------------------------------------------------------------------
    # Characters
    # -------------------------------------------------------------------------

    def save_character(self, record: CharacterRecord, profile: CharacterProfile) -> None:
        """Insert or replace a character and its profile together."""
        with self._get_connection() as conn:
            conn.execute(UPSERT_CHARACTER, record.to_params())
            conn.execute(UPSERT_PROFILE, profile_params(profile))
        logger.debug("Character row written", character_id=record.id)

    def get_character(self, character_id: str) -> CharacterRecord | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM characters WHERE id = ?", (character_id,)
            ).fetchone()
        return CharacterRecord.from_row(row) if row is not None else None

    def get_all_characters(self) -> list[CharacterRecord]:
        """Get every stored character, oldest first."""
        with self._get_connection() as conn:
            rows = conn.execute("SELECT * FROM characters ORDER BY created_at, rowid").fetchall()
        return [CharacterRecord.from_row(row) for row in rows]

    def character_exists(self, character_id: str) -> bool:
        with self._get_connection() as conn:
            row = conn.execute("SELECT 1 FROM characters WHERE id = ?", (character_id,)).fetchone()
        return row is not None

    def delete_character(self, character_id: str) -> bool:
        """Delete a character, its profile and a current pointer aimed at it.

        Returns:
            Whether a character row was removed.
        """
        with self._get_connection() as conn:
            deleted = conn.execute("DELETE FROM characters WHERE id = ?", (character_id,)).rowcount
            conn.execute("DELETE FROM profiles WHERE id = ?", (character_id,))
            conn.execute(
                "DELETE FROM app_state WHERE key = ? AND value = ?",
                (CURRENT_CHARACTER_KEY, character_id),
            )
        if deleted:
            logger.debug("Character row deleted", character_id=character_id)
        return deleted > 0

    def get_character_count(self) -> int:
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM characters").fetchone()[0]

    def get_all_profiles(self, *, most_recent_first: bool = False) -> list[CharacterProfile]:
        """List profiles in insertion order, or by last played (newest first)."""
        query = f"SELECT * FROM profiles ORDER BY {PROFILE_ORDER[most_recent_first]}"
        with self._get_connection() as conn:
            rows = conn.execute(query).fetchall()
        return [profile_from_row(row) for row in rows]

    # -------------------------------------------------------------------------
    # App state
    # -------------------------------------------------------------------------

    def get_state(self, key: str) -> str | None:
        with self._get_connection() as conn:
            row = conn.execute("SELECT value FROM app_state WHERE key = ?", (key,)).fetchone()
        return row["value"] if row is not None else None

    def set_state(self, key: str, value: str) -> None:
        with self._get_connection() as conn:
            conn.execute(
                "INSERT INTO app_state (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )

    def delete_state(self, key: str) -> None:
        with self._get_connection() as conn:
            conn.execute("DELETE FROM app_state WHERE key = ?", (key,))

    def clear_all(self) -> None:
        """Remove every character, profile and state entry."""
        with self._get_connection() as conn:
            for table in ("characters", "profiles", "app_state"):
                conn.execute(f"DELETE FROM {table}")  # noqa: S608
        logger.info("Database cleared", path=str(self.db_path))


_database: Database | None = None


def get_database() -> Database:
    """Get the shared database at the configured path."""
    global _database  # noqa: PLW0603
    if _database is None:
        _database = Database()
    return _database


__all__ = [
    "CURRENT_CHARACTER_KEY",
    "CharacterRecord",
    "profile_from_row",
    "Database",
    "get_database",
]
