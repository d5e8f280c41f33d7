"""SQLite database setup and migrations via aiosqlite."""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

from smarthome.config import is_dev_mode

logger = logging.getLogger(__name__)


def _get_db_path() -> str:
    """Return the database file path (production vs dev mode)."""
    if is_dev_mode():
        db_dir = Path(__file__).resolve().parent.parent.parent.parent / "data"
        db_dir.mkdir(exist_ok=True)
        return str(db_dir / "smarthome.db")
    db_dir = Path("/data")
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "smarthome.db")


SCHEMA_VERSION = 2

MIGRATIONS: dict[int, list[str]] = {
    1: [
        """
        CREATE TABLE IF NOT EXISTS devices (
            id          TEXT PRIMARY KEY,
            name        TEXT NOT NULL,
            type        TEXT NOT NULL,
            status      INTEGER NOT NULL DEFAULT 0,
            value       REAL,
            room        TEXT NOT NULL DEFAULT 'Unassigned',
            icon        TEXT NOT NULL DEFAULT '',
            created_at  TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS automation_rules (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            name            TEXT NOT NULL,
            description     TEXT NOT NULL DEFAULT '',
            condition_json  TEXT NOT NULL,
            actions_json    TEXT NOT NULL DEFAULT '[]',
            enabled         INTEGER NOT NULL DEFAULT 1,
            created_at      TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at      TEXT NOT NULL DEFAULT (datetime('now'))
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS rule_logs (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            rule_id     INTEGER NOT NULL,
            success     INTEGER NOT NULL DEFAULT 1,
            message     TEXT NOT NULL DEFAULT '',
            executed_at TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (rule_id) REFERENCES automation_rules(id) ON DELETE CASCADE
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS electricity_plans (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            provider             TEXT NOT NULL,
            plan_name            TEXT NOT NULL,
            rate_per_kwh         REAL NOT NULL,
            contract_length      INTEGER NOT NULL DEFAULT 0,
            renewable_percentage REAL NOT NULL DEFAULT 0,
            additional_fees      TEXT NOT NULL DEFAULT '',
            url                  TEXT NOT NULL DEFAULT '',
            UNIQUE (provider, plan_name)
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER NOT NULL
        )
        """,
        "INSERT INTO schema_version (version) VALUES (1)",
    ],
    2: [
        """
        CREATE TABLE IF NOT EXISTS advisor_conversations (
            id            TEXT PRIMARY KEY,
            user_message  TEXT NOT NULL,
            ai_response   TEXT NOT NULL,
            context_json  TEXT NOT NULL DEFAULT '{}',
            created_at    TEXT NOT NULL DEFAULT (datetime('now'))
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_rule_logs_rule ON rule_logs(rule_id)",
        "UPDATE schema_version SET version = 2",
    ],
}


class Database:
    """Async SQLite wrapper with migration support."""

    def __init__(self, db_path: str | None = None) -> None:
        self._db_path = db_path or _get_db_path()
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database connection and run pending migrations."""
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA foreign_keys=ON")
        await self._run_migrations()

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        """Return the active connection (asserts it exists)."""
        assert self._conn is not None, "Database not connected"
        return self._conn

    async def _run_migrations(self) -> None:
        """Apply any pending schema migrations."""
        try:
            async with self.conn.execute(
                "SELECT version FROM schema_version LIMIT 1"
            ) as cursor:
                row = await cursor.fetchone()
                current = row["version"] if row else 0
        except aiosqlite.OperationalError:
            current = 0

        for version in sorted(MIGRATIONS.keys()):
            if version > current:
                for sql in MIGRATIONS[version]:
                    await self.conn.execute(sql)
                await self.conn.commit()
                logger.info("Applied database migration v%d", version)
