"""SQLite schema migrations.

Each entry in MIGRATIONS moves the database forward by one version. The
current version lives in ``PRAGMA user_version`` so re-running init_db() on an
up-to-date file is a no-op.
"""

import logging

from taskboard.core import db_client


logger = logging.getLogger(__name__)


MIGRATIONS: list[list[str]] = [
    # 1: tasks table
    [
        """
        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL CHECK (length(trim(title)) > 0),
            description TEXT,
            status TEXT NOT NULL DEFAULT 'PENDING' CHECK (status IN ('PENDING', 'COMPLETED')),
            priority TEXT NOT NULL DEFAULT 'MEDIUM' CHECK (priority IN ('LOW', 'MEDIUM', 'HIGH')),
            due_date TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL CHECK (updated_at >= created_at)
        )
        """,
    ],
    # 2: indexes for the list filters and the overdue count
    [
        "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks (status)",
        "CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks (priority)",
        "CREATE INDEX IF NOT EXISTS idx_tasks_status_due ON tasks (status, due_date)",
    ],
]

SCHEMA_VERSION = len(MIGRATIONS)


async def get_schema_version(*, db_path: str | None = None) -> int:
    """Return the schema version recorded in the database file."""
    return int(await db_client.fetch_value("PRAGMA user_version", db_path=db_path) or 0)


async def init_db(*, db_path: str | None = None) -> None:
    """Apply every pending migration to the database."""
    conn = await db_client.get_connection(db_path=db_path)
    current = await get_schema_version(db_path=db_path)

    if current >= SCHEMA_VERSION:
        logger.info("Schema up to date", extra={"version": current})
        return

    for version, statements in enumerate(MIGRATIONS[current:], start=current + 1):
        try:
            for statement in statements:
                await conn.execute(statement)
            # PRAGMA does not accept bound parameters; version is an int we control
            await conn.execute(f"PRAGMA user_version = {version:d}")
            await conn.commit()
        except Exception as e:
            await conn.rollback()
            logger.error("schema_migration_failed", extra={"version": version, "error": str(e)})
            msg = f"Failed to apply schema migration {version}: {e}"
            raise db_client.DatabaseError(msg) from e
        logger.info("Applied schema migration", extra={"version": version})
