"""Async SQLite access for taskboard.

Connections are cached per (thread, event loop, database file). Record helpers
take a table name and plain dicts; any driver failure surfaces as DatabaseError
and a missing row as RecordNotFoundError.
"""

import asyncio
import logging
import re
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite

from taskboard.core.config import settings
from taskboard.core.errors import StoreError


logger = logging.getLogger(__name__)

# Fixed width, so lexical comparison in SQL matches chronological order
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class DatabaseError(StoreError):
    """A database operation failed."""


class RecordNotFoundError(KeyError):
    """No record exists for the requested id."""


def _check_identifiers(*names: str) -> None:
    for name in names:
        if not _IDENTIFIER.match(name):
            raise ValueError(f"Invalid SQL identifier: {name!r}")


def format_timestamp(value: datetime) -> str:
    """Encode a datetime as a fixed-width UTC string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str | None) -> datetime | None:
    """Decode a stored timestamp back into an aware UTC datetime."""
    if value is None:
        return None
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=UTC)
    except ValueError:
        parsed = datetime.fromisoformat(value)
        return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed.astimezone(UTC)


def _to_sql(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, Enum):
        return value.value
    return value


def get_db_path(db_path: str | None = None) -> Path:
    return Path(db_path or settings.database_path).resolve()


_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_connections_lock = asyncio.Lock()


def _connection_key(db_path: str | None) -> tuple[int, int, str]:
    return threading.get_ident(), id(asyncio.get_running_loop()), str(get_db_path(db_path))


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Return the cached connection for this thread, loop and file, opening it on first use."""
    key = _connection_key(db_path)
    conn = _connections.get(key)
    if conn is not None:
        return conn

    async with _connections_lock:
        if key in _connections:
            return _connections[key]

        path = Path(key[2])
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA journal_mode = WAL")
        _connections[key] = conn

    logger.info("sqlite_connection_opened", extra={"db_path": key[2], "thread_id": key[0], "loop_id": key[1]})
    return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached connection for this thread, loop and file, if one is open."""
    key = _connection_key(db_path)
    async with _connections_lock:
        conn = _connections.pop(key, None)
    if conn is None:
        return
    try:
        await conn.close()
    except aiosqlite.Error as e:
        logger.warning("sqlite_close_failed", extra={"db_path": key[2], "error": str(e)})
    else:
        logger.info("sqlite_connection_closed", extra={"db_path": key[2]})


@contextmanager
def _translate_errors(operation: str, table: str | None = None, **context: Any) -> Iterator[None]:
    """Re-raise driver failures inside the block as DatabaseError."""
    try:
        yield
    except (RecordNotFoundError, DatabaseError):
        raise
    except aiosqlite.OperationalError as e:
        logger.error(f"{operation}_failed", extra={"table": table, "error": str(e), **context})
        if table and "no such table" in str(e):
            raise DatabaseError(f"Table '{table}' does not exist; run init_db() first") from e
        raise DatabaseError(f"{operation} failed: {e}") from e
    except (aiosqlite.Error, ValueError) as e:
        logger.error(f"{operation}_failed", extra={"table": table, "error": str(e), **context})
        raise DatabaseError(f"{operation} failed: {e}") from e


def _rows_as_dicts(cursor: aiosqlite.Cursor, rows: Sequence[Sequence[Any]]) -> list[dict[str, Any]]:
    columns = [column[0] for column in cursor.description]
    return [dict(zip(columns, row, strict=True)) for row in rows]


async def create_record(*, collection: str, data: dict[str, Any], db_path: str | None = None) -> dict[str, Any]:
    """Insert a row (``data`` must carry its ``id``) and return it as stored."""
    record_id = str(data["id"])
    with _translate_errors("create_record", collection, record_id=record_id):
        _check_identifiers(collection, *data)
        conn = await get_connection(db_path=db_path)
        placeholders = ", ".join("?" * len(data))
        query = f"INSERT INTO {collection} ({', '.join(data)}) VALUES ({placeholders})"  # noqa: S608
        await conn.execute(query, [_to_sql(v) for v in data.values()])
        await conn.commit()

    logger.info("record_created", extra={"table": collection, "record_id": record_id})
    return await get_record(collection=collection, record_id=record_id, db_path=db_path)


async def get_record(*, collection: str, record_id: str, db_path: str | None = None) -> dict[str, Any]:
    with _translate_errors("get_record", collection, record_id=record_id):
        _check_identifiers(collection)
        conn = await get_connection(db_path=db_path)
        cursor = await conn.execute(f"SELECT * FROM {collection} WHERE id = ?", (record_id,))  # noqa: S608
        row = await cursor.fetchone()
        if row is None:
            raise RecordNotFoundError(f"{collection}/{record_id}")
        return _rows_as_dicts(cursor, [row])[0]


async def update_record(
    *, collection: str, record_id: str, data: dict[str, Any], db_path: str | None = None
) -> dict[str, Any]:
    """Set the given columns on one row and return the row afterwards."""
    if not data:
        raise ValueError("Empty update payload")

    with _translate_errors("update_record", collection, record_id=record_id):
        _check_identifiers(collection, *data)
        conn = await get_connection(db_path=db_path)
        assignments = ", ".join(f"{column} = ?" for column in data)
        cursor = await conn.execute(
            f"UPDATE {collection} SET {assignments} WHERE id = ?",  # noqa: S608
            [*(_to_sql(v) for v in data.values()), record_id],
        )
        await conn.commit()
        if cursor.rowcount == 0:
            raise RecordNotFoundError(f"{collection}/{record_id}")

    logger.info("record_updated", extra={"table": collection, "record_id": record_id, "columns": sorted(data)})
    return await get_record(collection=collection, record_id=record_id, db_path=db_path)


async def delete_record(*, collection: str, record_id: str, db_path: str | None = None) -> None:
    with _translate_errors("delete_record", collection, record_id=record_id):
        _check_identifiers(collection)
        conn = await get_connection(db_path=db_path)
        cursor = await conn.execute(f"DELETE FROM {collection} WHERE id = ?", (record_id,))  # noqa: S608
        await conn.commit()
        if cursor.rowcount == 0:
            raise RecordNotFoundError(f"{collection}/{record_id}")

    logger.info("record_deleted", extra={"table": collection, "record_id": record_id})


async def fetch_all(query: str, params: Sequence[Any] = (), *, db_path: str | None = None) -> list[dict[str, Any]]:
    """Run a read query and return every row as a dict.

    The caller owns the SQL text and must only interpolate checked identifiers.
    """
    with _translate_errors("fetch_all"):
        conn = await get_connection(db_path=db_path)
        cursor = await conn.execute(query, [_to_sql(p) for p in params])
        return _rows_as_dicts(cursor, await cursor.fetchall())


async def fetch_value(query: str, params: Sequence[Any] = (), *, db_path: str | None = None) -> Any:
    """Run a read query and return the first column of the first row, or None."""
    with _translate_errors("fetch_value"):
        conn = await get_connection(db_path=db_path)
        cursor = await conn.execute(query, [_to_sql(p) for p in params])
        row = await cursor.fetchone()
        return row[0] if row is not None else None


async def init_db(*, db_path: str | None = None) -> None:
    """Create or migrate the schema in the configured database."""
    from taskboard.core import schema  # noqa: PLC0415 - schema imports this module

    await schema.init_db(db_path=db_path)
