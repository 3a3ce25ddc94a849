"""SQLite connection setup for the edge store."""

from __future__ import annotations

from pathlib import Path

import aiosqlite


def pragmas(wal_mode: bool = True, busy_timeout_ms: int = 5000) -> list[str]:
    statements = [
        "PRAGMA synchronous = NORMAL",
        "PRAGMA temp_store = MEMORY",
        f"PRAGMA busy_timeout = {int(busy_timeout_ms)}",
    ]
    if wal_mode:
        statements.insert(0, "PRAGMA journal_mode = WAL")
    return statements


async def open_db(
    db_path: str | Path,
    *,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
) -> aiosqlite.Connection:
    """Open the database with row access by column name."""
    db = await aiosqlite.connect(str(db_path))
    db.row_factory = aiosqlite.Row

    # WAL is meaningless for in-memory databases
    use_wal = wal_mode and str(db_path) != ":memory:"
    for pragma in pragmas(use_wal, busy_timeout_ms):
        await db.execute(pragma)
    await db.commit()
    return db


async def close_db(db: aiosqlite.Connection) -> None:
    """Cleanly close database."""
    await db.commit()
    await db.close()
