"""Database connection helpers."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import psycopg
from psycopg.rows import dict_row

from crp.config import Settings


async def get_connection(settings: Optional[Settings] = None) -> psycopg.AsyncConnection:
    """Create a new async database connection."""
    settings = settings or Settings()
    return await psycopg.AsyncConnection.connect(settings.get_database_url())


@asynccontextmanager
async def db_cursor(settings: Optional[Settings] = None) -> AsyncIterator[psycopg.AsyncCursor]:
    """Yield a dict-row cursor with automatic commit/rollback."""
    conn = await get_connection(settings)
    try:
        async with conn.cursor(row_factory=dict_row) as cursor:
            yield cursor
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise
    finally:
        await conn.close()
