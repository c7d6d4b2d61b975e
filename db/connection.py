"""
db/connection.py
----------------
Process-wide PostgreSQL connection provider for the repositories.

`get_connection` / `release_connection` are the pair every repository
takes by default; `pooled_connection` wraps them for one-off scripts
such as schema setup.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool
from psycopg2.extensions import connection as PgConnection

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


def _endpoint(dsn: str) -> str:
    """Host/database part of a DSN, for logs without credentials."""
    return dsn.split("@")[-1] if "@" in dsn else "unknown"


def init_pool(
    min_conn: int = DB_POOL_MIN,
    max_conn: int = DB_POOL_MAX,
    dsn: Optional[str] = None,
) -> None:
    """
    Open the shared pool. Does nothing if it is already open.

    Args:
        min_conn: Connections opened up front.
        max_conn: Upper bound on simultaneously checked-out connections.
        dsn: Connection string; defaults to DATABASE_URL from config.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    dsn = dsn or DATABASE_URL
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, dsn)
        logger.info(f"Connection pool ({min_conn}-{max_conn}) opened to {_endpoint(dsn)}")
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to open connection pool to {_endpoint(dsn)}: {e}")
        raise


def get_connection() -> PgConnection:
    """
    Check a connection out of the shared pool.

    Raises:
        RuntimeError: If init_pool() has not been called.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn: PgConnection) -> None:
    """Return a connection; the pool rolls back any transaction left open."""
    if _pool is not None:
        _pool.putconn(conn)


@contextmanager
def pooled_connection() -> Iterator[PgConnection]:
    """Check out a connection for the duration of a `with` block."""
    conn = get_connection()
    try:
        yield conn
    finally:
        release_connection(conn)


def close_pool() -> None:
    """Close every pooled connection and forget the pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Connection pool closed.")
