"""
PostgreSQL client with connection pooling and connect retry.

Uses psycopg2 with ThreadedConnectionPool. Acquiring a connection is retried
with exponential backoff on transient failures (OperationalError); once the
attempts are exhausted DatabaseUnavailableError is raised and callers are
expected to let it propagate.

Stored procedures are invoked via CALL with OUT arguments passed as NULL;
PostgreSQL hands the OUT values back as a single result row.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, List, Tuple

import psycopg2
import psycopg2.extras
import psycopg2.pool
from psycopg2 import sql

logger = logging.getLogger(__name__)


class DatabaseUnavailableError(Exception):
    """Could not obtain a database connection after all retries. Fatal."""


class PostgresClient:
    """
    PostgreSQL client shared by services.

    Usage:
        db = PostgresClient(database_url)
        rows = db.execute("SELECT * FROM customers ORDER BY last_name")
        out = db.call_procedure("sp_VoidInvoice", {"invoice_id": 7}, out=["success"])
    """

    # Class-level connection pools shared across instances
    _connection_pools: Dict[str, psycopg2.pool.ThreadedConnectionPool] = {}
    _pools_lock = threading.RLock()

    def __init__(
        self,
        database_url: str,
        connect_retries: int = 3,
        retry_delay_seconds: float = 1.0,
        min_connections: int = 1,
        max_connections: int = 20,
        command_timeout_seconds: int = 60,
    ):
        if connect_retries < 1:
            raise ValueError("connect_retries must be at least 1")

        self._database_url = database_url
        self._connect_retries = connect_retries
        self._retry_delay_seconds = retry_delay_seconds
        self._min_connections = min_connections
        self._max_connections = max_connections
        self._command_timeout_ms = command_timeout_seconds * 1000

    def _ensure_connection_pool(self) -> psycopg2.pool.ThreadedConnectionPool:
        """Create connection pool if it doesn't exist."""
        with self._pools_lock:
            pool = self._connection_pools.get(self._database_url)
            if pool is None:
                pool = psycopg2.pool.ThreadedConnectionPool(
                    minconn=self._min_connections,
                    maxconn=self._max_connections,
                    dsn=self._database_url,
                    connect_timeout=30,
                    options=f"-c statement_timeout={self._command_timeout_ms}",
                )
                self._connection_pools[self._database_url] = pool
                logger.info("Connection pool created")
            return pool

    def _acquire(self):
        """Take a connection from the pool, retrying with exponential backoff."""
        delay = self._retry_delay_seconds

        for attempt in range(1, self._connect_retries + 1):
            try:
                pool = self._ensure_connection_pool()
                conn = pool.getconn()
                if conn is None:
                    raise RuntimeError("Could not get connection from pool")
                return pool, conn
            except psycopg2.OperationalError as e:
                if attempt == self._connect_retries:
                    logger.error(f"Database connection failed after {attempt} attempts: {e}")
                    raise DatabaseUnavailableError(
                        f"Could not connect to database after {attempt} attempts"
                    ) from e
                logger.warning(
                    f"Database connection attempt {attempt} failed: {e}. "
                    f"Retrying in {delay:g} seconds..."
                )
                time.sleep(delay)
                delay *= 2

    @contextmanager
    def get_connection(self):
        """Get a pooled connection; rolled back if the block raises."""
        pool, conn = self._acquire()

        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            pool.putconn(conn)

    def execute(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Execute query, return list of row dicts. Empty list if no results."""
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                if cur.description:
                    return [dict(row) for row in cur.fetchall()]
                conn.commit()
                return []

    def execute_single(self, query: str, params: Tuple | Dict | None = None) -> Dict[str, Any] | None:
        """Execute query, return first row or None."""
        results = self.execute(query, params)
        return results[0] if results else None

    def execute_returning(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Execute INSERT/UPDATE with RETURNING, return results."""
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                conn.commit()
                return [dict(row) for row in cur.fetchall()]

    def call_procedure(
        self,
        name: str,
        params: Dict[str, Any],
        out: List[str] | None = None,
    ) -> Dict[str, Any]:
        """
        CALL a stored procedure using named-argument notation.

        Args:
            name: Procedure name (quoted, so case is preserved)
            params: IN arguments by name, in declaration order
            out: Names of OUT arguments to read back

        Returns:
            Dict of OUT argument values (empty if the procedure has none)
        """
        out = out or []
        arguments = [
            sql.SQL("{} => {}").format(sql.Identifier(key), sql.Placeholder(key))
            for key in params
        ]
        arguments += [
            sql.SQL("{} => NULL").format(sql.Identifier(key))
            for key in out
        ]
        statement = sql.SQL("CALL {}({})").format(
            sql.Identifier(name), sql.SQL(", ").join(arguments)
        )

        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(statement, params)
                row = cur.fetchone() if cur.description else None
                conn.commit()

        if row is None:
            return {key: None for key in out}
        return {key: row.get(key) for key in out}

    def query_function(self, name: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """SELECT * FROM a set-returning function, return list of row dicts."""
        arguments = [
            sql.SQL("{} => {}").format(sql.Identifier(key), sql.Placeholder(key))
            for key in params
        ]
        statement = sql.SQL("SELECT * FROM {}({})").format(
            sql.Identifier(name), sql.SQL(", ").join(arguments)
        )
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(statement, params)
                return [dict(row) for row in cur.fetchall()]

    def close(self) -> None:
        """Close connection pool."""
        with self._pools_lock:
            if self._database_url in self._connection_pools:
                self._connection_pools[self._database_url].closeall()
                del self._connection_pools[self._database_url]

    @classmethod
    def close_all_pools(cls) -> None:
        """Close all connection pools."""
        with cls._pools_lock:
            for pool in cls._connection_pools.values():
                pool.closeall()
            cls._connection_pools.clear()
