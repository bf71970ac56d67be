"""
PostgresService - PostgreSQL connection management.

Provides a connection pool and query helpers for the resource store.
Resources are stored as one JSONB document per row, with the columns the
store filters and sorts on (slug, kind, status, title, ...) lifted out and
indexed. The unique index on slug backs slug disambiguation; the version
column backs compare-and-set updates.
"""

from typing import Any, Optional

import asyncpg
from loguru import logger

RESOURCES_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    id TEXT PRIMARY KEY,
    slug TEXT NOT NULL,
    kind TEXT NOT NULL,
    title TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    processed BOOLEAN NOT NULL DEFAULT FALSE,
    skipped BOOLEAN NOT NULL DEFAULT FALSE,
    version INTEGER NOT NULL DEFAULT 1,
    document JSONB NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_{table}_slug ON {table} (slug);
CREATE INDEX IF NOT EXISTS idx_{table}_kind_status ON {table} (kind, status);
CREATE INDEX IF NOT EXISTS idx_{table}_title ON {table} (title);
"""


class PostgresService:
    """
    PostgreSQL database service.

    Call connect() before use and disconnect() when done.
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        pool_min_size: Optional[int] = None,
        pool_max_size: Optional[int] = None,
    ):
        """
        Initialize PostgreSQL service.

        Args:
            connection_string: PostgreSQL connection string (defaults to settings)
            pool_min_size: Minimum pool size (defaults to settings)
            pool_max_size: Maximum pool size (defaults to settings)
        """
        from ...settings import settings

        self.connection_string = connection_string or settings.postgres.connection_string
        self.pool_min_size = pool_min_size or settings.postgres.pool_min_size
        self.pool_max_size = pool_max_size or settings.postgres.pool_max_size
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        """Establish database connection pool."""
        logger.info(f"Connecting to PostgreSQL with pool size {self.pool_max_size}")
        self.pool = await asyncpg.create_pool(
            self.connection_string,
            min_size=self.pool_min_size,
            max_size=self.pool_max_size,
        )
        logger.info("PostgreSQL connection pool established")

    async def disconnect(self) -> None:
        """Close database connection pool."""
        if self.pool:
            logger.info("Closing PostgreSQL connection pool")
            await self.pool.close()
            self.pool = None
            logger.info("PostgreSQL connection pool closed")

    def _require_pool(self) -> asyncpg.Pool:
        if not self.pool:
            raise RuntimeError("PostgreSQL pool not connected. Call connect() first.")
        return self.pool

    async def execute(self, query: str, *params: Any) -> str:
        """Execute a statement and return its status tag (e.g. 'UPDATE 1')."""
        async with self._require_pool().acquire() as conn:
            return await conn.execute(query, *params)

    async def fetch(self, query: str, *params: Any) -> list[dict[str, Any]]:
        """
        Execute SQL query and return results.

        Returns:
            List of result rows as dicts
        """
        async with self._require_pool().acquire() as conn:
            rows = await conn.fetch(query, *params)
            return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *params: Any) -> Optional[dict[str, Any]]:
        """Execute SQL query and return the first row, or None."""
        async with self._require_pool().acquire() as conn:
            row = await conn.fetchrow(query, *params)
            return dict(row) if row else None

    async def fetchval(self, query: str, *params: Any) -> Any:
        async with self._require_pool().acquire() as conn:
            return await conn.fetchval(query, *params)

    async def init_schema(self, table_name: str = "resources") -> None:
        """Create the resources table and its indexes if missing."""
        logger.info(f"Ensuring schema for table {table_name}")
        async with self._require_pool().acquire() as conn:
            await conn.execute(RESOURCES_DDL.format(table=table_name))
        logger.info(f"Schema ready: {table_name}")
