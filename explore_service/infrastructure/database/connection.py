"""
Database connection and utilities
"""
import asyncpg
from contextlib import asynccontextmanager
from typing import Optional, List, Dict, Any, AsyncIterator
import logging

from ...config import settings

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """PostgreSQL connection manager using asyncpg"""

    def __init__(self, database_url: Optional[str] = None):
        self.pool: Optional[asyncpg.Pool] = None
        self.database_url = database_url or settings.DATABASE_URL

    async def connect(self):
        """Create database connection pool"""
        try:
            self.pool = await asyncpg.create_pool(
                self.database_url,
                min_size=1,
                max_size=settings.DB_POOL_SIZE,
                command_timeout=60,
            )
            logger.info(f"Database pool created with size {settings.DB_POOL_SIZE}")
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    async def disconnect(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            logger.info("Database pool closed")

    async def fetch_one(self, query: str, *args) -> Optional[Dict[str, Any]]:
        """Fetch a single row"""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *args)
            return dict(row) if row else None

    async def fetch_all(self, query: str, *args) -> List[Dict[str, Any]]:
        """Fetch all rows"""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, *args)
            return [dict(row) for row in rows]

    async def fetch_val(self, query: str, *args) -> Any:
        """Fetch the first column of the first row"""
        async with self.pool.acquire() as conn:
            return await conn.fetchval(query, *args)

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[asyncpg.Connection]:
        """Read-only connection where every query sees the same snapshot"""
        async with self.pool.acquire() as conn:
            async with conn.transaction(isolation="repeatable_read", readonly=True):
                yield conn


# Global database instance
db_connection = DatabaseConnection()


async def get_db_connection() -> DatabaseConnection:
    """Dependency for getting database connection"""
    return db_connection
