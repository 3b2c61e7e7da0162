"""
Database connection and utilities
"""
import asyncpg
from typing import Optional
import logging

from ...config import settings

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id BIGSERIAL PRIMARY KEY,
        user_id VARCHAR(64) UNIQUE NOT NULL,
        name VARCHAR(255),
        username VARCHAR(64),
        avatar_url TEXT,
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS posts (
        id BIGSERIAL PRIMARY KEY,
        title TEXT NOT NULL,
        asset_url TEXT NOT NULL,
        profile_id BIGINT NOT NULL REFERENCES profiles(id),
        user_id VARCHAR(64) NOT NULL,
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_posts_profile_created
    ON posts (profile_id, created_at DESC)
    """,
    """
    CREATE TABLE IF NOT EXISTS profile_settings (
        profile_id BIGINT PRIMARY KEY REFERENCES profiles(id),
        theme VARCHAR(16) NOT NULL DEFAULT 'system',
        updated_at TIMESTAMP DEFAULT NOW()
    )
    """,
)


class DatabaseConnection:
    """Database connection manager"""

    def __init__(self):
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Create database connection pool"""
        try:
            self.pool = await asyncpg.create_pool(
                settings.DATABASE_URL,
                min_size=1,
                max_size=settings.DB_POOL_SIZE,
                command_timeout=60,
            )
            logger.info(f"Database pool created with size {settings.DB_POOL_SIZE}")

            await self._init_schema()
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    async def disconnect(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            logger.info("Database pool closed")

    async def _init_schema(self):
        """Create tables if they don't exist"""
        async with self.pool.acquire() as conn:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)
        logger.info("Database schema initialized")

    async def fetch_one(self, query: str, *args):
        """Fetch a single row"""
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetch_all(self, query: str, *args):
        """Fetch all rows"""
        async with self.pool.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetch_value(self, query: str, *args):
        """Fetch the first column of the first row"""
        async with self.pool.acquire() as conn:
            return await conn.fetchval(query, *args)

    async def execute(self, query: str, *args):
        """Execute a query without returning results"""
        async with self.pool.acquire() as conn:
            return await conn.execute(query, *args)


# Global database instance
db_connection = DatabaseConnection()


async def get_db_connection():
    """Dependency for getting database connection"""
    return db_connection
