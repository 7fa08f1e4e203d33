"""PostgreSQL implementation for URL shortener."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, Union

import asyncpg

from ..errors import StoreError
from .base import URLStoreBase
from .models import URLRecord


# Largest value a BIGSERIAL id can hold
MAX_RECORD_ID = 2 ** 63 - 1

# Driver failures that are reported as StoreError
DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)
CONNECT_ERRORS = DRIVER_ERRORS + (asyncio.TimeoutError,)


class PostgresURLStore(URLStoreBase):
    """PostgreSQL implementation of the durable URL store."""

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS urls (
        id BIGSERIAL PRIMARY KEY,
        url TEXT NOT NULL UNIQUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );
    """

    # Single statement so concurrent submissions of one url never race
    UPSERT_SQL = """
    INSERT INTO urls (url, created_at) VALUES ($1, NOW())
    ON CONFLICT (url) DO UPDATE SET created_at = NOW()
    RETURNING id
    """

    SELECT_BY_ID_SQL = "SELECT id, url, created_at FROM urls WHERE id = $1"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "postgres",
        user: str = "postgres",
        password: str = "postgres",
        pool_min_size: int = 1,
        pool_max_size: int = 10,
        ssl: Union[bool, str] = False,
        connect_timeout_seconds: float = 5.0,
        create_tables: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize PostgreSQL store.

        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            password: Database password
            pool_min_size: Minimum size of connection pool
            pool_max_size: Maximum size of connection pool
            ssl: False to disable TLS, or an asyncpg ssl mode such as "require"
            connect_timeout_seconds: Connection timeout in seconds
            create_tables: Create the urls table on connect
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self._password = password
        self.pool_min_size = pool_min_size
        self.pool_max_size = pool_max_size
        self.ssl = ssl
        self.connect_timeout_seconds = connect_timeout_seconds
        self.create_tables = create_tables

        self._pool: Optional[asyncpg.Pool] = None
        self._pool_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config, logger: Optional[logging.Logger] = None) -> "PostgresURLStore":
        """Build a store from application configuration."""
        return cls(
            host=config.db_host,
            port=config.db_port,
            database=config.db_name,
            user=config.db_user,
            password=config.db_password.get_secret_value(),
            pool_min_size=config.db_pool_min_size,
            pool_max_size=config.db_pool_max_size,
            ssl=False if config.db_disable_tls else "require",
            connect_timeout_seconds=config.db_connect_timeout_seconds,
            create_tables=config.db_create_tables,
            logger=logger,
        )

    async def connect(self) -> None:
        """Create the connection pool (and the table if enabled)."""
        async with self._pool_lock:
            if self._pool is not None:
                return

            self.logger.debug(
                f"Creating connection pool: host={self.host}, port={self.port}, "
                f"database={self.database}, user={self.user}"
            )
            try:
                self._pool = await asyncpg.create_pool(
                    host=self.host,
                    port=self.port,
                    database=self.database,
                    user=self.user,
                    password=self._password,
                    min_size=self.pool_min_size,
                    max_size=self.pool_max_size,
                    timeout=self.connect_timeout_seconds,
                    ssl=self.ssl,
                )
            except CONNECT_ERRORS as e:
                raise StoreError(f"connect to {self.host}:{self.port}/{self.database}: {e}") from e

        if self.create_tables:
            await self.ensure_tables()

    async def _get_pool(self) -> asyncpg.Pool:
        """Get the connection pool, connecting on first use."""
        if self._pool is None:
            await self.connect()
        return self._pool

    @asynccontextmanager
    async def _get_connection(self):
        """Get a database connection from the pool."""
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            yield conn

    async def ensure_tables(self) -> None:
        """Create the urls table if it doesn't exist."""
        self.logger.info("Creating urls table if not exists...")
        try:
            async with self._get_connection() as conn:
                await conn.execute(self.CREATE_TABLE_SQL)
        except DRIVER_ERRORS as e:
            raise StoreError(f"create urls table: {e}") from e
        self.logger.info("Table creation completed successfully")

    async def upsert_url(self, url: str) -> int:
        """Insert url or refresh its created_at, returning the row id."""
        try:
            async with self._get_connection() as conn:
                return await conn.fetchval(self.UPSERT_SQL, url)
        except DRIVER_ERRORS as e:
            raise StoreError(f"upsert url: {e}") from e

    async def get_url_by_id(self, record_id: int) -> Optional[URLRecord]:
        """Get the record for an id, or None if there is none."""
        if not 0 <= record_id <= MAX_RECORD_ID:
            return None

        try:
            async with self._get_connection() as conn:
                row = await conn.fetchrow(self.SELECT_BY_ID_SQL, record_id)
        except DRIVER_ERRORS as e:
            raise StoreError(f"select url by id({record_id}): {e}") from e

        if row:
            return URLRecord.from_row(row)
        return None

    async def health_check(self) -> bool:
        """Check if database is healthy.

        Returns:
            True if healthy, False otherwise
        """
        try:
            async with self._get_connection() as conn:
                await conn.fetchval("SELECT true")
            return True
        except Exception as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is None:
            return
        try:
            await self._pool.close()
            self.logger.debug("Closed connection pool")
        except DRIVER_ERRORS as e:
            self.logger.error(f"Error closing pool: {e}")
        finally:
            self._pool = None
