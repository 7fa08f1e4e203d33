"""Tests for the PostgreSQL store.

Unit tests run against a mocked asyncpg pool. The live tests at the bottom
need a reachable database and are skipped unless SHORTENER_TEST_DB_HOST is set.
"""

import asyncio
import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from config import Config
from shortener.database.postgres import MAX_RECORD_ID, PostgresURLStore
from shortener.engine import ShortenerEngine
from shortener.errors import NotFoundError, StoreError


class FakeAcquire:
    """Async context manager returned by pool.acquire()."""

    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def conn():
    conn = MagicMock()
    conn.fetchval = AsyncMock(return_value=7)
    conn.fetchrow = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="CREATE TABLE")
    return conn


@pytest.fixture
def pool(conn):
    pool = MagicMock()
    pool.acquire = MagicMock(side_effect=lambda: FakeAcquire(conn))
    pool.close = AsyncMock()
    return pool


@pytest.fixture
def pg_store(pool, logger):
    store = PostgresURLStore(logger=logger)
    store._pool = pool
    return store


@pytest.mark.asyncio
class TestPostgresURLStore:
    """Test the store against a mocked pool."""

    async def test_upsert_url(self, pg_store, conn):
        """Upsert is a single statement that returns the row id."""
        record_id = await pg_store.upsert_url("https://example.com")

        assert record_id == 7
        sql, url = conn.fetchval.call_args.args
        assert "ON CONFLICT (url) DO UPDATE SET created_at = NOW()" in sql
        assert "RETURNING id" in sql
        assert url == "https://example.com"

    async def test_upsert_url_driver_error(self, pg_store, conn):
        conn.fetchval.side_effect = asyncpg.InterfaceError("connection is closed")

        with pytest.raises(StoreError) as exc_info:
            await pg_store.upsert_url("https://example.com")

        assert "upsert url" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, asyncpg.InterfaceError)

    async def test_get_url_by_id(self, pg_store, conn):
        created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        conn.fetchrow.return_value = {"id": 3, "url": "https://example.com", "created_at": created_at}

        record = await pg_store.get_url_by_id(3)

        assert record.id == 3
        assert record.url == "https://example.com"
        assert record.created_at == created_at
        assert conn.fetchrow.call_args.args[1] == 3

    async def test_get_url_by_id_missing(self, pg_store):
        assert await pg_store.get_url_by_id(42) is None

    async def test_get_url_by_id_out_of_range(self, pg_store, conn):
        """Ids a BIGSERIAL column cannot hold are absent without a query."""
        assert await pg_store.get_url_by_id(MAX_RECORD_ID + 1) is None
        assert await pg_store.get_url_by_id(-1) is None
        conn.fetchrow.assert_not_called()

    async def test_get_url_by_id_driver_error(self, pg_store, conn):
        conn.fetchrow.side_effect = ConnectionResetError("reset by peer")

        with pytest.raises(StoreError):
            await pg_store.get_url_by_id(3)

    async def test_health_check(self, pg_store, conn):
        assert await pg_store.health_check() is True
        conn.fetchval.assert_awaited_with("SELECT true")

    async def test_health_check_failure(self, pg_store, conn):
        conn.fetchval.side_effect = asyncpg.InterfaceError("pool is closed")
        assert await pg_store.health_check() is False

    async def test_ensure_tables(self, pg_store, conn):
        await pg_store.ensure_tables()
        assert "CREATE TABLE IF NOT EXISTS urls" in conn.execute.call_args.args[0]

    async def test_close(self, pg_store, pool):
        await pg_store.close()
        await pg_store.close()

        pool.close.assert_awaited_once()
        assert pg_store._pool is None

    async def test_connect_creates_pool_once(self, pool, logger, monkeypatch):
        create_pool = AsyncMock(return_value=pool)
        monkeypatch.setattr(asyncpg, "create_pool", create_pool)
        store = PostgresURLStore(host="db", ssl="require", connect_timeout_seconds=2.5, logger=logger)

        await asyncio.gather(store.connect(), store.connect())

        create_pool.assert_awaited_once()
        kwargs = create_pool.call_args.kwargs
        assert kwargs["host"] == "db"
        assert kwargs["ssl"] == "require"
        assert kwargs["timeout"] == 2.5

    async def test_connect_creates_tables_when_enabled(self, pool, conn, logger, monkeypatch):
        monkeypatch.setattr(asyncpg, "create_pool", AsyncMock(return_value=pool))
        store = PostgresURLStore(create_tables=True, logger=logger)

        await store.connect()

        conn.execute.assert_awaited_once()

    async def test_connect_failure(self, logger, monkeypatch):
        monkeypatch.setattr(asyncpg, "create_pool", AsyncMock(side_effect=ConnectionRefusedError("refused")))
        store = PostgresURLStore(host="db", port=5433, logger=logger)

        with pytest.raises(StoreError) as exc_info:
            await store.connect()

        assert "db:5433" in str(exc_info.value)

    async def test_lazy_connect(self, pool, conn, logger, monkeypatch):
        """The first query connects when connect() was never called."""
        monkeypatch.setattr(asyncpg, "create_pool", AsyncMock(return_value=pool))
        store = PostgresURLStore(logger=logger)

        assert await store.upsert_url("https://example.com") == 7


class TestFromConfig:
    """Test building a store from configuration."""

    def test_from_config(self):
        config = Config(
            _env_file=None,
            db_host="db.internal",
            db_port=6432,
            db_name="shortener",
            db_user="svc",
            db_password="secret",
            db_pool_max_size=4,
        )

        store = PostgresURLStore.from_config(config)

        assert store.host == "db.internal"
        assert store.port == 6432
        assert store.database == "shortener"
        assert store.user == "svc"
        assert store._password == "secret"
        assert store.pool_max_size == 4
        assert store.ssl is False

    def test_from_config_tls(self):
        config = Config(_env_file=None, db_disable_tls=False)
        assert PostgresURLStore.from_config(config).ssl == "require"


live = pytest.mark.skipif(
    not os.getenv("SHORTENER_TEST_DB_HOST"),
    reason="SHORTENER_TEST_DB_HOST not set",
)


@pytest.fixture
async def live_store(logger):
    store = PostgresURLStore(
        host=os.environ["SHORTENER_TEST_DB_HOST"],
        port=int(os.getenv("SHORTENER_TEST_DB_PORT", "5432")),
        database=os.getenv("SHORTENER_TEST_DB_NAME", "postgres"),
        user=os.getenv("SHORTENER_TEST_DB_USER", "postgres"),
        password=os.getenv("SHORTENER_TEST_DB_PASSWORD", "postgres"),
        create_tables=True,
        logger=logger,
    )
    await store.connect()
    yield store
    await store.close()


@live
@pytest.mark.asyncio
class TestPostgresLive:
    """End-to-end tests against a real database."""

    async def test_round_trip(self, live_store, logger):
        engine = ShortenerEngine(store=live_store, logger=logger, default_timeout=5.0)
        url = f"https://example.com/live/{datetime.now(timezone.utc).timestamp()}"

        code = await engine.shorten(url)

        assert await engine.shorten(url) == code
        assert await engine.expand(code) == url

    async def test_concurrent_upsert_same_url(self, live_store):
        url = f"https://example.com/live-race/{datetime.now(timezone.utc).timestamp()}"

        ids = await asyncio.gather(*[live_store.upsert_url(url) for _ in range(20)])

        assert len(set(ids)) == 1

    async def test_unknown_code(self, live_store, logger):
        engine = ShortenerEngine(store=live_store, logger=logger)

        with pytest.raises(NotFoundError):
            await engine.expand("zzzzzzzzzzzzzzzzzzzz")

    async def test_health_check(self, live_store):
        assert await live_store.health_check() is True
