"""Pytest configuration and fixtures."""

import asyncio
from datetime import datetime, timezone
from typing import Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortener.common.logging_config import setup_logging
from shortener.database.base import URLStoreBase
from shortener.database.models import URLRecord
from shortener.engine import ShortenerEngine
from shortener.errors import StoreError
from web_app import create_app


class InMemoryURLStore(URLStoreBase):
    """Store fake with the same contract as PostgresURLStore.

    Ids start at 1 like a BIGSERIAL column. The check-and-insert in
    upsert_url runs without awaiting, so it is atomic on the event loop.
    """

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.fail_with: Optional[Exception] = None
        self.healthy = True
        self.calls = 0
        self.closed = False
        self.records: Dict[int, URLRecord] = {}
        self._ids_by_url: Dict[str, int] = {}
        self._next_id = 1

    async def _io(self):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with

    async def connect(self) -> None:
        pass

    async def upsert_url(self, url: str) -> int:
        await self._io()
        now = datetime.now(timezone.utc)
        record_id = self._ids_by_url.get(url)
        if record_id is None:
            record_id = self._next_id
            self._next_id += 1
            self._ids_by_url[url] = record_id
        self.records[record_id] = URLRecord(id=record_id, url=url, created_at=now)
        return record_id

    async def get_url_by_id(self, record_id: int) -> Optional[URLRecord]:
        await self._io()
        return self.records.get(record_id)

    async def health_check(self) -> bool:
        await self._io()
        return self.healthy

    async def close(self) -> None:
        self.closed = True

    def count_url(self, url: str) -> int:
        return sum(1 for record in self.records.values() if record.url == url)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store():
    """Create in-memory store."""
    return InMemoryURLStore()


@pytest.fixture
def failing_store():
    """Create a store whose every call fails."""
    store = InMemoryURLStore()
    store.fail_with = StoreError("connection refused")
    return store


@pytest.fixture
def engine(store, logger):
    """Create engine over the in-memory store."""
    return ShortenerEngine(store=store, logger=logger)


@pytest.fixture
def config():
    """Create test configuration."""
    return Config(build="test", readiness_timeout_seconds=0.2)


@pytest.fixture
def app(engine, config):
    """Create test FastAPI app."""
    return create_app(engine=engine, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
