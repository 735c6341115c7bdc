"""Pytest configuration and shared fixtures.

Fixtures:
- mock_logger: MagicMock standing in for LoggerProtocol
- fake_redis / cache_adapter: fakeredis-backed RedisAdapter
- rate_limiter: RateLimiterAdapter over the fake store
- database / audit_session / audit_store: SQLite in memory (aiosqlite)

Every test gets fresh instances; no singletons from the container.
"""

import asyncio
import os
from unittest.mock import MagicMock

import fakeredis.aioredis
import pytest
import pytest_asyncio

os.environ.setdefault("ENVIRONMENT", "testing")

from src.core.request_context import EMPTY_REQUEST_CONTEXT, request_context_var  # noqa: E402
from src.infrastructure.audit.sqlalchemy_adapter import SQLAlchemyAuditAdapter  # noqa: E402
from src.infrastructure.cache.redis_adapter import RedisAdapter  # noqa: E402
from src.infrastructure.persistence.database import Database  # noqa: E402
from src.infrastructure.rate_limit.rate_limiter_adapter import RateLimiterAdapter  # noqa: E402

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with fakeredis and SQLite"
    )
    config.addinivalue_line("markers", "api: HTTP tests through FastAPI TestClient")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)


@pytest.fixture(autouse=True)
def _clear_request_context():
    """Reset ambient request context so tests never leak provenance."""
    token = request_context_var.set(EMPTY_REQUEST_CONTEXT)
    yield
    request_context_var.reset(token)


@pytest.fixture
def mock_logger():
    """LoggerProtocol stand-in recording every call."""
    logger = MagicMock()
    logger.bind.return_value = logger
    logger.with_context.return_value = logger
    return logger


@pytest_asyncio.fixture
async def fake_redis():
    """Fresh in-process Redis for each test."""
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def cache_adapter(fake_redis):
    return RedisAdapter(redis_client=fake_redis)


@pytest.fixture
def rate_limiter(cache_adapter, mock_logger):
    return RateLimiterAdapter(cache=cache_adapter, logger=mock_logger)


@pytest_asyncio.fixture
async def database():
    """SQLite in memory with the schema created."""
    db = Database(database_url=SQLITE_MEMORY_URL)
    await db.create_all()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def audit_session(database):
    async with database.get_session() as session:
        yield session


@pytest.fixture
def audit_store(audit_session):
    return SQLAlchemyAuditAdapter(session=audit_session)
