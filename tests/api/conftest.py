"""API test fixtures.

The application lifespan creates the audit schema, so every API test gets
its own SQLite file instead of the default database in the working
directory.
"""

import pytest

from src.core.config import settings
from src.core.container import get_database


@pytest.fixture(autouse=True)
def isolated_database(tmp_path, monkeypatch):
    """Point the container's database at a fresh file for this test."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'usage_guard.db'}"
    monkeypatch.setattr(settings, "database_url", url)
    get_database.cache_clear()
    yield url
    get_database.cache_clear()
