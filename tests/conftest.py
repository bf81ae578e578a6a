"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path, so tests never share
rows. bcrypt runs at its minimum work factor to keep the suite fast.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shortener.core.setting import Settings
from shortener.db.session import Database
from shortener.main import create_app
from shortener.services.link_service import LinkService
from shortener.services.link_store import LinkStore

TEST_BASE_URL = "http://sho.rt"


def make_settings(database_url: str, **overrides) -> Settings:
    values = {
        "DATABASE_URL": database_url,
        "BASE_URL": TEST_BASE_URL,
        "BCRYPT_ROUNDS": 4,
        "INSERT_BACKOFF_SECONDS": 0,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(f"sqlite+aiosqlite:///{tmp_path / 'links.db'}")


@pytest_asyncio.fixture
async def database(settings):
    db = Database.from_settings(settings)
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def store(database) -> LinkStore:
    return LinkStore(database)


@pytest.fixture
def link_service(store, settings) -> LinkService:
    return LinkService(store, settings)


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def sequence_factory(*codes: str):
    """Code factory that hands out *codes* in order."""
    remaining = iter(codes)

    def factory(length: int) -> str:
        return next(remaining)

    return factory
