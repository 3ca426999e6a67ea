"""
Shared pytest fixtures.

No real MongoDB is used: the Motor client and collection are replaced with
MagicMock/AsyncMock objects wired the way the driver is called, and the app is
built with that fake client injected so the lifespan never connects.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Required settings for anything that reads the environment directly
os.environ.setdefault("USERNAME", "tester")
os.environ.setdefault("PASSWORD", "s3cret")
os.environ.setdefault("CLUSTER", "cluster0.example.mongodb.net")
os.environ["LOG_LEVEL"] = "WARNING"

from mflix_api.core.config import load_settings  # noqa: E402
from mflix_api.server import create_app  # noqa: E402


def make_cursor(documents=None, error=None):
    """A cursor stand-in whose to_list() returns the documents or raises."""
    cursor = MagicMock()
    if error is not None:
        cursor.to_list = AsyncMock(side_effect=error)
    else:
        cursor.to_list = AsyncMock(return_value=list(documents or []))
    return cursor


@pytest.fixture
def cursor_factory():
    return make_cursor


@pytest.fixture
def settings():
    return load_settings(
        _env_file=None,
        USERNAME="tester",
        PASSWORD="s3cret",
        CLUSTER="cluster0.example.mongodb.net",
    )


@pytest.fixture
def fake_collection():
    """
    Stand-in for AsyncIOMotorCollection.

    Usage:
        fake_collection.find.return_value = make_cursor([...])
        fake_collection.find_one.return_value = {...}
    """
    collection = MagicMock()
    collection.name = "movies"
    collection.find.return_value = make_cursor([])
    collection.aggregate.return_value = make_cursor([])
    collection.find_one = AsyncMock(return_value=None)
    return collection


@pytest.fixture
def fake_mongo_client(fake_collection):
    """client[db][collection] resolves to fake_collection for any names."""
    client = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = fake_collection
    client.admin.command = AsyncMock(return_value={"ok": 1.0})
    return client


@pytest.fixture
def app(settings, fake_mongo_client):
    return create_app(settings, mongo_client=fake_mongo_client)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
