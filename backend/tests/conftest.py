"""
Mongo API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Route tests run the real FastAPI app through httpx's ASGITransport,
       with the store dependencies overridden by in-memory fakes, so no
       MongoDB server is needed. Adapter tests use AsyncMock driver objects.

Fixture Hierarchy:
    ├── user_store / image_store: In-memory stand-ins for UserStore / ImageStore
    ├── mongo_client: MagicMock client whose ping succeeds
    ├── test_app: Fresh app with dependency overrides installed
    └── test_client: HTTPX AsyncClient bound to test_app
"""

import os
from typing import AsyncIterator, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

# Set before any mongo_api import so the settings singleton picks them up
os.environ["MONGO_URL"] = "mongodb://localhost:27017"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mongo_api.database import Stores, get_image_store, get_stores, get_user_store
from mongo_api.exceptions import NotFoundError
from mongo_api.main import create_app
from mongo_api.models.identifier import RecordId
from mongo_api.models.image import Image
from mongo_api.models.user import User


class InMemoryUserStore:
    """Dictionary-backed double with the UserStore interface."""

    def __init__(self):
        self.users: Dict[RecordId, User] = {}
        self.fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def insert(self, user: User) -> RecordId:
        self._check()
        record_id = RecordId.generate()
        self.users[record_id] = User(username=user.username, email=user.email, id=record_id)
        return record_id

    async def find_by_id(self, record_id: RecordId) -> User:
        self._check()
        if record_id not in self.users:
            raise NotFoundError(resource="user", resource_id=str(record_id))
        return self.users[record_id]

    async def delete_by_id(self, record_id: RecordId) -> None:
        self._check()
        if self.users.pop(record_id, None) is None:
            raise NotFoundError(resource="user", resource_id=str(record_id))

    async def list_all(self) -> AsyncIterator[User]:
        self._check()
        for user in list(self.users.values()):
            yield user

    async def count(self) -> int:
        self._check()
        return len(self.users)


class InMemoryImageStore:
    """List-backed double with the ImageStore interface (every upload is kept)."""

    def __init__(self):
        self.images: List[Image] = []
        self.fail_with: Optional[Exception] = None

    async def upload(self, image: Image) -> RecordId:
        if self.fail_with is not None:
            raise self.fail_with
        record_id = RecordId.generate()
        image.id = record_id
        self.images.append(image)
        return record_id

    async def download(self, record_id: RecordId) -> Image:
        for image in self.images:
            if image.id == record_id:
                return image
        raise NotFoundError(resource="image", resource_id=str(record_id))

    async def download_by_name(self, name: str) -> Image:
        for image in reversed(self.images):
            if image.name == name:
                return image
        raise NotFoundError(resource="image", resource_id=name)


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def image_store():
    return InMemoryImageStore()


@pytest.fixture
def mongo_client():
    """MagicMock standing in for AsyncIOMotorClient; ping answers {"ok": 1}."""
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1.0})
    return client


@pytest.fixture
def mock_collection():
    """Mock motor collection; find() is synchronous and returns a cursor."""
    collection = MagicMock()
    collection.name = "users"
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.count_documents = AsyncMock()
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_bucket():
    bucket = MagicMock()
    bucket.upload_from_stream = AsyncMock()
    bucket.open_download_stream = AsyncMock()
    bucket.open_download_stream_by_name = AsyncMock()
    return bucket


@pytest.fixture
def test_app(user_store, image_store, mongo_client):
    app = create_app()
    stores = Stores(client=mongo_client, users=user_store, images=image_store)
    app.dependency_overrides[get_stores] = lambda: stores
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_image_store] = lambda: image_store
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    # The catch-all 500 handler re-raises after responding; keep the response
    transport = ASGITransport(app=test_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
