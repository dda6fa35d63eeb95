"""
Mongo API — Database Connection Management
===========================================

What:  Motor client construction, adapter wiring and FastAPI dependencies.
How:   The lifespan handler (main.py) calls open_stores() once at startup.
       The client and the adapters built on it are kept on app.state and
       handed to route handlers through Depends(); nothing here is a
       module-level global.
Who:   main.py (lifecycle), routes (dependencies), health route (ping).

Connection model:
    One AsyncIOMotorClient per process. The driver keeps its own pool and is
    safe to share between concurrent requests.
"""

import logging
from dataclasses import dataclass

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorGridFSBucket
from pymongo.errors import PyMongoError

from mongo_api.config import Settings
from mongo_api.services.image_store import ImageStore
from mongo_api.services.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    """Everything the request handlers need, built from a single client."""

    client: AsyncIOMotorClient
    users: UserStore
    images: ImageStore


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """
    Build the Motor client. No network I/O happens until the first operation.

    tz_aware: datetimes read back (GridFS upload dates, image metadata) are
    UTC-aware, matching what uploads store.
    """
    return AsyncIOMotorClient(
        settings.mongo_url,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
        tz_aware=True,
    )


def open_stores(settings: Settings) -> Stores:
    client = create_client(settings)
    database = client[settings.mongo_database]
    stores = Stores(
        client=client,
        users=UserStore(database[settings.users_collection]),
        images=ImageStore(
            AsyncIOMotorGridFSBucket(database, bucket_name=settings.images_bucket)
        ),
    )
    logger.info(
        "MongoDB configured: database=%s collection=%s bucket=%s",
        settings.mongo_database,
        settings.users_collection,
        settings.images_bucket,
    )
    return stores


def close_stores(stores: Stores) -> None:
    """Close every pooled connection. Called once during shutdown."""
    stores.client.close()


async def ping(client: AsyncIOMotorClient) -> bool:
    """Round-trip a ping command; False when the server cannot be reached."""
    try:
        await client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("MongoDB ping failed: %s", str(e))
        return False


# ── Request Dependencies ──────────────────────────────────────────────────
def get_stores(request: Request) -> Stores:
    return request.app.state.stores


def get_user_store(request: Request) -> UserStore:
    """
    FastAPI dependency providing the shared UserStore.

    Example usage in a route:
        @router.get("/users/{user_id}")
        async def get_user(user_id: str, users: UserStore = Depends(get_user_store)):
            return await users.find_by_id(RecordId.from_hex(user_id))
    """
    return get_stores(request).users


def get_image_store(request: Request) -> ImageStore:
    return get_stores(request).images
