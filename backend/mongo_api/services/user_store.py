"""
Mongo API — User Store (Document Store Adapter)
================================================

What:  Insert / find / delete / list operations on the users collection.
How:   Wraps a motor collection handed in by the caller; every driver error
       is translated into StoreError, a missing record into NotFoundError.
Who:   Route handlers in routes/users.py, via the get_user_store dependency.
When:  One awaited call per request.

Identifiers cross this boundary only as RecordId values; ObjectId never
leaks to the route layer.
"""

import logging
from typing import AsyncIterator

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from mongo_api.exceptions import NotFoundError, StoreError
from mongo_api.models.identifier import RecordId
from mongo_api.models.user import User

logger = logging.getLogger(__name__)


class UserStore:
    """
    Adapter between User records and a MongoDB collection.

    Error Handling Strategy:
        PyMongoError (connection refused, timeouts, write errors) → StoreError
        No document matched                                        → NotFoundError
        Anything else propagates untouched to the catch-all handler.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    @property
    def collection_name(self) -> str:
        return self._collection.name

    async def insert(self, user: User) -> RecordId:
        """
        Store a new user and return its store-assigned identifier.

        The user's own `id` is ignored; the database assigns a fresh one.
        """
        document = User(username=user.username, email=user.email).to_document()
        try:
            result = await self._collection.insert_one(document)
        except PyMongoError as e:
            logger.error("Failed to insert user: %s", str(e))
            raise StoreError(
                message="Could not create the user. Please try again.",
                context={"operation": "insert", "error_type": type(e).__name__},
            )

        record_id = RecordId(result.inserted_id)
        logger.info("User created: %s", record_id)
        return record_id

    async def find_by_id(self, record_id: RecordId) -> User:
        """
        Fetch one user by primary key.

        Raises:
            NotFoundError: No user has this identifier (→ 404)
            StoreError: Query failed (→ 500)
        """
        try:
            document = await self._collection.find_one({"_id": record_id.to_native()})
        except PyMongoError as e:
            logger.error("Database error fetching user %s: %s", record_id, str(e))
            raise StoreError(
                message="Could not retrieve the user. Please try again.",
                context={"operation": "find", "user_id": str(record_id)},
            )

        if document is None:
            raise NotFoundError(resource="user", resource_id=str(record_id))
        return User.from_document(document)

    async def delete_by_id(self, record_id: RecordId) -> None:
        """
        Remove exactly one user, matched on its primary key `_id`.

        Raises:
            NotFoundError: Zero documents matched (→ 404)
            StoreError: Delete failed (→ 500)
        """
        try:
            result = await self._collection.delete_one({"_id": record_id.to_native()})
        except PyMongoError as e:
            logger.error("Database error deleting user %s: %s", record_id, str(e))
            raise StoreError(
                message="Could not delete the user. Please try again.",
                context={"operation": "delete", "user_id": str(record_id)},
            )

        if result.deleted_count == 0:
            raise NotFoundError(resource="user", resource_id=str(record_id))
        logger.info("User deleted: %s", record_id)

    async def list_all(self) -> AsyncIterator[User]:
        """
        Lazily yield every stored user.

        Each call runs a fresh query. Order is whatever the server returns.
        A failure while iterating raises StoreError from the iterator itself,
        possibly after some users were already yielded.
        """
        try:
            async for document in self._collection.find({}):
                yield User.from_document(document)
        except PyMongoError as e:
            logger.error("Database error listing users: %s", str(e))
            raise StoreError(
                message="Could not list users. Please try again.",
                context={"operation": "list", "error_type": type(e).__name__},
            )

    async def count(self) -> int:
        try:
            return await self._collection.count_documents({})
        except PyMongoError as e:
            logger.error("Database error counting users: %s", str(e))
            raise StoreError(
                message="Could not count users. Please try again.",
                context={"operation": "count"},
            )
