"""
Mongo API — Image Store (Blob Store Adapter)
=============================================

What:  Upload and download of named binary streams in a GridFS bucket.
How:   Wraps a motor GridFS bucket handed in by the caller. GridFS splits
       content into chunks on write and reassembles it on read.
Who:   Route handlers in routes/images.py, via the get_image_store dependency.

Naming semantics:
    Names are not unique. Uploading an existing name stores a new revision
    next to the old one; each revision has its own identifier.
    download_by_name() returns the most recent revision.
"""

import io
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorGridFSBucket
from pymongo.errors import PyMongoError

from mongo_api.exceptions import NotFoundError, StoreError
from mongo_api.models.identifier import RecordId
from mongo_api.models.image import Image

logger = logging.getLogger(__name__)


class ImageStore:
    """Adapter between Image records and a GridFS bucket."""

    def __init__(self, bucket: AsyncIOMotorGridFSBucket):
        self._bucket = bucket

    async def upload(self, image: Image) -> RecordId:
        """
        Write the image bytes under `image.name`.

        Returns:
            Identifier of the newly stored GridFS file.

        Raises:
            StoreError: GridFS write failed (→ 500)
        """
        try:
            file_id = await self._bucket.upload_from_stream(
                image.name,
                io.BytesIO(image.data),
                metadata=image.metadata(),
            )
        except PyMongoError as e:
            logger.error("Failed to store image '%s': %s", image.name, str(e))
            raise StoreError(
                message="Failed to save image data",
                context={"operation": "upload", "name": image.name, "error_type": type(e).__name__},
            )

        record_id = RecordId(file_id)
        logger.info("Image stored: %s as %s (%d bytes)", image.name, record_id, image.size)
        return record_id

    async def download(self, record_id: RecordId) -> Image:
        """
        Read back one stored revision by identifier.

        Raises:
            NotFoundError: No file with this identifier (→ 404)
            StoreError: GridFS read failed (→ 500)
        """
        try:
            grid_out = await self._bucket.open_download_stream(record_id.to_native())
            data = await grid_out.read()
        except NoFile:
            raise NotFoundError(resource="image", resource_id=str(record_id))
        except PyMongoError as e:
            logger.error("Failed to read image %s: %s", record_id, str(e))
            raise StoreError(
                message="Failed to read image data",
                context={"operation": "download", "image_id": str(record_id)},
            )
        return _to_image(grid_out, data)

    async def download_by_name(self, name: str) -> Image:
        """
        Read back the latest revision stored under `name`.

        Raises:
            NotFoundError: No file has this name (→ 404)
            StoreError: GridFS read failed (→ 500)
        """
        try:
            grid_out = await self._bucket.open_download_stream_by_name(name)
            data = await grid_out.read()
        except NoFile:
            raise NotFoundError(resource="image", resource_id=name)
        except PyMongoError as e:
            logger.error("Failed to read image '%s': %s", name, str(e))
            raise StoreError(
                message="Failed to read image data",
                context={"operation": "download", "name": name},
            )
        return _to_image(grid_out, data)


def _to_image(grid_out: Any, data: bytes) -> Image:
    metadata: Mapping[str, Any] = grid_out.metadata or {}
    created: Optional[datetime] = metadata.get("created") or grid_out.upload_date
    if created is None:
        created = datetime.now(timezone.utc)
    return Image(
        name=grid_out.filename or "",
        data=data,
        mime_type=metadata.get("mime_type") or "",
        created=created,
        id=RecordId(grid_out._id),
    )
