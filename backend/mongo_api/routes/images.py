"""
Mongo API — Image Route Handlers
=================================

What:  POST /image (upload base64 content) and GET /image/{id} (download).
How:   The upload body is the base64 text of the raw image bytes; the image
       name and MIME type travel as form fields in the query string, e.g.

           POST /image?name=a.png&mime_type=image/png
           Content-Type: text/plain

           iVBORw0KGgoAAAANSUhEUgAA...

       The response carries the new file's identifier in X-Image-Id and
       Location, which GET /image/{id} accepts.
"""

import base64
import binascii
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.requests import ClientDisconnect

from mongo_api.database import get_image_store
from mongo_api.exceptions import InvalidArgumentError
from mongo_api.models.identifier import RecordId
from mongo_api.models.image import Image
from mongo_api.schemas.common import ErrorResponse
from mongo_api.services.image_store import ImageStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Images"])

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def decode_base64_body(raw: bytes) -> bytes:
    """
    Decode standard (padded) base64. Line breaks are skipped; any other
    character outside the alphabet is an error.

    Raises:
        InvalidArgumentError: body is not valid base64
    """
    compact = raw.replace(b"\r", b"").replace(b"\n", b"")
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidArgumentError(message="Failed to decode image data", field="body")


@router.post(
    "/image",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Image stored; identifier in X-Image-Id"},
        400: {"description": "Unreadable body or invalid base64", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Upload a base64-encoded image",
)
async def upload_image(
    request: Request,
    name: str = Query(default="", description="Name to store the image under"),
    mime_type: str = Query(default="", description="MIME type of the decoded bytes"),
    images: ImageStore = Depends(get_image_store),
) -> PlainTextResponse:
    try:
        raw = await request.body()
    except ClientDisconnect:
        raise InvalidArgumentError(message="Failed to read request body", field="body")

    image = Image(name=name, data=decode_base64_body(raw), mime_type=mime_type)
    logger.info("Received image upload: name=%s, size=%d bytes", name or "<empty>", image.size)

    record_id = await images.upload(image)
    return PlainTextResponse(
        "Image uploaded successfully\n",
        headers={
            "X-Image-Id": record_id.hex,
            "Location": f"/image/{record_id.hex}",
        },
    )


@router.get(
    "/image/{image_id}",
    response_class=Response,
    responses={
        200: {"description": "Raw image bytes"},
        400: {"description": "Malformed identifier", "model": ErrorResponse},
        404: {"description": "Image not found", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Download an uploaded image",
)
async def download_image(
    image_id: str,
    images: ImageStore = Depends(get_image_store),
) -> Response:
    image = await images.download(RecordId.from_hex(image_id))
    headers = {}
    if image.name:
        headers["Content-Disposition"] = f"inline; filename*=UTF-8''{quote(image.name)}"
    return Response(
        content=image.data,
        media_type=image.mime_type or DEFAULT_MEDIA_TYPE,
        headers=headers,
    )
