"""
Mongo API — Image Endpoint Tests
=================================

What:  POST /image and GET /image/{id} with an in-memory ImageStore.
"""

import base64

import pytest

from mongo_api.exceptions import InvalidArgumentError, StoreError
from mongo_api.routes.images import decode_base64_body

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
)
PNG_PARAMS = {"name": "a.png", "mime_type": "image/png"}


class TestDecodeBase64Body:

    def test_standard_padded_base64(self):
        assert decode_base64_body(base64.b64encode(PNG_BYTES)) == PNG_BYTES

    def test_line_breaks_ignored(self):
        encoded = base64.encodebytes(PNG_BYTES * 4)  # wrapped at 76 chars with \n
        assert b"\n" in encoded
        assert decode_base64_body(encoded.replace(b"\n", b"\r\n")) == PNG_BYTES * 4

    @pytest.mark.parametrize(
        "body",
        [
            b"not base64!",
            b"abc",            # missing padding
            b"YWJj ZGVm",      # embedded space
            b"YWJj-ZGVm",      # URL-safe alphabet
        ],
    )
    def test_invalid_input_rejected(self, body):
        with pytest.raises(InvalidArgumentError, match="Failed to decode image data"):
            decode_base64_body(body)

    def test_empty_body_decodes_to_nothing(self):
        assert decode_base64_body(b"") == b""


class TestUploadImage:

    @pytest.mark.asyncio
    async def test_upload_stores_decoded_bytes(self, test_client, image_store):
        response = await test_client.post(
            "/image", params=PNG_PARAMS, content=base64.b64encode(PNG_BYTES)
        )

        assert response.status_code == 200
        assert response.text == "Image uploaded successfully\n"

        stored = await image_store.download_by_name("a.png")
        assert stored.data == PNG_BYTES
        assert stored.mime_type == "image/png"
        assert stored.created.tzinfo is not None

    @pytest.mark.asyncio
    async def test_upload_returns_identifier(self, test_client, image_store):
        response = await test_client.post(
            "/image", params=PNG_PARAMS, content=base64.b64encode(PNG_BYTES)
        )

        image_id = response.headers["X-Image-Id"]
        assert response.headers["Location"] == f"/image/{image_id}"
        assert str(image_store.images[0].id) == image_id

    @pytest.mark.asyncio
    async def test_invalid_base64_writes_nothing(self, test_client, image_store):
        response = await test_client.post("/image", params=PNG_PARAMS, content=b"%%% not base64 %%%")

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_argument"
        assert image_store.images == []

    @pytest.mark.asyncio
    async def test_missing_fields_stored_as_empty(self, test_client, image_store):
        response = await test_client.post("/image", content=base64.b64encode(b"raw"))

        assert response.status_code == 200
        assert image_store.images[0].name == ""
        assert image_store.images[0].mime_type == ""

    @pytest.mark.asyncio
    async def test_same_name_uploaded_twice_keeps_both(self, test_client, image_store):
        first = await test_client.post("/image", params=PNG_PARAMS, content=base64.b64encode(b"v1"))
        second = await test_client.post("/image", params=PNG_PARAMS, content=base64.b64encode(b"v2"))

        assert first.headers["X-Image-Id"] != second.headers["X-Image-Id"]
        assert len(image_store.images) == 2
        assert (await image_store.download_by_name("a.png")).data == b"v2"

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, test_client, image_store):
        image_store.fail_with = StoreError(message="Failed to save image data")

        response = await test_client.post(
            "/image", params=PNG_PARAMS, content=base64.b64encode(PNG_BYTES)
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to save image data"


class TestDownloadImage:

    @pytest.mark.asyncio
    async def test_download_round_trip(self, test_client):
        uploaded = await test_client.post(
            "/image", params=PNG_PARAMS, content=base64.b64encode(PNG_BYTES)
        )

        response = await test_client.get(uploaded.headers["Location"])

        assert response.status_code == 200
        assert response.content == PNG_BYTES
        assert response.headers["content-type"] == "image/png"
        assert "a.png" in response.headers["content-disposition"]

    @pytest.mark.asyncio
    async def test_download_without_mime_type_is_octet_stream(self, test_client):
        uploaded = await test_client.post("/image", content=base64.b64encode(b"raw"))

        response = await test_client.get(uploaded.headers["Location"])

        assert response.headers["content-type"] == "application/octet-stream"
        assert "content-disposition" not in response.headers

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        response = await test_client.get("/image/0123456789abcdef01234567")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_id_is_400(self, test_client):
        response = await test_client.get("/image/a.png")
        assert response.status_code == 400
