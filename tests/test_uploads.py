import json

import httpx
import pytest

from signoff.client.errors import UploadError
from signoff.client.uploads import ObjectStoreUploader, build_public_url


def _transport(
    presign_status=200,
    presign_body=None,
    put_status=200,
    calls=None,
    presign_path="/api/r2/presign",
):
    calls = calls if calls is not None else []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == presign_path:
            body = presign_body if presign_body is not None else {
                "url": "https://bucket.test/upload/evt/a.gif?sig=1",
                "key": "evt/a.gif",
                "publicUrl": "https://media.test/evt/a.gif",
            }
            return httpx.Response(presign_status, json=body)
        return httpx.Response(put_status)

    return httpx.MockTransport(handler)


async def _upload(transport, public_base_url="", **kwargs):
    async with httpx.AsyncClient(base_url="http://signoff.test", transport=transport) as http:
        uploader = ObjectStoreUploader(http, public_base_url, **kwargs)
        return await uploader.upload("a.gif", "image/gif", b"GIF89a", "evt", "test-token")


class TestObjectStoreUploader:
    @pytest.mark.asyncio
    async def test_presign_then_put(self):
        calls = []
        url = await _upload(_transport(calls=calls))

        assert url == "https://media.test/evt/a.gif"
        presign, put = calls
        assert json.loads(presign.content) == {
            "fileName": "a.gif",
            "fileType": "image/gif",
            "eventId": "evt",
        }
        assert presign.headers["authorization"] == "Bearer test-token"
        assert put.method == "PUT"
        assert put.content == b"GIF89a"
        assert put.headers["content-type"] == "image/gif"

    @pytest.mark.asyncio
    async def test_public_url_from_key(self):
        body = {"uploadUrl": "https://bucket.test/put", "key": "evt/a.gif"}
        url = await _upload(_transport(presign_body=body), "https://media.test/")
        assert url == "https://media.test/evt/a.gif"

    @pytest.mark.asyncio
    async def test_presign_failure(self):
        with pytest.raises(UploadError, match="Unable to prepare upload."):
            await _upload(_transport(presign_status=500))

    @pytest.mark.asyncio
    async def test_missing_upload_url(self):
        with pytest.raises(UploadError, match="Missing upload URL."):
            await _upload(_transport(presign_body={"key": "evt/a.gif"}))

    @pytest.mark.asyncio
    async def test_put_failure(self):
        with pytest.raises(UploadError, match="Upload failed."):
            await _upload(_transport(put_status=403))

    @pytest.mark.asyncio
    async def test_missing_public_url(self):
        body = {"url": "https://bucket.test/put"}
        with pytest.raises(UploadError, match="Missing public asset URL."):
            await _upload(_transport(presign_body=body))

    def test_build_public_url(self):
        assert build_public_url("https://media.test/", "k") == "https://media.test/k"
        assert build_public_url("", "k") == ""

    @pytest.mark.asyncio
    async def test_configured_presign_url(self):
        calls = []
        transport = _transport(calls=calls, presign_path="/v2/presign")
        url = await _upload(transport, presign_url="https://uploads.test/v2/presign")

        assert url == "https://media.test/evt/a.gif"
        assert str(calls[0].url) == "https://uploads.test/v2/presign"
